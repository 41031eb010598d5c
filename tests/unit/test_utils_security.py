from datetime import datetime, timedelta, timezone

import jwt
import pytest

from storefront import config
from storefront.errors import ConfigurationError
from storefront.utils.security import (
    JWT_ALGORITHM,
    TOKEN_TTL,
    get_jwt_secret,
    issue_admin_token,
    verify_admin_token,
)


def test_issued_token_carries_identity_and_one_day_expiry():
    now = datetime.now(timezone.utc)
    claims = verify_admin_token(issue_admin_token("admin", "admin@example.com", now=now))
    assert claims["id"] == "admin"
    assert claims["email"] == "admin@example.com"
    assert claims["exp"] - claims["iat"] == int(TOKEN_TTL.total_seconds())


def test_expired_token_is_rejected():
    issued = datetime.now(timezone.utc) - TOKEN_TTL - timedelta(seconds=5)
    assert verify_admin_token(issue_admin_token("admin", "admin@example.com", now=issued)) is None


def test_token_signed_with_another_secret_is_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    forged = jwt.encode({"id": "admin", "iat": now, "exp": now + 60}, "other-secret", algorithm=JWT_ALGORITHM)
    assert verify_admin_token(forged) is None


def test_token_without_expiry_is_rejected():
    token = jwt.encode({"id": "admin"}, config.JWT_SECRET, algorithm=JWT_ALGORITHM)
    assert verify_admin_token(token) is None


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_missing_or_garbage_token_is_rejected(token):
    assert verify_admin_token(token) is None


def test_missing_secret_is_a_configuration_error(monkeypatch):
    token = issue_admin_token("admin", "admin@example.com")
    monkeypatch.setattr(config, "JWT_SECRET", "")
    with pytest.raises(ConfigurationError):
        get_jwt_secret()
    with pytest.raises(ConfigurationError):
        issue_admin_token("admin", "admin@example.com")
    # côté vérification: jamais authentifié sans secret
    assert verify_admin_token(token) is None
