"""
Jeton admin signé (PyJWT, HS256) et cookie associé.
- Émission: {id, email, iat, exp = iat + 1 jour}
- Vérification: signature + expiration; aucune révocation côté serveur
"""
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
import logging

import jwt
from fastapi import Request
from fastapi.responses import Response

from storefront import config
from storefront.errors import ConfigurationError

logger = logging.getLogger(__name__)

COOKIE_NAME = "admin_token"
TOKEN_TTL = timedelta(days=1)
JWT_ALGORITHM = "HS256"

def get_jwt_secret() -> str:
    secret = config.JWT_SECRET
    if not secret:
        raise ConfigurationError("JWT_SECRET environment variable is not configured")
    return secret

def issue_admin_token(admin_id: str, email: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "id": str(admin_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + TOKEN_TTL).timestamp()),
    }
    return jwt.encode(payload, get_jwt_secret(), algorithm=JWT_ALGORITHM)

def verify_admin_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Retourne les claims si le jeton est valide, None sinon (absent, signature, expiré)."""
    if not token:
        return None
    try:
        claims = jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except ConfigurationError:
        logger.error("JWT_SECRET not configured: admin token rejected")
        return None
    except jwt.PyJWTError as e:
        logger.info("admin token rejected: %s", e)
        return None
    if not claims.get("id"):
        return None
    return claims

def set_admin_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="strict",
        max_age=int(TOKEN_TTL.total_seconds()),
        path="/",
    )

def clear_admin_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path="/", httponly=True, samesite="strict", secure=config.COOKIE_SECURE)

def get_current_admin(request: Request) -> Optional[Dict[str, Any]]:
    """Admin courant: posé par le gatekeeper, sinon lu depuis le cookie."""
    admin = getattr(request.state, "admin", None)
    if admin:
        return admin
    claims = verify_admin_token(request.cookies.get(COOKIE_NAME))
    if not claims:
        return None
    return {"id": claims["id"], "email": claims.get("email")}
