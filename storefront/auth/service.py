import logging
from typing import Optional

import bcrypt

from storefront.utils.security import issue_admin_token
from .models import AuthResponse
from . import repository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Hash factice: garde un temps de réponse comparable quand l'email est inconnu
_DUMMY_HASH = bcrypt.hashpw(b"not-the-password", bcrypt.gensalt(rounds=10))

def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

def check_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        bcrypt.checkpw(password.encode("utf-8"), _DUMMY_HASH)
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("auth.service: malformed password hash in admin storage")
        return False

def login(email: str, password: str) -> AuthResponse:
    """Connexion admin:
    - Recherche l'admin par email via repository
    - Compare le mot de passe au hash bcrypt stocké
    - Même erreur pour email inconnu et mot de passe faux (pas d'énumération)
    - Succès: jeton signé valable 1 jour (ConfigurationError si JWT_SECRET manque)
    """
    admin = repository.get_admin_by_email(email)
    if not check_password(password, (admin or {}).get("password_hash")):
        logger.info("auth.login failed")
        return AuthResponse(False, error=INVALID_CREDENTIALS)

    token = issue_admin_token(admin["id"], admin["email"])
    logger.info("auth.login success admin_id=%s", admin["id"])
    return AuthResponse(True, admin={"id": str(admin["id"]), "email": admin["email"]}, token=token)
