"""
Accès aux comptes admin.
- Supabase (table 'admins': id, email, password_hash) si configuré
- Sinon l'identifiant unique partagé ADMIN_EMAIL / ADMIN_PASSWORD_HASH
"""
from typing import Any, Dict, Optional
import logging

import storefront.infra.supabase_client as supabase_client
from storefront import config

logger = logging.getLogger(__name__)

ENV_ADMIN_ID = "admin"

def get_admin_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Retourne {id, email, password_hash} ou None (email inconnu)."""
    email = (email or "").strip().lower()
    if not email:
        return None
    if supabase_client.is_configured():
        try:
            res = (
                supabase_client.get_service_supabase()
                .table("admins")
                .select("id, email, password_hash")
                .eq("email", email)
                .limit(1)
                .execute()
            )
            rows = res.data or []
            return rows[0] if rows else None
        except Exception:
            logger.exception("auth.repository.get_admin_by_email failed")
            return None
    if config.ADMIN_EMAIL and config.ADMIN_PASSWORD_HASH and email == config.ADMIN_EMAIL:
        return {"id": ENV_ADMIN_ID, "email": config.ADMIN_EMAIL, "password_hash": config.ADMIN_PASSWORD_HASH}
    return None
