from fastapi import APIRouter, Depends, Response

from storefront.errors import AuthError
from storefront.utils.rate_limit import login_rate_limit
from storefront.utils.security import set_admin_cookie, clear_admin_cookie
from .models import LoginRequest
from .service import login as svc_login

# --- API Router (/api/auth) ---

api_router = APIRouter(prefix="/api/auth", tags=["Auth API"])

@api_router.post("/login", dependencies=[Depends(login_rate_limit)])
def api_login(req: LoginRequest, response: Response):
    """Point d'entrée de connexion admin (API JSON).
    - Rate limit (5 tentatives / 15 min par adresse) évalué avant la validation du corps.
    - Délègue la vérification des identifiants au service (svc_login).
    - Pose le cookie admin_token (HttpOnly, SameSite=Strict, 1 jour).
    """
    result = svc_login(req.email, req.password)
    if not result.success:
        raise AuthError(result.error)
    set_admin_cookie(response, result.token)
    return {"success": True, "message": "Logged in successfully"}

@api_router.post("/logout")
def api_logout(response: Response):
    """Supprime le cookie admin_token; aucune invalidation côté serveur."""
    clear_admin_cookie(response)
    return {"success": True}
