"""
Middlewares transverses de l'application.
- register_basic_middlewares: session signée (panier), CORS, TrustedHost, en-têtes proxy (adresse client).
- register_admin_gatekeeper: protège le back-office via le cookie admin_token.
- register_security_middleware: en-têtes de sécurité et CSP (SDK PayPal autorisé).
- register_no_cache_middleware: empêche la mise en cache du sous-arbre /admin.
Note: le dernier middleware ajouté s'exécute en premier.
"""
import urllib.parse
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.status import HTTP_303_SEE_OTHER
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from storefront import config
from storefront.errors import ConfigurationError
from storefront.utils.security import COOKIE_NAME, verify_admin_token

PROTECTED_PATHS = (
    "/admin/dashboard",
    "/admin/products",
    "/admin/orders",
    "/admin/pricing",
)
LOGIN_PATH = "/admin"

PAYPAL_SOURCES = ["https://www.paypal.com", "https://www.sandbox.paypal.com", "https://www.paypalobjects.com"]
SWAGGER_CDNS = ["https://cdn.jsdelivr.net", "https://unpkg.com"]

def session_secret_key() -> str:
    """Clé de signature de la session; la clé de dev n'est jamais utilisée en production."""
    if config.SESSION_SECRET_KEY:
        return config.SESSION_SECRET_KEY
    if config.is_production():
        raise ConfigurationError("SESSION_SECRET_KEY environment variable is not configured")
    return config.DEV_SESSION_SECRET_KEY

def forwarded_trusted_hosts() -> list:
    hosts = list(config.FORWARDED_ALLOW_IPS)
    if config.is_production() and "*" in hosts:
        raise ConfigurationError("FORWARDED_ALLOW_IPS must list the proxy addresses in production")
    return hosts

def register_basic_middlewares(app: FastAPI) -> None:
    """
    Ajoute les middlewares « de base »:
    - SessionMiddleware: session cookie signée (itsdangerous) qui porte le panier et la devise.
    - CORSMiddleware: autorise les origines définies (dev/prod).
    - TrustedHostMiddleware: limite les hôtes acceptés (défense host header).
    - ProxyHeadersMiddleware: X-Forwarded-For n'est lu que si le pair direct est un proxy de
      FORWARDED_ALLOW_IPS; request.client.host est alors l'adresse du client.
    """
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key(),
        same_site="lax",
        https_only=config.COOKIE_SECURE,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=config.ALLOWED_HOSTS + ["*"] if "*" in config.CORS_ORIGINS else config.ALLOWED_HOSTS,
    )
    # Ajouté en dernier: réécrit l'adresse client avant tous les autres middlewares
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=forwarded_trusted_hosts())

def is_protected_path(path: str) -> bool:
    return any(path == p or path.startswith(p + "/") for p in PROTECTED_PATHS)

def register_admin_gatekeeper(app: FastAPI) -> None:
    """
    Gatekeeper admin, évalué avant tout handler protégé:
    - jeton absent ou invalide (signature, expiration) -> 303 vers /admin?redirect=<chemin>
    - jeton valide -> request.state.admin = {id, email} puis on continue
    """
    @app.middleware("http")
    async def admin_gatekeeper(request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"
        if is_protected_path(path):
            claims = verify_admin_token(request.cookies.get(COOKIE_NAME))
            if not claims:
                target = urllib.parse.quote(path, safe="")
                return RedirectResponse(url=f"{LOGIN_PATH}?redirect={target}", status_code=HTTP_303_SEE_OTHER)
            request.state.admin = {"id": claims["id"], "email": claims.get("email")}
        return await call_next(request)

def register_security_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)

        # En-têtes de sécurité
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if config.COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")

        # CSP: le SDK PayPal charge scripts et iframes depuis paypal.com
        csp_connect = ["'self'", config.PAYPAL_API_URL] + PAYPAL_SOURCES
        if config.SUPABASE_URL:
            csp_connect.append(config.SUPABASE_URL)
        csp = (
            "default-src 'self'; "
            "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
            f"img-src 'self' data: blob: https:; "
            f"style-src 'self' 'unsafe-inline' {' '.join(SWAGGER_CDNS)}; "
            f"script-src 'self' 'unsafe-inline' {' '.join(SWAGGER_CDNS + PAYPAL_SOURCES)}; "
            f"frame-src {' '.join(PAYPAL_SOURCES)}; "
            f"connect-src {' '.join(csp_connect)}"
        )
        response.headers["Content-Security-Policy"] = csp
        return response

def register_no_cache_middleware(app: FastAPI) -> None:
    """
    Empêche la mise en cache des pages sensibles:
    - S'applique aux GET sur le sous-arbre /admin.
    - Ajoute les en-têtes Cache-Control/Pragma/Expires pour forcer le rechargement.
    """
    @app.middleware("http")
    async def no_cache_for_protected(request: Request, call_next):
        response = await call_next(request)
        path = request.url.path.rstrip("/")
        if request.method == "GET" and path.startswith("/admin"):
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response
