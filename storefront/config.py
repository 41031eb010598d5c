# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (PayPal, JWT, Supabase, Redis)
- Expose l'environnement de déploiement (APP_ENV) qui conditionne le mode démo
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _flag(name: str, default: str = "false") -> bool:
    return _clean_env(os.getenv(name, default)).lower() in ("1", "true", "yes")

# Environnement: "production" interdit le mode démo PayPal
APP_ENV = _clean_env(os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").lower()

def is_production() -> bool:
    return APP_ENV == "production"

# PayPal: mode sandbox/live et identifiants client
PAYPAL_MODE = _clean_env(os.getenv("PAYPAL_MODE") or "sandbox").lower()
PAYPAL_CLIENT_ID = _clean_env(os.getenv("PAYPAL_CLIENT_ID") or os.getenv("NEXT_PUBLIC_PAYPAL_CLIENT_ID") or "")
PAYPAL_CLIENT_SECRET = _clean_env(os.getenv("PAYPAL_CLIENT_SECRET") or "")
PAYPAL_API_URL = "https://api-m.paypal.com" if PAYPAL_MODE == "live" else "https://api-m.sandbox.paypal.com"
PAYPAL_TIMEOUT_SECONDS = float(os.getenv("PAYPAL_TIMEOUT_SECONDS", "10"))
PAYPAL_BRAND_NAME = os.getenv("PAYPAL_BRAND_NAME", "Felix Shtein")

# URL publique (retours PayPal)
PUBLIC_BASE_URL = _clean_env(os.getenv("PUBLIC_BASE_URL") or os.getenv("NEXT_PUBLIC_APP_URL") or "http://localhost:8000").rstrip("/")

# Cookies / sécurité admin
JWT_SECRET = _clean_env(os.getenv("JWT_SECRET") or "")
COOKIE_SECURE = _flag("COOKIE_SECURE", "true" if is_production() else "false")
ADMIN_EMAIL = _clean_env(os.getenv("ADMIN_EMAIL") or "").lower()
# Hash bcrypt du mot de passe admin (voir generate_hash.py), jamais de mot de passe en clair
ADMIN_PASSWORD_HASH = _clean_env(os.getenv("ADMIN_PASSWORD_HASH") or "")

# Supabase (optionnel): produits, commandes, comptes admin
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Rate limiting: Redis partagé si défini, sinon mémoire locale (mono-instance)
RATE_LIMIT_REDIS_URL = _clean_env(os.getenv("RATE_LIMIT_REDIS_URL") or "")

# Session signée (porte le panier côté client); obligatoire en production
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "")
DEV_SESSION_SECRET_KEY = "replace_me_with_a_long_random_secret"

# CORS / hôtes
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

# Proxys dont on accepte X-Forwarded-For (adresse client du rate limit); "*" refusé en production
FORWARDED_ALLOW_IPS = [h.strip() for h in os.getenv("FORWARDED_ALLOW_IPS", "127.0.0.1").split(",") if h.strip()]
