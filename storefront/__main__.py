"""
Lancement local de la boutique d'art mural: `python -m storefront`.

Sans PAYPAL_CLIENT_ID/PAYPAL_CLIENT_SECRET (et hors APP_ENV=production) le checkout
tourne en mode démo: ids DEMO-..., aucun appel réseau. L'accès au back-office /admin
demande ADMIN_EMAIL et ADMIN_PASSWORD_HASH (voir `python generate_hash.py`) ainsi que JWT_SECRET.

Variables lues ici: PORT (8000), HOST (127.0.0.1), UVICORN_RELOAD, LOG_LEVEL.
Les en-têtes X-Forwarded-For sont traités par l'application (FORWARDED_ALLOW_IPS),
pas par uvicorn.
"""
import os

import uvicorn

if __name__ == "__main__":
    reload_flag = os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    uvicorn.run(
        "storefront.asgi:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", 8000)),
        reload=reload_flag,
        log_level=os.environ.get("LOG_LEVEL", "info"),
        proxy_headers=False,
    )
