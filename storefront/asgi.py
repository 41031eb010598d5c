"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: uvicorn workers) importe `storefront.asgi:app`.
- Toute la configuration (routes, middlewares, sécurité) est centralisée dans storefront.app_setup.
"""

from storefront.app import app
