"""
Factory d'application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from typing import Optional
from fastapi import FastAPI

from storefront import __version__
from storefront.payments.gateway import PaymentGateway, select_gateway
from storefront.utils.rate_limit import RateLimitStore
from .lifespan import lifespan
from .middlewares import (
    register_admin_gatekeeper,
    register_basic_middlewares,
    register_no_cache_middleware,
    register_security_middleware,
)
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app(
    payment_gateway: Optional[PaymentGateway] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - passerelle de paiement (PayPal ou démo), choisie une fois au chargement
      - gatekeeper admin, en-têtes de sécurité, no-cache, middlewares de base
      - gestionnaires d'exceptions et routers
    Les dépendances injectées servent aux tests (passerelle factice, store à horloge contrôlée).
    Lève ConfigurationError si la passerelle démo est demandée en production.
    """
    app = FastAPI(title="Wall Art Storefront", version=__version__, lifespan=lifespan)
    app.state.payment_gateway = payment_gateway or select_gateway()
    app.state.rate_limit_store = rate_limit_store
    register_admin_gatekeeper(app)
    register_security_middleware(app)
    register_no_cache_middleware(app)
    # Ajoutés en dernier pour s'exécuter en premier (session disponible partout)
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routers(app)
    return app
