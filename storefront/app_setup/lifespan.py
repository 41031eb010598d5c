"""
Lifespan FastAPI: initialisation/arrêt des ressources partagées.
- Store de rate limiting: Redis si RATE_LIMIT_REDIS_URL est défini, sinon mémoire locale.
- Un store déjà posé sur app.state (tests) est conservé tel quel.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from storefront import config
from storefront.utils.rate_limit import InMemoryRateLimitStore, create_store

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("uvicorn.error")
    if getattr(app.state, "rate_limit_store", None) is None:
        try:
            app.state.rate_limit_store = create_store(config.RATE_LIMIT_REDIS_URL)
        except Exception as e:
            # URL Redis invalide: on garde une limite locale plutôt qu'aucune limite
            app.state.rate_limit_store = InMemoryRateLimitStore()
            logger.warning(f"Rate limiting falling back to local in-memory due to init error: {e}")
    logger.info(f"Rate limiting enabled (backend={app.state.rate_limit_store.backend})")
    logger.info(f"Payment gateway mode: {app.state.payment_gateway.mode}")

    yield

    store = app.state.rate_limit_store
    client = getattr(store, "_redis", None)
    if client is not None:
        client.close()
