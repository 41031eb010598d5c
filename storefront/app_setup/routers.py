"""
Registre central des routers (API v1, paiements, auth, admin, health).
"""
from fastapi import FastAPI
from storefront.pricing.views import router as pricing_router
from storefront.cart.views import router as cart_router
from storefront.payments import views as payments_views
from storefront.auth.views import api_router as auth_api_router
from storefront.admin.views import router as admin_router
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API publique
    app.include_router(pricing_router)
    app.include_router(cart_router)
    app.include_router(payments_views.router)
    # Auth & admin
    app.include_router(auth_api_router)
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
