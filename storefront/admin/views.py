"""
Back-office admin (JSON): tableau de bord, commandes, produits, aperçu des prix.
Les chemins /admin/dashboard, /admin/orders, /admin/products, /admin/pricing sont
protégés par le gatekeeper (app_setup.middlewares.register_admin_gatekeeper).
"""
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.errors import ValidationError
from storefront.payments import repository as orders_repository
from storefront.pricing.table import PRICING, SHIPPING_COST_USD, price_matrix
from storefront.products import repository as products_repository
from storefront.utils.security import get_current_admin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])


class ProductIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    basePrice: float = Field(gt=0, le=100000)
    imageUrl: str = Field(default="", max_length=500)
    active: bool = True


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    basePrice: Optional[float] = Field(default=None, gt=0, le=100000)
    imageUrl: Optional[str] = Field(default=None, max_length=500)
    active: Optional[bool] = None


@router.get("")
def admin_login_page(request: Request, redirect: Optional[str] = None):
    """Page de connexion (rendu hors périmètre): indique la cible post-login."""
    target = redirect if redirect and redirect.startswith("/admin/") else "/admin/dashboard"
    return {"authenticated": get_current_admin(request) is not None, "redirect": target}

@router.get("/dashboard")
def admin_dashboard(request: Request):
    products = products_repository.list_products()
    return {
        "admin": get_current_admin(request),
        "orders_count": orders_repository.count_orders(),
        "products_count": len(products),
        "active_products_count": len([p for p in products if p.get("active")]),
    }

@router.get("/orders")
def admin_list_orders(limit: int = Query(default=100, ge=1, le=500)):
    return JSONResponse({"items": orders_repository.list_orders(limit=limit)})

@router.get("/products")
def admin_list_products():
    return JSONResponse({"items": products_repository.list_products()})

@router.post("/products", status_code=201)
def admin_create_product(body: ProductIn):
    created = products_repository.create_product(body.model_dump())
    if not created:
        return JSONResponse({"ok": False, "error": "Product not created"}, status_code=400)
    logger.info("admin.create_product id=%s", created.get("id"))
    return {"ok": True, "item": created}

@router.put("/products/{product_id}")
def admin_update_product(product_id: str, body: ProductUpdate):
    data: Dict[str, Any] = body.model_dump(exclude_none=True)
    if not data:
        raise ValidationError("Nothing to update")
    updated = products_repository.update_product(product_id, data)
    if not updated:
        return JSONResponse({"ok": False, "error": "Product not found"}, status_code=404)
    return {"ok": True, "item": updated}

@router.get("/pricing")
def admin_pricing_preview(
    base_price: Optional[float] = Query(default=None, gt=0, le=100000),
    shipping: float = Query(default=SHIPPING_COST_USD, ge=0),
):
    """Aperçu de la grille: prix = base × multiplicateur taille × multiplicateur matériau."""
    base = base_price if base_price is not None else PRICING.base_price()
    return {
        **PRICING.to_dict(),
        "basePrice": base,
        "shipping": shipping,
        "matrix": price_matrix(base),
    }
