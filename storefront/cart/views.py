"""
Panier de session (API JSON). L'état est recopié dans la session signée à chaque mutation.
Le prix unitaire affiché est dérivé côté serveur (chemin d'affichage, non autoritaire).
"""
from typing import Any, Dict
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from storefront.errors import ValidationError
from storefront.pricing.currency import convert_currency, format_price
from storefront.pricing.table import PRICING, SHIPPING_COST_USD, derive_price
from storefront.products import repository as products_repository
from .models import AddResult, Cart, MAX_TOTAL_ITEMS, get_currency, set_currency
from .storage import SessionStorage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


class AddItemRequest(BaseModel):
    productId: str = Field(min_length=1, max_length=64)
    sizeId: str = Field(min_length=1, max_length=32)
    materialId: str = Field(min_length=1, max_length=32)
    quantity: int = Field(default=1, ge=1, le=MAX_TOTAL_ITEMS)


class UpdateQuantityRequest(BaseModel):
    quantity: int


class CurrencyRequest(BaseModel):
    currency: str = Field(min_length=3, max_length=3)


def _storage(request: Request) -> SessionStorage:
    return SessionStorage(request.session)

def _payload(request: Request, cart: Cart) -> Dict[str, Any]:
    currency = get_currency(_storage(request))
    data = cart.to_dict()
    data["shipping"] = SHIPPING_COST_USD
    data["total"] = cart.subtotal + SHIPPING_COST_USD if cart.items else 0
    data["currency"] = currency
    data["display"] = {
        "subtotal": format_price(convert_currency(cart.subtotal, currency), currency),
        "total": format_price(convert_currency(data["total"], currency), currency),
    }
    return data

# module storefront.cart.views
@router.get("")
def get_cart(request: Request):
    return _payload(request, Cart(_storage(request)))

@router.post("/items")
def add_item(body: AddItemRequest, request: Request):
    """
    Ajoute une ligne (fusion sur produit/taille/matériau, quantité plafonnée à 10).
    - 404 produit inconnu; 409 si le total dépasserait 20 articles.
    """
    product = products_repository.get_product(body.productId)
    if not product or not product.get("active"):
        return JSONResponse({"error": "Product not found"}, status_code=404)
    size = PRICING.find_size(body.sizeId)
    material = PRICING.find_material(body.materialId)
    if not size or not material:
        raise ValidationError("Invalid size or material")

    cart = Cart(_storage(request))
    result = cart.add_item(
        body.productId,
        body.sizeId,
        body.materialId,
        body.quantity,
        derive_price(body.sizeId, body.materialId, product["basePrice"]),
        product_name=product.get("name") or "",
        product_image=product.get("imageUrl") or "",
        size_dimensions=size.dimensions,
        material_name=material.name(),
    )
    if result is AddResult.LIMIT_EXCEEDED:
        logger.info("cart.add_item refused: limit reached product_id=%s", body.productId)
        return JSONResponse(
            {"error": "Cart limit reached", "details": f"Maximum {MAX_TOTAL_ITEMS} items per order"},
            status_code=409,
        )
    return {"result": result.value, **_payload(request, cart)}

@router.patch("/items/{item_id}")
def update_item(item_id: str, body: UpdateQuantityRequest, request: Request):
    cart = Cart(_storage(request))
    cart.update_quantity(item_id, body.quantity)
    return _payload(request, cart)

@router.delete("/items/{item_id}")
def remove_item(item_id: str, request: Request):
    cart = Cart(_storage(request))
    cart.remove_item(item_id)
    return _payload(request, cart)

@router.delete("")
def clear_cart(request: Request):
    cart = Cart(_storage(request))
    cart.clear()
    return _payload(request, cart)

@router.put("/currency")
def update_currency(body: CurrencyRequest, request: Request):
    if not set_currency(_storage(request), body.currency.upper()):
        raise ValidationError(f"Unsupported currency: {body.currency}")
    return _payload(request, Cart(_storage(request)))
