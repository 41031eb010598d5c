from typing import Optional

from fastapi import APIRouter, Query

from storefront.errors import ValidationError
from .currency import CURRENCIES, DEFAULT_CURRENCY, convert_currency, format_price, is_supported
from .table import PRICING, SHIPPING_COST_USD, price_matrix

router = APIRouter(prefix="/api/v1/pricing", tags=["Pricing API"])

# module storefront.pricing.views
@router.get("")
def get_pricing(
    currency: str = Query(default=DEFAULT_CURRENCY, min_length=3, max_length=3),
    base_price: Optional[float] = Query(default=None, gt=0, le=100000),
    lang: str = Query(default="en", max_length=5),
):
    """
    Table de tarification publique (affichage).
    - Prix en USD (autoritaires) et convertis dans la devise d'affichage demandée.
    """
    currency = currency.upper()
    if not is_supported(currency):
        raise ValidationError(f"Unsupported currency: {currency}")
    base = base_price if base_price is not None else PRICING.base_price()
    matrix = price_matrix(base)
    for row in matrix:
        row["display"] = {
            size_id: format_price(convert_currency(price, currency), currency)
            for size_id, price in row["prices"].items()
        }
    return {
        **PRICING.to_dict(lang),
        "basePrice": base,
        "currency": currency,
        "currencies": sorted(CURRENCIES),
        "shippingDisplay": format_price(convert_currency(SHIPPING_COST_USD, currency), currency),
        "matrix": matrix,
    }
