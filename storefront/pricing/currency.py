"""
Conversion de devises pour l'affichage uniquement (aucun règlement multi-devises).
Les montants autoritaires restent en USD.
"""
from typing import Dict

from .table import round_half_up

CURRENCIES: Dict[str, Dict[str, object]] = {
    "USD": {"symbol": "$", "rate": 1, "label": "USD"},
    "ILS": {"symbol": "₪", "rate": 3.7, "label": "ILS"},
}
DEFAULT_CURRENCY = "USD"


def is_supported(code: str) -> bool:
    return code in CURRENCIES


def convert_currency(price_usd: float, to_currency: str) -> int:
    rate = CURRENCIES.get(to_currency, CURRENCIES[DEFAULT_CURRENCY])["rate"]
    return round_half_up(price_usd * rate)


def format_price(price: float, currency: str = DEFAULT_CURRENCY) -> str:
    symbol = CURRENCIES.get(currency, CURRENCIES[DEFAULT_CURRENCY])["symbol"]
    if float(price).is_integer():
        return f"{symbol}{int(price):,}"
    return f"{symbol}{price:,.2f}"
