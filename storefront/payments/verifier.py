"""
Vérification serveur du prix d'un panier.

Le total est recalculé depuis la table de tarification et les prix de base produits
(source serveur), indépendamment du montant envoyé par le client. Les erreurs sont
collectées ligne par ligne; seul le dépassement du nombre total d'articles interrompt
le parcours.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence
import logging

from storefront.cart.models import MAX_QUANTITY_PER_ITEM, MAX_TOTAL_ITEMS
from storefront.errors import InvalidOrderError, PriceMismatchError
from storefront.pricing.table import PRICING, PRICE_TOLERANCE, SHIPPING_COST_USD, PricingTable, calculate_price

logger = logging.getLogger(__name__)


@dataclass
class ItemDetail:
    product_id: str
    size_id: str
    material_id: str
    calculated_price: float
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "sizeId": self.size_id,
            "materialId": self.material_id,
            "calculatedPrice": self.calculated_price,
            "quantity": self.quantity,
        }


@dataclass
class ServerCalculation:
    subtotal: float = 0
    shipping: float = SHIPPING_COST_USD
    total: float = 0
    per_item: List[ItemDetail] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "total": self.total,
            "perItem": [d.to_dict() for d in self.per_item],
            "errors": list(self.errors),
        }


def _field(item: Mapping[str, Any], camel: str, snake: str) -> Any:
    value = item.get(camel)
    return item.get(snake) if value is None else value


# module storefront.payments.verifier
def verify(
    items: Sequence[Mapping[str, Any]],
    product_prices: Mapping[str, float],
    table: PricingTable = PRICING,
) -> ServerCalculation:
    """
    Recalcule le total d'une commande.
    - items: [{productId, sizeId, materialId, quantity}, ...] (tout champ 'price' est ignoré)
    - product_prices: {product_id: base_price} issu du repository produits
    Retour: ServerCalculation (errors non vide => commande rejetée avant tout appel PayPal).
    """
    calc = ServerCalculation()
    total_quantity = 0

    for item in items:
        product_id = str(_field(item, "productId", "product_id") or "")
        size_id = str(_field(item, "sizeId", "size_id") or "")
        material_id = str(_field(item, "materialId", "material_id") or "")
        quantity = item.get("quantity")

        base_price = product_prices.get(product_id)
        if base_price is None:
            calc.errors.append(f"Invalid product ID: {product_id}")
            continue
        if not table.find_size(size_id):
            calc.errors.append(f"Invalid size ID: {size_id}")
            continue
        if not table.find_material(material_id):
            calc.errors.append(f"Invalid material ID: {material_id}")
            continue
        if not isinstance(quantity, int) or isinstance(quantity, bool) or not 1 <= quantity <= MAX_QUANTITY_PER_ITEM:
            calc.errors.append(f"Invalid quantity for product {product_id}")
            continue

        total_quantity += quantity
        if total_quantity > MAX_TOTAL_ITEMS:
            calc.errors.append(f"Too many items in order (max {MAX_TOTAL_ITEMS})")
            break

        unit_price = calculate_price(size_id, material_id, base_price, table)
        calc.subtotal += unit_price * quantity
        calc.per_item.append(ItemDetail(product_id, size_id, material_id, unit_price, quantity))

    calc.shipping = SHIPPING_COST_USD
    calc.total = calc.subtotal + calc.shipping
    return calc


def check_client_amount(calc: ServerCalculation, client_amount: float, tolerance: float = PRICE_TOLERANCE) -> float:
    """
    Valide le calcul puis compare au montant client.
    - Erreurs de lignes => InvalidOrderError (400, détails)
    - Écart > tolérance => PriceMismatchError (400, expose le total serveur)
    Retourne le total serveur, seul montant utilisé ensuite.
    """
    if calc.errors:
        raise InvalidOrderError("Invalid order", details=list(calc.errors))
    if abs(client_amount - calc.total) > tolerance:
        logger.warning("payments.verifier price mismatch client=%s server=%s", client_amount, calc.total)
        raise PriceMismatchError(server_total=calc.total, client_amount=client_amount)
    return calc.total
