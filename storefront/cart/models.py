"""
Agrégat panier: lignes (produit, taille, matériau, quantité) détenues par le client.

Invariants:
- quantité par ligne <= MAX_QUANTITY_PER_ITEM (plafonnée silencieusement)
- somme des quantités <= MAX_TOTAL_ITEMS (ajout refusé, signalé par AddResult.LIMIT_EXCEEDED;
  mise à jour de quantité plafonnée à la place restante)
- quantité ajoutée strictement positive (ValueError sinon)
Le prix unitaire est indicatif (affichage); il n'est jamais utilisé pour le paiement.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional
import json
import logging
import random
import string
import time

from storefront.pricing.currency import DEFAULT_CURRENCY, is_supported
from .storage import CartStorage

logger = logging.getLogger(__name__)

# module storefront.cart.models
MAX_QUANTITY_PER_ITEM = 10
MAX_TOTAL_ITEMS = 20

_ID_ALPHABET = string.digits + string.ascii_lowercase

_CAMEL = {
    "product_id": "productId",
    "product_name": "productName",
    "product_image": "productImage",
    "size_id": "sizeId",
    "size_dimensions": "sizeDimensions",
    "material_id": "materialId",
    "material_name": "materialName",
    "unit_price": "unitPrice",
}


class AddResult(str, Enum):
    ADDED = "added"
    MERGED = "merged"
    LIMIT_EXCEEDED = "limit_exceeded"


@dataclass
class CartItem:
    id: str
    product_id: str
    size_id: str
    material_id: str
    quantity: int
    unit_price: float
    product_name: str = ""
    product_image: str = ""
    size_dimensions: str = ""
    material_name: str = ""

    @property
    def key(self):
        return (self.product_id, self.size_id, self.material_id)

    def to_dict(self) -> Dict[str, Any]:
        return {_CAMEL.get(k, k): v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItem":
        snake = {v: k for k, v in _CAMEL.items()}
        kwargs = {snake.get(k, k): v for k, v in data.items()}
        item = cls(**kwargs)
        if not isinstance(item.quantity, int) or isinstance(item.quantity, bool) or item.quantity <= 0:
            raise ValueError(f"invalid quantity for cart item {item.id!r}")
        item.unit_price = float(item.unit_price)
        return item


def generate_item_id() -> str:
    """Identifiant opaque: '<timestamp ms>-<9 caractères base36>'."""
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"{int(time.time() * 1000)}-{suffix}"


class Cart:
    def __init__(self, storage: CartStorage, key: str = "cart"):
        self._storage = storage
        self._key = key
        self._items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        raw = self._storage.get(self._key)
        if not raw:
            return []
        try:
            data = json.loads(raw) if isinstance(raw, str) else raw
            if not isinstance(data, list):
                raise ValueError("persisted cart is not a list")
            return [CartItem.from_dict(d) for d in data]
        except (AttributeError, TypeError, ValueError) as e:
            # État corrompu: on repart d'un panier vide plutôt que d'échouer
            logger.warning("cart.load discarded corrupt state key=%s: %s", self._key, e)
            self._storage.set(self._key, json.dumps([]))
            return []

    def _save(self) -> None:
        self._storage.set(self._key, json.dumps([i.to_dict() for i in self._items]))

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def subtotal(self) -> float:
        return sum(i.unit_price * i.quantity for i in self._items)

    def get(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self._items if i.id == item_id), None)

    def add_item(
        self,
        product_id: str,
        size_id: str,
        material_id: str,
        quantity: int,
        unit_price: float,
        **display: Any,
    ) -> AddResult:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
            raise ValueError(f"quantity must be a positive integer, got {quantity!r}")
        if self.item_count + quantity > MAX_TOTAL_ITEMS:
            logger.info("cart.add_item rejected: total limit reached count=%s add=%s", self.item_count, quantity)
            return AddResult.LIMIT_EXCEEDED

        key = (product_id, size_id, material_id)
        existing = next((i for i in self._items if i.key == key), None)
        if existing:
            existing.quantity = min(existing.quantity + quantity, MAX_QUANTITY_PER_ITEM)
            self._save()
            return AddResult.MERGED

        self._items.append(CartItem(
            id=generate_item_id(),
            product_id=product_id,
            size_id=size_id,
            material_id=material_id,
            quantity=min(quantity, MAX_QUANTITY_PER_ITEM),
            unit_price=float(unit_price),
            **display,
        ))
        self._save()
        return AddResult.ADDED

    def remove_item(self, item_id: str) -> None:
        remaining = [i for i in self._items if i.id != item_id]
        if len(remaining) != len(self._items):
            self._items = remaining
            self._save()

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return
        item = self.get(item_id)
        if item:
            # Plafond par ligne puis plafond global (les autres lignes restent inchangées)
            others = self.item_count - item.quantity
            item.quantity = max(1, min(quantity, MAX_QUANTITY_PER_ITEM, MAX_TOTAL_ITEMS - others))
            self._save()

    def clear(self) -> None:
        self._items = []
        self._save()

    def to_order_items(self) -> List[Dict[str, Any]]:
        """Lignes envoyées au checkout (sans prix: le serveur recalcule tout)."""
        return [
            {"productId": i.product_id, "sizeId": i.size_id, "materialId": i.material_id, "quantity": i.quantity}
            for i in self._items
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self._items],
            "subtotal": self.subtotal,
            "itemCount": self.item_count,
        }


def get_currency(storage: CartStorage, key: str = "currency") -> str:
    saved = storage.get(key)
    if isinstance(saved, str) and is_supported(saved):
        return saved
    return DEFAULT_CURRENCY


def set_currency(storage: CartStorage, code: str, key: str = "currency") -> bool:
    if not is_supported(code):
        return False
    storage.set(key, code)
    return True
