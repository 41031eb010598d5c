"""
Table de tarification (configuration immuable, partagée par tout le process).

Prix = prix de base × multiplicateur taille × multiplicateur matériau, arrondi à l'unité.
Deux points d'entrée sur le même calcul:
- derive_price: affichage, tolérant (id inconnu => prix de base inchangé)
- calculate_price: vérification, strict (id inconnu => UnknownPricingIdError)
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from storefront.errors import UnknownPricingIdError

# module storefront.pricing.table
SHIPPING_COST_USD = 10
PRICE_TOLERANCE = 0.02
DEFAULT_SIZE_ID = "small"


@dataclass(frozen=True)
class SizeOption:
    id: str
    dimensions: str
    label: str
    multiplier: float


@dataclass(frozen=True)
class MaterialOption:
    id: str
    names: Dict[str, str] = field(hash=False)
    multiplier: float = 1.0

    def name(self, lang: str = "en") -> str:
        return self.names.get(lang) or self.names.get("en") or self.id


def round_half_up(value: float) -> int:
    """Arrondi commercial (0.5 => unité supérieure), contrairement à round() de Python."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PricingTable:
    def __init__(self, sizes: List[SizeOption], materials: List[MaterialOption], base_prices: Dict[str, float]):
        for kind, options in (("size", sizes), ("material", materials)):
            ids = [o.id for o in options]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate {kind} id in pricing table")
            if any(o.multiplier <= 0 for o in options):
                raise ValueError(f"Non-positive {kind} multiplier in pricing table")
        self._sizes: Tuple[SizeOption, ...] = tuple(sizes)
        self._materials: Tuple[MaterialOption, ...] = tuple(materials)
        self._base_prices = dict(base_prices)

    @property
    def sizes(self) -> Tuple[SizeOption, ...]:
        return self._sizes

    @property
    def materials(self) -> Tuple[MaterialOption, ...]:
        return self._materials

    def base_price(self, size_id: str = DEFAULT_SIZE_ID) -> float:
        return self._base_prices.get(size_id, self._base_prices[DEFAULT_SIZE_ID])

    def find_size(self, size_id: str) -> Optional[SizeOption]:
        return next((s for s in self._sizes if s.id == size_id), None)

    def find_material(self, material_id: str) -> Optional[MaterialOption]:
        return next((m for m in self._materials if m.id == material_id), None)

    def to_dict(self, lang: str = "en") -> Dict[str, object]:
        return {
            "sizes": [
                {"id": s.id, "dimensions": s.dimensions, "label": s.label, "multiplier": s.multiplier}
                for s in self._sizes
            ],
            "materials": [
                {"id": m.id, "name": m.name(lang), "multiplier": m.multiplier}
                for m in self._materials
            ],
            "basePrice": self.base_price(),
            "shipping": SHIPPING_COST_USD,
        }


PRICING = PricingTable(
    sizes=[
        SizeOption("small", "20x30", "20x30 cm", 1.0),
        SizeOption("medium", "40x60", "40x60 cm", 2.0),
        SizeOption("large", "60x90", "60x90 cm", 4.0),
    ],
    materials=[
        MaterialOption("canvas", {"en": "Canvas", "he": "קנבס", "ru": "Холст"}, 1.0),
        MaterialOption("framed", {"en": "Framed Print", "he": "הדפס ממוסגר", "ru": "В раме"}, 1.2),
        MaterialOption("paper_glossy", {"en": "Photo Paper (Glossy)", "he": "נייר צילום (מבריק)", "ru": "Фотобумага (глянец)"}, 0.6),
        MaterialOption("paper_matte", {"en": "Photo Paper (Matte)", "he": "נייר צילום (מט)", "ru": "Фотобумага (матовая)"}, 0.6),
        MaterialOption("metal", {"en": "Metal Print", "he": "הדפס מתכת", "ru": "На металле"}, 1.6),
        MaterialOption("acrylic", {"en": "Acrylic Print", "he": "הדפס אקרילי", "ru": "На акриле"}, 1.8),
        MaterialOption("wood", {"en": "Wood Print", "he": "הדפס עץ", "ru": "На дереве"}, 1.4),
    ],
    base_prices={"small": 50, "medium": 100, "large": 200},
)


def _multiply(size: SizeOption, material: MaterialOption, base_price: float) -> int:
    return round_half_up(base_price * size.multiplier * material.multiplier)


def derive_price(size_id: str, material_id: str, base_price: Optional[float] = None, table: PricingTable = PRICING) -> float:
    """
    Prix d'affichage (non autoritaire).
    - Taille ou matériau inconnu: retourne base_price tel quel, sans erreur.
    - Ne lève jamais.
    """
    if base_price is None:
        base_price = table.base_price()
    size = table.find_size(size_id)
    material = table.find_material(material_id)
    if not size or not material:
        return base_price
    return _multiply(size, material, base_price)


def calculate_price(size_id: str, material_id: str, base_price: float, table: PricingTable = PRICING) -> int:
    """Prix autoritaire (vérification serveur): un id inconnu est une erreur de validation."""
    size = table.find_size(size_id)
    if not size:
        raise UnknownPricingIdError(f"Invalid size ID: {size_id}")
    material = table.find_material(material_id)
    if not material:
        raise UnknownPricingIdError(f"Invalid material ID: {material_id}")
    return _multiply(size, material, base_price)


def price_matrix(base_price: Optional[float] = None, table: PricingTable = PRICING) -> List[Dict[str, object]]:
    """Grille taille × matériau (aperçu admin et page tarifs)."""
    if base_price is None:
        base_price = table.base_price()
    rows: List[Dict[str, object]] = []
    for material in table.materials:
        rows.append({
            "materialId": material.id,
            "prices": {size.id: _multiply(size, material, base_price) for size in table.sizes},
        })
    return rows
