"""
Accès aux données pour la feature 'products'.
Source de vérité des prix de base côté serveur (jamais le prix envoyé par le client).
- Supabase (table 'products') si configuré
- Sinon catalogue local du process, initialisé depuis DEFAULT_PRODUCTS
"""
from typing import Any, Dict, List, Optional
import logging
import threading

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module storefront.products.repository
DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Abstract Sunset", "basePrice": 50, "imageUrl": "/assets/image1.jpg", "active": True},
    {"id": "2", "name": "Mountain Serenity", "basePrice": 50, "imageUrl": "/assets/image2.jpg", "active": True},
    {"id": "3", "name": "Urban Dreams", "basePrice": 50, "imageUrl": "/assets/placeholder1.jpg", "active": True},
    {"id": "4", "name": "Ocean Waves", "basePrice": 50, "imageUrl": "/assets/placeholder2.jpg", "active": True},
]

_local_catalog: Dict[str, Dict[str, Any]] = {p["id"]: dict(p) for p in DEFAULT_PRODUCTS}
_lock = threading.Lock()

def _from_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(row.get("id")),
        "name": row.get("name") or "",
        "basePrice": float(row.get("base_price") or 0),
        "imageUrl": row.get("image_url") or "",
        "active": bool(row.get("active", True)),
    }

def _to_row(data: Dict[str, Any]) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    if "name" in data:
        row["name"] = data["name"]
    if "basePrice" in data:
        row["base_price"] = data["basePrice"]
    if "imageUrl" in data:
        row["image_url"] = data["imageUrl"]
    if "active" in data:
        row["active"] = data["active"]
    return row

def reset_local_catalog() -> None:
    """Réinitialise le catalogue local (tests, scripts)."""
    with _lock:
        _local_catalog.clear()
        _local_catalog.update({p["id"]: dict(p) for p in DEFAULT_PRODUCTS})

def list_products(include_inactive: bool = True) -> List[Dict[str, Any]]:
    if supabase_client.is_configured():
        try:
            res = supabase_client.get_supabase().table("products").select("*").execute()
            products = [_from_row(r) for r in (res.data or [])]
        except Exception:
            logger.exception("products.repository.list_products failed")
            return []
    else:
        with _lock:
            products = [dict(p) for p in _local_catalog.values()]
    if include_inactive:
        return products
    return [p for p in products if p.get("active")]

def get_product(product_id: str) -> Optional[Dict[str, Any]]:
    if not product_id:
        return None
    if supabase_client.is_configured():
        try:
            res = (
                supabase_client.get_supabase()
                .table("products")
                .select("*")
                .eq("id", product_id)
                .limit(1)
                .execute()
            )
            rows = res.data or []
            return _from_row(rows[0]) if rows else None
        except Exception:
            logger.exception("products.repository.get_product failed id=%s", product_id)
            return None
    with _lock:
        product = _local_catalog.get(str(product_id))
        return dict(product) if product else None

def get_price_table() -> Dict[str, float]:
    """
    Retourne {product_id: base_price} pour les produits actifs.
    Utilisé par le vérificateur de prix: seul ce tableau fait foi.
    """
    return {p["id"]: float(p["basePrice"]) for p in list_products(include_inactive=False)}

def create_product(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if supabase_client.is_configured():
        try:
            res = supabase_client.get_service_supabase().table("products").insert(_to_row(data)).execute()
            rows = getattr(res, "data", None) or []
            return _from_row(rows[0]) if rows else None
        except Exception:
            logger.exception("products.repository.create_product failed data=%s", data)
            return None
    with _lock:
        new_id = str(max((int(k) for k in _local_catalog if k.isdigit()), default=0) + 1)
        product = {"id": new_id, "name": "", "basePrice": 0.0, "imageUrl": "", "active": True}
        product.update({k: v for k, v in data.items() if k in product and k != "id"})
        _local_catalog[new_id] = product
        return dict(product)

def update_product(product_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if supabase_client.is_configured():
        try:
            res = (
                supabase_client.get_service_supabase()
                .table("products")
                .update(_to_row(data))
                .eq("id", product_id)
                .execute()
            )
            rows = getattr(res, "data", None) or []
            return _from_row(rows[0]) if rows else None
        except Exception:
            logger.exception("products.repository.update_product failed id=%s data=%s", product_id, data)
            return None
    with _lock:
        product = _local_catalog.get(str(product_id))
        if not product:
            return None
        product.update({k: v for k, v in data.items() if k in product and k != "id"})
        return dict(product)
