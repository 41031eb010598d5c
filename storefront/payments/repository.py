"""
Accès aux données pour les commandes capturées.
- Supabase (table 'orders') si configuré, sinon liste locale au process.
- Best-effort: un échec d'écriture est journalisé, il ne fait jamais échouer une capture.
"""
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import logging
import threading

import storefront.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

_local_orders: List[Dict[str, Any]] = []
_lock = threading.Lock()

# module storefront.payments.repository
def build_order_record(
    *,
    order_number: str,
    status: str,
    paypal_order_id: Optional[str] = None,
    capture_id: Optional[str] = None,
    amount: Optional[str] = None,
    currency: Optional[str] = None,
    demo: bool = False,
) -> Dict[str, Any]:
    return {
        # Clé: id de capture PayPal, ou numéro de commande pour une capture démo
        "id": capture_id or order_number,
        "order_number": order_number,
        "status": status,
        "paypal_order_id": paypal_order_id,
        "capture_id": capture_id,
        "amount": amount,
        "currency": currency,
        "demo": demo,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }

def insert_order(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if supabase_client.is_configured():
        try:
            res = supabase_client.get_service_supabase().table("orders").insert(record).execute()
            rows = getattr(res, "data", None) or []
            return rows[0] if rows else record
        except Exception:
            logger.exception("payments.repository.insert_order failed id=%s", record.get("id"))
            return None
    with _lock:
        _local_orders.append(dict(record))
    return record

def list_orders(limit: int = 100) -> List[Dict[str, Any]]:
    if supabase_client.is_configured():
        try:
            res = (
                supabase_client.get_service_supabase()
                .table("orders")
                .select("*")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return res.data or []
        except Exception:
            logger.exception("payments.repository.list_orders failed")
            return []
    with _lock:
        return [dict(o) for o in reversed(_local_orders)][:limit]

def count_orders() -> int:
    if supabase_client.is_configured():
        try:
            res = supabase_client.get_service_supabase().table("orders").select("id", count="exact").execute()
            if getattr(res, "count", None) is not None:
                return int(res.count)
            return len(res.data or [])
        except Exception:
            logger.exception("payments.repository.count_orders failed")
            return 0
    with _lock:
        return len(_local_orders)

def reset_local_orders() -> None:
    with _lock:
        _local_orders.clear()
