"""
Cas d'usage 'payments': orchestre vérification, passerelle de paiement et repository.
"""
from typing import Any, Dict, Mapping, Optional
import logging

from storefront.products import repository as products_repository
from . import repository
from . import verifier
from .gateway import PaymentGateway, is_demo_order_id, timestamp_id
from .models import CreateOrderRequest

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "FS-"

def generate_order_number() -> str:
    return timestamp_id(ORDER_NUMBER_PREFIX)

def create_order(
    request: CreateOrderRequest,
    gateway: PaymentGateway,
    product_prices: Optional[Mapping[str, float]] = None,
) -> Dict[str, Any]:
    """
    Crée la commande chez le prestataire pour le total vérifié:
      1) recalcul serveur (verifier.verify) depuis les prix produits du repository
      2) rejet si erreurs de lignes ou écart de montant > tolérance
      3) gateway.create_order avec le total serveur, jamais le montant client
    Retour: représentation de la commande + verifiedTotal.
    """
    if product_prices is None:
        product_prices = products_repository.get_price_table()
    items = [item.model_dump(by_alias=True) for item in request.items]
    calc = verifier.verify(items, product_prices)
    verified_total = verifier.check_client_amount(calc, request.amount)

    customer = request.customer_info.model_dump(exclude_none=True) if request.customer_info else {}
    order = gateway.create_order(calc, request.currency, customer)
    logger.info(
        "payments.create_order id=%s status=%s total=%s items=%s mode=%s",
        order.get("id"), order.get("status"), verified_total, len(calc.per_item), gateway.mode,
    )
    return {**order, "verifiedTotal": verified_total}

def _first_capture(capture_data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return capture_data["purchase_units"][0]["payments"]["captures"][0] or {}
    except (KeyError, IndexError, TypeError):
        return {}

def capture_order(order_id: str, gateway: PaymentGateway) -> Dict[str, Any]:
    """
    Finalise le paiement.
    - Id préfixé DEMO-: succès synthétique sans aucun appel prestataire (quelle que soit la config)
    - Sinon: capture via la passerelle, puis enregistrement best-effort de la commande
    Retour: {status, orderNumber, paypalOrderId?, captureId?}
    """
    order_number = generate_order_number()

    if is_demo_order_id(order_id):
        repository.insert_order(repository.build_order_record(
            order_number=order_number, status="COMPLETED", paypal_order_id=order_id, demo=True,
        ))
        logger.info("payments.capture_order demo order_id=%s order_number=%s", order_id, order_number)
        return {
            "status": "COMPLETED",
            "orderNumber": order_number,
            "message": "Demo order completed successfully",
        }

    capture_data = gateway.capture_order(order_id)
    capture = _first_capture(capture_data)
    amount = capture.get("amount") or {}
    result = {
        "status": capture_data.get("status"),
        "orderNumber": order_number,
        "paypalOrderId": order_id,
        "captureId": capture.get("id"),
    }
    stored = repository.insert_order(repository.build_order_record(
        order_number=order_number,
        status=str(result["status"] or ""),
        paypal_order_id=order_id,
        capture_id=result["captureId"],
        amount=amount.get("value"),
        currency=amount.get("currency_code"),
    ))
    if stored is None:
        logger.error("payments.capture_order captured but not stored order_id=%s capture_id=%s", order_id, result["captureId"])
    logger.info("payments.capture_order order_id=%s status=%s order_number=%s", order_id, result["status"], order_number)
    return result
