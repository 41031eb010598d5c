import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from storefront.cart.models import Cart
from storefront.cart.storage import SessionStorage
from storefront.errors import StorefrontError
from .gateway import PaymentGateway
from .models import CaptureOrderRequest, CreateOrderRequest
from . import service as payments_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/paypal", tags=["Payments API"])

def get_payment_gateway(request: Request) -> PaymentGateway:
    """Passerelle choisie une fois au démarrage (create_app), jamais par requête."""
    return request.app.state.payment_gateway

# module storefront.payments.views
@router.post("/create-order")
def create_order(body: CreateOrderRequest, gateway: PaymentGateway = Depends(get_payment_gateway)) -> Dict[str, Any]:
    """
    Crée une commande PayPal pour le panier soumis.
    - Entrée JSON: {amount, currency?, items: [{productId, sizeId, materialId, quantity}], customerInfo?}
    - Le total est recalculé côté serveur; seul ce total est réservé chez PayPal
    - Erreurs: 400 (validation, panier invalide, écart de prix avec serverTotal), 500 (prestataire)
    """
    try:
        return payments_service.create_order(body, gateway)
    except StorefrontError:
        raise
    except Exception:
        logger.exception("Erreur create_order")
        raise StorefrontError()

@router.post("/capture-order")
def capture_order(body: CaptureOrderRequest, request: Request, gateway: PaymentGateway = Depends(get_payment_gateway)) -> Dict[str, Any]:
    """
    Capture une commande approuvée par l'acheteur.
    - Entrée JSON: {orderId}
    - Succès: {status, orderNumber, paypalOrderId?, captureId?}; le panier de session est vidé
    """
    try:
        result = payments_service.capture_order(body.order_id, gateway)
    except StorefrontError:
        raise
    except Exception:
        logger.exception("Erreur capture_order order_id=%s", body.order_id)
        raise StorefrontError()
    Cart(SessionStorage(request.session)).clear()
    return result
