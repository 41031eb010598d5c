"""
Module 'payments' (feature-first): point d'entrée public.
Réunit vérification des prix, passerelles de paiement, repository des commandes et services.
"""

from .verifier import verify, check_client_amount, ServerCalculation, ItemDetail
from .gateway import (
    DEMO_PREFIX,
    PaymentGateway,
    PayPalGateway,
    DemoGateway,
    select_gateway,
    is_demo_order_id,
)
from .repository import insert_order, list_orders, count_orders
from .service import create_order, capture_order, generate_order_number

__all__ = [
    # verifier
    "verify",
    "check_client_amount",
    "ServerCalculation",
    "ItemDetail",
    # gateway
    "DEMO_PREFIX",
    "PaymentGateway",
    "PayPalGateway",
    "DemoGateway",
    "select_gateway",
    "is_demo_order_id",
    # repository
    "insert_order",
    "list_orders",
    "count_orders",
    # services
    "create_order",
    "capture_order",
    "generate_order_number",
]
