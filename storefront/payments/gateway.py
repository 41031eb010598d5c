"""
Adaptateurs de paiement: centralise les appels PayPal et le simulateur local.

La stratégie est choisie une seule fois au démarrage (select_gateway):
- identifiants PayPal présents => PayPalGateway (sandbox ou live)
- absents hors production => DemoGateway (ids préfixés DEMO-)
- absents en production => ConfigurationError (pas de repli silencieux)
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import json
import logging
import time

import httpx

from storefront import config
from storefront.errors import ConfigurationError, ProviderError
from .verifier import ServerCalculation

logger = logging.getLogger(__name__)

# module storefront.payments.gateway
DEMO_PREFIX = "DEMO-"
CUSTOM_ID_MAX_LENGTH = 127

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _base36(n: int) -> str:
    out = ""
    while True:
        n, r = divmod(n, 36)
        out = _BASE36[r] + out
        if n == 0:
            return out


def timestamp_id(prefix: str) -> str:
    """'<prefix><timestamp ms en base36 majuscule>' (ni unique ni persistant)."""
    return prefix + _base36(int(time.time() * 1000))


def is_demo_order_id(order_id: str) -> bool:
    return (order_id or "").startswith(DEMO_PREFIX)


def audit_payload(calc: ServerCalculation, customer: Optional[Dict[str, Any]] = None) -> str:
    """
    Métadonnées d'audit compactes (contact client + prix vérifiés par ligne).
    Tronquées à 127 caractères (limite PayPal de custom_id).
    """
    customer = customer or {}
    payload = {
        "e": customer.get("email"),
        "n": customer.get("name"),
        "i": [[d.product_id, d.calculated_price, d.quantity] for d in calc.per_item],
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)[:CUSTOM_ID_MAX_LENGTH]


class PaymentGateway(ABC):
    mode = "unknown"

    @abstractmethod
    def create_order(self, calc: ServerCalculation, currency: str, customer: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Réserve le total vérifié; retourne la représentation de la commande (id, status, ...)."""

    @abstractmethod
    def capture_order(self, order_id: str) -> Dict[str, Any]:
        """Finalise une commande approuvée; retourne la réponse brute du prestataire."""


class PayPalGateway(PaymentGateway):
    mode = "paypal"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        api_url: str = config.PAYPAL_API_URL,
        timeout: float = config.PAYPAL_TIMEOUT_SECONDS,
        public_base_url: str = config.PUBLIC_BASE_URL,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not client_id or not client_secret:
            raise ConfigurationError("PayPal credentials missing")
        self.client_id = client_id
        self.client_secret = client_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.public_base_url = public_base_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.api_url, timeout=self.timeout, transport=self._transport)

    def get_access_token(self, client: httpx.Client) -> str:
        """Échange client-credentials; pas de cache, un jeton par opération."""
        resp = client.post(
            "/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not resp.is_success:
            logger.error("paypal.token failed status=%s body=%s", resp.status_code, resp.text)
            raise ProviderError("Failed to authenticate with PayPal")
        token = (resp.json() or {}).get("access_token")
        if not token:
            raise ProviderError("Failed to authenticate with PayPal")
        return token

    def build_order_payload(self, calc: ServerCalculation, currency: str, customer: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {
            "intent": "CAPTURE",
            "purchase_units": [{
                "amount": {
                    "currency_code": currency,
                    "value": f"{calc.total:.2f}",
                    "breakdown": {
                        "item_total": {"currency_code": currency, "value": f"{calc.subtotal:.2f}"},
                        "shipping": {"currency_code": currency, "value": f"{calc.shipping:.2f}"},
                    },
                },
                "description": f"{config.PAYPAL_BRAND_NAME} Wall Art",
                "custom_id": audit_payload(calc, customer),
            }],
            "application_context": {
                "brand_name": config.PAYPAL_BRAND_NAME,
                "landing_page": "NO_PREFERENCE",
                "user_action": "PAY_NOW",
                "return_url": f"{self.public_base_url}/checkout/success",
                "cancel_url": f"{self.public_base_url}/checkout",
            },
        }

    def create_order(self, calc: ServerCalculation, currency: str, customer: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = self.build_order_payload(calc, currency, customer)
        try:
            with self._client() as client:
                token = self.get_access_token(client)
                resp = client.post(
                    "/v2/checkout/orders",
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"},
                )
                if not resp.is_success:
                    logger.error("paypal.create_order failed status=%s body=%s", resp.status_code, resp.text)
                    raise ProviderError("Failed to create PayPal order")
                order = resp.json()
        except ProviderError:
            raise
        except (httpx.HTTPError, ValueError):
            logger.exception("paypal.create_order error")
            raise ProviderError("Failed to create PayPal order")

        if is_demo_order_id(str(order.get("id") or "")):
            # Le préfixe démo court-circuite la capture: un id PayPal ne doit jamais le porter
            logger.error("paypal.create_order returned reserved id=%s", order.get("id"))
            raise ProviderError("Failed to create PayPal order")
        return order

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        try:
            with self._client() as client:
                token = self.get_access_token(client)
                resp = client.post(
                    f"/v2/checkout/orders/{order_id}/capture",
                    headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
                )
                if not resp.is_success:
                    logger.error("paypal.capture_order failed order_id=%s status=%s body=%s", order_id, resp.status_code, resp.text)
                    raise ProviderError("Failed to capture PayPal order")
                return resp.json()
        except ProviderError:
            raise
        except (httpx.HTTPError, ValueError):
            logger.exception("paypal.capture_order error order_id=%s", order_id)
            raise ProviderError("Failed to capture PayPal order")


class DemoGateway(PaymentGateway):
    """Simulateur hors-ligne: aucune requête réseau, interdit en production."""
    mode = "demo"

    def __init__(self, production: Optional[bool] = None):
        if production is None:
            production = config.is_production()
        if production:
            raise ConfigurationError("PayPal credentials are required in production")

    def create_order(self, calc: ServerCalculation, currency: str, customer: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.info("PayPal not configured - using demo mode total=%s", calc.total)
        return {
            "id": timestamp_id(DEMO_PREFIX),
            "status": "DEMO_MODE",
            "message": "PayPal credentials not configured. This is a demo order.",
        }

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        raise ProviderError("PayPal not configured")


def select_gateway(
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    production: Optional[bool] = None,
) -> PaymentGateway:
    client_id = config.PAYPAL_CLIENT_ID if client_id is None else client_id
    client_secret = config.PAYPAL_CLIENT_SECRET if client_secret is None else client_secret
    if client_id and client_secret:
        logger.info("payments gateway: PayPal (%s)", config.PAYPAL_MODE)
        return PayPalGateway(client_id, client_secret)
    gateway = DemoGateway(production=production)
    logger.warning("payments gateway: demo mode (PayPal credentials missing)")
    return gateway
