"""
Taxonomie d'erreurs métier de la boutique.
Chaque erreur porte son code HTTP et un message sûr à renvoyer au client;
le détail technique éventuel reste dans les logs serveur.
"""
from typing import Any, Optional


class StorefrontError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.error = message or self.default_message
        self.details = details
        super().__init__(self.error)

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid input"


class UnknownPricingIdError(ValidationError):
    default_message = "Unknown size or material"


class InvalidOrderError(ValidationError):
    default_message = "Invalid order"


class PriceMismatchError(ValidationError):
    default_message = "Price verification failed"

    def __init__(self, server_total: float, client_amount: float, message: Optional[str] = None):
        self.server_total = server_total
        self.client_amount = client_amount
        super().__init__(message or "Price verification failed. Please refresh and try again.")

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["serverTotal"] = self.server_total
        return body


class AuthError(StorefrontError):
    status_code = 401
    default_message = "Invalid credentials"


class RateLimitError(StorefrontError):
    status_code = 429
    default_message = "Too many login attempts. Please try again later."


class ProviderError(StorefrontError):
    status_code = 500
    default_message = "Payment provider error"


class ConfigurationError(StorefrontError):
    """Configuration manquante ou dangereuse: jamais de repli silencieux."""
    status_code = 500

    def to_dict(self) -> dict:
        # Le détail (nom de variable manquante) ne sort pas du serveur
        return {"error": self.default_message}
