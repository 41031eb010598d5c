"""
Schémas des requêtes checkout (contrat JSON public, champs en camelCase).
Le champ 'price' éventuellement envoyé par le client est ignoré (extra="ignore").
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

MAX_ORDER_AMOUNT = 100000


class OrderItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(alias="productId", min_length=1, max_length=64)
    size_id: str = Field(alias="sizeId", min_length=1, max_length=32)
    material_id: str = Field(alias="materialId", min_length=1, max_length=32)
    quantity: int = Field(ge=1, le=10)


class CustomerInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, max_length=200)


class CreateOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(gt=0, le=MAX_ORDER_AMOUNT)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    items: List[OrderItemIn] = Field(min_length=1, max_length=20)
    customer_info: Optional[CustomerInfo] = Field(default=None, alias="customerInfo")


class CaptureOrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Identifiant réutilisé dans l'URL PayPal: alphanumérique et tirets uniquement
    order_id: str = Field(alias="orderId", min_length=1, max_length=64, pattern=r"^[A-Za-z0-9-]+$")
