from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    """Позиция корзины (живёт только в запросе и в metadata платежа)."""
    id: str = Field(..., min_length=1, description="id товара")
    product: str = Field(..., description="Название товара")
    size: str
    color: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0, description="Цена за единицу")
    image: Optional[str] = None


class ShippingAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    first_name: Optional[str] = Field(None, alias="nombre")
    last_name: Optional[str] = Field(None, alias="apellido")
    phone: Optional[str] = Field(None, alias="telefono")
    street: Optional[str] = Field(None, alias="calle")
    zip_code: Optional[str] = Field(None, alias="cp")


class ShippingInfo(BaseModel):
    cost: float = Field(0, ge=0)
    name: Optional[str] = None
    address: Optional[ShippingAddress] = None


class CheckoutRequest(BaseModel):
    items: List[CartItem] = Field(default_factory=list)
    email: Optional[str] = None
    shipping: Optional[ShippingInfo] = None


class CheckoutResponse(BaseModel):
    init_point: Optional[str] = None
    sandbox_init_point: Optional[str] = None
    preference_id: Optional[str] = None
