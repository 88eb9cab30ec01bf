# market/domain/schemas.py
import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")


class Category(str, Enum):
    electronics = "Electronics"
    fashion = "Fashion"
    home_living = "Home & Living"
    automotive = "Automotive"
    books = "Books"
    sports = "Sports"
    beauty = "Beauty"
    food = "Food"


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"


class PaymentMethod(str, Enum):
    cash_on_delivery = "cash_on_delivery"
    mobile_money = "mobile_money"


class CamelModel(BaseModel):
    """Base for request/response bodies, serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Catalog ---


class ProductIn(CamelModel):
    """Schema for creating a product."""

    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    currency: str = Field("GHS", min_length=3, max_length=3)
    category: Category
    image: str = Field(..., min_length=1)
    in_stock: bool = True
    quantity: int = Field(1, ge=0, description="Units in stock")
    featured: bool = False

    @field_validator("title", "description", "image")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ProductUpdate(CamelModel):
    """Schema for a partial product update."""

    title: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = Field(None, min_length=10)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    currency: str | None = Field(None, min_length=3, max_length=3)
    category: Category | None = None
    image: str | None = None
    in_stock: bool | None = None
    quantity: int | None = Field(None, ge=0)
    featured: bool | None = None


class ProductOut(CamelModel):
    id: int
    title: str
    description: str
    price: Decimal
    currency: str
    category: str
    image: str
    in_stock: bool
    quantity: int
    featured: bool
    seller_id: int
    created_at: datetime
    updated_at: datetime


# --- Cart ---


class ItemIn(CamelModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0, description="Quantity (must be > 0)")


class ItemUpdate(CamelModel):
    """Schema for overwriting the quantity of a cart line.

    The quantity is range-checked by the service so that a non-positive value
    fails with the domain error instead of a generic validation error.
    """

    product_id: int = Field(..., gt=0)
    quantity: int


class CartItemOut(CamelModel):
    product_id: int
    quantity: int
    price: Decimal


class CartOut(CamelModel):
    id: int
    user_id: int
    items: List[CartItemOut]
    total_amount: Decimal
    updated_at: datetime | None = None


class MessageOut(CamelModel):
    message: str


# --- Orders ---


class ShippingAddress(CamelModel):
    street: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    region: str = Field(..., min_length=1)
    phone: str

    @field_validator("street", "city", "region", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        digits = re.sub(r"[\s\-()]", "", v)
        if not PHONE_RE.match(digits):
            raise ValueError("Valid phone number is required")
        return digits


class OrderCreate(CamelModel):
    """Checkout command built from the request body."""

    shipping_address: ShippingAddress
    payment_method: PaymentMethod = PaymentMethod.cash_on_delivery
    notes: str | None = Field(None, max_length=1000)


class StatusUpdate(CamelModel):
    # validated against OrderStatus by the service
    status: str


class OrderItemOut(CamelModel):
    product_id: int
    title: str
    quantity: int
    price: Decimal


class ShippingAddressOut(CamelModel):
    street: str
    city: str
    region: str
    phone: str


class OrderOut(CamelModel):
    id: int
    user_id: int
    items: List[OrderItemOut]
    total_amount: Decimal
    status: OrderStatus
    payment_method: PaymentMethod
    shipping_address: ShippingAddressOut
    notes: str | None = None
    tracking_number: str
    created_at: datetime
    updated_at: datetime
