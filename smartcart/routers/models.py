"""Request models for the HTTP API."""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from smartcart.services.models import PaymentStatus


class AddToCartRequest(BaseModel):
    product_id: str


class UpdateCartItemRequest(BaseModel):
    quantity: int  # 0 or less removes the item


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0)
    category: str = ""
    stock: int = Field(default=0, ge=0)
    description: str = ""
    image_url: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)


class UpdateProductRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0)
    category: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)


class UpdatePaymentStatusRequest(BaseModel):
    status: PaymentStatus
    notes: Optional[str] = None


class CreatePaymentAccountRequest(BaseModel):
    name: str = Field(min_length=1)
    upi_id: str = Field(min_length=3)
    is_default: bool = False


class UpdatePaymentAccountRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    upi_id: Optional[str] = Field(default=None, min_length=3)
    is_default: Optional[bool] = None
