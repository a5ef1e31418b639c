"""Database Models - Pydantic models for catalog and payment entities."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartcart.services.money import to_decimal as _to_decimal


class Product(BaseModel):
    """Sellable product. Read-only to the cart engine."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Ignore unknown columns from DB

    id: str
    name: str
    price: Decimal = Field(default=Decimal("0"), ge=0)
    category: str = ""
    stock: int = Field(default=0, ge=0)
    description: str = ""
    image_url: str = ""
    rating: float = Field(default=0.0, ge=0, le=5)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        # Supabase returns integer ids for serial columns
        return str(v)

    @field_validator("category", "description", "image_url", mode="before")
    @classmethod
    def convert_null_text(cls, v):
        # Optional columns come back as NULL
        return "" if v is None else v

    @field_validator("stock", "rating", mode="before")
    @classmethod
    def convert_null_number(cls, v):
        return 0 if v is None else v

    @property
    def normalized_name(self) -> str:
        """Join key with the trolley feed."""
        return self.name.lower()


class PaymentStatus(str, Enum):
    """Payment record status. Any status may follow any other."""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentLine(BaseModel):
    """Snapshot of one cart line inside a payment record."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    price: Decimal
    quantity: int

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)


class Payment(BaseModel):
    """Manual UPI payment record, confirmed or rejected by an admin."""
    model_config = ConfigDict(extra="ignore")

    id: str
    amount: Decimal
    items: list[PaymentLine] = []
    status: PaymentStatus = PaymentStatus.PENDING
    upi_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)


class PaymentAccount(BaseModel):
    """UPI account that receives payments. At most one is the default."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    upi_id: str
    is_default: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)
