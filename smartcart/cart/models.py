"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from smartcart.services.models import Product
from smartcart.services.money import multiply, to_decimal


@dataclass
class CartItem:
    """A product in the cart with a positive quantity."""
    product: Product
    quantity: int

    @property
    def id(self) -> str:
        return self.product.id

    @property
    def price(self) -> Decimal:
        return self.product.price

    @property
    def feed_key(self) -> str:
        return self.product.normalized_name

    @property
    def subtotal(self) -> Decimal:
        return multiply(self.product.price, self.quantity)

    def to_dict(self) -> dict:
        """Flat product fields plus quantity."""
        data = self.product.model_dump(mode="json")
        data["price"] = str(self.product.price)
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        product_fields = {k: v for k, v in data.items() if k != "quantity"}
        return cls(product=Product(**product_fields), quantity=int(data["quantity"]))


@dataclass
class CartState:
    """
    Cart contents plus running aggregates.

    `total_items` and `total_price` are maintained incrementally by the
    engine and always equal the sums over `items`.
    """
    items: List[CartItem] = field(default_factory=list)
    total_items: int = 0
    total_price: Decimal = Decimal("0")
    reconciled: bool = False

    def __post_init__(self):
        self.total_price = to_decimal(self.total_price)

    @classmethod
    def from_items(cls, items: List[CartItem], reconciled: bool = False) -> "CartState":
        """Build a state with aggregates computed from scratch."""
        return cls(
            items=items,
            total_items=sum(item.quantity for item in items),
            total_price=sum((item.subtotal for item in items), Decimal("0")),
            reconciled=reconciled,
        )

    def find(self, product_id: str) -> CartItem | None:
        return next((item for item in self.items if item.id == product_id), None)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        return {
            "items": [item.to_dict() for item in self.items],
            "total_items": self.total_items,
            "total_price": str(self.total_price),
            "reconciled": self.reconciled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartState":
        """
        Restore a persisted snapshot.

        Aggregates are recomputed from the items, and `reconciled` is always
        False: feed truth has to be re-established for the new session.
        """
        if not isinstance(data, dict):
            raise ValueError(f"cart snapshot must be an object, got {type(data).__name__}")
        raw_items = data.get("items", [])
        if not isinstance(raw_items, list) or not all(isinstance(item, dict) for item in raw_items):
            raise ValueError("cart snapshot items must be a list of objects")

        items = [CartItem.from_dict(item) for item in raw_items]
        return cls.from_items([item for item in items if item.quantity > 0], reconciled=False)
