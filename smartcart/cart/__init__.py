"""Cart package: models, snapshot stores, trolley feed, and the reconciliation engine."""
from .engine import CartEngine, MirrorSink
from .feed import FeedSnapshot, TrolleyFeed, normalize_name, parse_quantity, quantity_for
from .models import CartItem, CartState
from .storage import CartStore, FileCartStore, RedisCartStore, create_store

__all__ = [
    "CartEngine",
    "CartItem",
    "CartState",
    "CartStore",
    "FeedSnapshot",
    "FileCartStore",
    "MirrorSink",
    "RedisCartStore",
    "TrolleyFeed",
    "create_store",
    "normalize_name",
    "parse_quantity",
    "quantity_for",
]
