"""Pytest configuration and fixtures"""
import os
from decimal import Decimal
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("ADMIN_API_KEY", "test_admin_key")

from smartcart.cart import CartEngine, CartState, TrolleyFeed  # noqa: E402
from smartcart.services.models import Product  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the async Upstash client (hash, stream and string commands)."""

    def __init__(self):
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.streams: Dict[str, List[tuple]] = {}
        self.strings: Dict[str, str] = {}
        self._seq = 0

    async def hgetall(self, key: str) -> Dict[str, str]:
        return dict(self.hashes.get(key, {}))

    async def hset(self, key: str, field=None, value=None, values=None) -> int:
        target = self.hashes.setdefault(key, {})
        if field is not None:
            target[field] = value
        for k, v in (values or {}).items():
            target[k] = v
        return 1

    async def hdel(self, key: str, *fields: str) -> int:
        target = self.hashes.get(key, {})
        removed = 0
        for f in fields:
            if target.pop(f, None) is not None:
                removed += 1
        return removed

    async def delete(self, *keys: str) -> int:
        removed = 0
        for k in keys:
            removed += int(self.hashes.pop(k, None) is not None)
            removed += int(self.strings.pop(k, None) is not None)
        return removed

    async def xadd(self, key: str, id: str, data: Dict[str, Any], maxlen: Optional[int] = None, **_) -> str:
        self._seq += 1
        entry_id = f"{self._seq}-0"
        self.streams.setdefault(key, []).append((entry_id, dict(data)))
        return entry_id

    @staticmethod
    def _seq_of(entry_id: str) -> int:
        return int(entry_id.split("-")[0])

    async def xrange(self, key: str, start: str = "-", end: str = "+", count: Optional[int] = None) -> list:
        entries = self.streams.get(key, [])
        if start.startswith("("):
            floor = self._seq_of(start[1:])
            entries = [e for e in entries if self._seq_of(e[0]) > floor]
        return [list(e) for e in entries[:count]]

    async def xrevrange(self, key: str, end: str = "+", start: str = "-", count: Optional[int] = None) -> list:
        entries = list(reversed(self.streams.get(key, [])))
        return [list(e) for e in entries[:count]]

    async def get(self, key: str) -> Optional[str]:
        return self.strings.get(key)

    async def set(self, key: str, value: str, **_) -> bool:
        self.strings[key] = value
        return True


class MemoryCartStore:
    """Cart store keeping every saved snapshot in a list."""

    def __init__(self, initial: Optional[dict] = None):
        self.initial = initial
        self.saved: List[dict] = []

    def load(self) -> Optional[CartState]:
        return CartState.from_dict(self.initial) if self.initial else None

    async def save(self, snapshot: dict) -> None:
        self.saved.append(snapshot)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def feed(fake_redis):
    return TrolleyFeed(namespace="smart_trolley", poll_interval=0.01, redis=fake_redis)


@pytest.fixture
def store():
    return MemoryCartStore()


@pytest.fixture
def engine(store, feed):
    """Engine that has not been started: mirror writes stay queued."""
    return CartEngine(store, feed)


@pytest.fixture
def apple():
    return Product(id="1", name="Apple", price=Decimal("2.00"), category="Fruit", stock=10, rating=4.5)


@pytest.fixture
def mango():
    return Product(id="2", name="Mango", price=Decimal("1.50"), category="Fruit", stock=5)


@pytest.fixture
def tomato():
    return Product(id="3", name="Tomato", price=Decimal("0.75"), category="Vegetable", stock=20)


@pytest.fixture
def catalog(apple, mango, tomato):
    return [apple, mango, tomato]


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client"""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.order.return_value = table_mock

    client.table.return_value = table_mock
    return client


@pytest.fixture
def sample_product_row():
    """Products table row"""
    return {
        "id": "product-123",
        "name": "Apple",
        "price": 2.0,
        "category": "Fruit",
        "stock": 10,
        "description": "Fresh red apple",
        "image_url": "https://example.com/apple.jpg",
        "rating": 4.5,
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def store_factory():
    """Build extra in-memory stores, optionally pre-loaded with a snapshot."""
    return MemoryCartStore
