"""
Cart snapshot stores.

`load()` is synchronous because it runs once inside the engine constructor,
before the event loop is necessarily serving anything. `save()` is async and
called from the engine's persistence worker; its errors propagate to that
worker, which logs them.
"""
import asyncio
import json
from pathlib import Path
from typing import Optional, Protocol

from smartcart.db import RedisKeys, get_redis, get_redis_sync
from smartcart.logging import get_logger
from .models import CartState

logger = get_logger(__name__)


class CartStore(Protocol):
    """Persistent slot holding one serialized CartState."""

    def load(self) -> Optional[CartState]:
        ...

    async def save(self, snapshot: dict) -> None:
        ...


def _decode(raw: str | bytes | None, source: str) -> Optional[CartState]:
    if not raw:
        return None
    try:
        return CartState.from_dict(json.loads(raw))
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        # Corrupted snapshot: start with an empty cart
        logger.warning(f"Corrupted cart snapshot in {source}: {e}")
        return None


class FileCartStore:
    """Cart snapshot in a local JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[CartState]:
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read cart snapshot {self.path}: {e}")
            return None
        return _decode(raw, str(self.path))

    def _write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a crash never leaves half a snapshot
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)

    async def save(self, snapshot: dict) -> None:
        payload = json.dumps(snapshot, ensure_ascii=False)
        await asyncio.to_thread(self._write, payload)


class RedisCartStore:
    """Cart snapshot under a single Upstash Redis key."""

    def __init__(self, key: str = RedisKeys.CART):
        self.key = key

    def load(self) -> Optional[CartState]:
        try:
            raw = get_redis_sync().get(self.key)
        except Exception as e:
            logger.error(f"Failed to read cart snapshot from Redis: {e}")
            return None
        return _decode(raw, f"redis:{self.key}")

    async def save(self, snapshot: dict) -> None:
        await get_redis().set(self.key, json.dumps(snapshot, ensure_ascii=False))


def create_store(backend: str, path: str | Path) -> CartStore:
    """Build the store selected by CART_STORE_BACKEND."""
    if backend == "redis":
        return RedisCartStore()
    if backend != "file":
        logger.warning(f"Unknown cart store backend {backend!r}, using file")
    return FileCartStore(path)
