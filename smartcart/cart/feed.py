"""Smart trolley feed - Upstash Redis hash plus change stream.

The trolley namespace is a flat Redis hash: lower-cased product name ->
decimal-string quantity, plus the reserved `totalPrice` field. Writers
(the RFID reader, this service, other instances) should append an entry to
`stream:<namespace>` after touching the hash.

Subscriptions poll (upstash-redis REST has no blocking reads). Each tick
reads the stream and the hash, and delivers the whole hash when new stream
entries showed up or the hash differs from the last delivery. The second
check catches devices that write the hash without announcing it.
"""

import asyncio
import json
import re
from typing import Any, Callable, Optional

from smartcart import config
from smartcart.db import RedisKeys, StreamLimits, get_redis
from smartcart.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)

FeedSnapshot = dict[str, str]
FeedCallback = Callable[[FeedSnapshot], None]
Unsubscribe = Callable[[], None]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def normalize_name(name: str) -> str:
    """Feed key for a product name."""
    return name.lower()


def parse_quantity(value: Any) -> int:
    """Leading-integer parse of a feed value; anything unusable is 0."""
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(0, int(match.group(1)))


def quantity_for(snapshot: FeedSnapshot, product_name: str) -> int:
    """Quantity the feed reports for a product; 0 means not in the trolley."""
    return parse_quantity(snapshot.get(normalize_name(product_name)))


class TrolleyFeed:
    """Read/write access to one trolley namespace."""

    def __init__(
        self,
        namespace: str = config.TROLLEY_NAMESPACE,
        poll_interval: float = config.FEED_POLL_INTERVAL,
        redis=None,
    ):
        self.namespace = namespace
        self.stream_key = RedisKeys.feed_stream_key(namespace)
        self.poll_interval = poll_interval
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    # ==================== READS ====================

    async def get_snapshot(self) -> FeedSnapshot:
        """Current hash contents; empty if the namespace does not exist."""
        data = await self.redis.hgetall(self.namespace)
        return {str(k): str(v) for k, v in (data or {}).items()}

    async def _latest_entry_id(self) -> Optional[str]:
        entries = await self.redis.xrevrange(self.stream_key, count=1)
        return entries[0][0] if entries else None

    async def _entries_after(self, last_id: Optional[str]) -> list:
        start = f"({last_id}" if last_id else "-"
        return await self.redis.xrange(
            self.stream_key, start=start, end="+", count=StreamLimits.MAX_EVENTS_PER_POLL
        )

    # ==================== WRITES ====================

    async def _announce(self, event: str, key: Optional[str] = None) -> None:
        payload = {"event": event, "namespace": self.namespace, "key": key}
        await self.redis.xadd(
            self.stream_key, "*", {"data": json.dumps(payload)}, maxlen=StreamLimits.MAX_LEN
        )

    async def set_quantity(self, key: str, quantity: int) -> None:
        key = normalize_name(key)
        await self.redis.hset(self.namespace, values={key: str(max(0, int(quantity)))})
        await self._announce("trolley.item.set", key)
        logger.debug(f"Feed {self.namespace}: {sanitize_string_for_logging(key)} = {quantity}")

    async def delete_key(self, key: str) -> None:
        key = normalize_name(key)
        await self.redis.hdel(self.namespace, key)
        await self._announce("trolley.item.deleted", key)
        logger.debug(f"Feed {self.namespace}: deleted {sanitize_string_for_logging(key)}")

    async def set_total_price(self, total: str) -> None:
        await self.redis.hset(self.namespace, values={RedisKeys.TOTAL_PRICE: total})
        await self._announce("trolley.total.set", RedisKeys.TOTAL_PRICE)

    async def reset_namespace(self) -> None:
        """Drop every item but leave `totalPrice = "0"` as the cleared marker."""
        await self.redis.delete(self.namespace)
        await self.redis.hset(self.namespace, values={RedisKeys.TOTAL_PRICE: "0"})
        await self._announce("trolley.cleared")
        logger.debug(f"Feed {self.namespace}: cleared")

    # ==================== SUBSCRIPTION ====================

    def subscribe(self, callback: FeedCallback) -> Unsubscribe:
        """
        Deliver the current snapshot now and a fresh one after every change.

        Must be called from a running event loop. The returned handle stops
        delivery; calling it again does nothing.
        """
        task = asyncio.get_running_loop().create_task(self._poll(callback))
        active = True

        def unsubscribe() -> None:
            nonlocal active
            if not active:
                return
            active = False
            task.cancel()
            logger.info(f"Unsubscribed from trolley feed {self.namespace}")

        logger.info(f"Subscribed to trolley feed {self.namespace}")
        return unsubscribe

    def _deliver(self, callback: FeedCallback, snapshot: FeedSnapshot) -> None:
        try:
            callback(snapshot)
        except Exception as e:
            logger.error(f"Trolley feed callback failed: {e}", exc_info=True)

    async def _poll(self, callback: FeedCallback) -> None:
        try:
            last_id = await self._latest_entry_id()
            snapshot = await self.get_snapshot()
        except Exception as e:
            logger.error(f"Error listening to smart trolley {self.namespace}: {e}", exc_info=True)
            return

        if not snapshot:
            logger.info(f"No smart trolley data available in {self.namespace}")
        self._deliver(callback, snapshot)

        delivered = snapshot
        while True:
            await asyncio.sleep(self.poll_interval)
            try:
                entries = await self._entries_after(last_id)
                if entries:
                    last_id = entries[-1][0]
                snapshot = await self.get_snapshot()
                if not entries and snapshot == delivered:
                    continue
            except Exception as e:
                # Delivery stops here; the owner decides whether to subscribe again
                logger.error(f"Error listening to smart trolley {self.namespace}: {e}", exc_info=True)
                return
            delivered = snapshot
            self._deliver(callback, snapshot)
