"""
Cart reconciliation engine.

One in-memory CartState with a single writer. Local mutations and feed
reconciliation replace it synchronously; the new state is then mirrored to
two sinks, the trolley feed and the snapshot store. Each sink is a queue
drained by its own worker, so writes within a sink keep their order but the
sinks run independently of each other and of the next mutation. A failed
mirror write is logged and dropped.

Lifecycle:
    engine = CartEngine(store, feed)    # loads the persisted snapshot
    await engine.start()                # mirror workers + feed subscription
    ...
    await engine.stop()                 # unsubscribe, drain, cancel workers

or `async with CartEngine(store, feed) as engine: ...`.
"""
import asyncio
from dataclasses import replace
from functools import partial
from typing import Awaitable, Callable, Iterable, Optional

from smartcart.db import RedisKeys
from smartcart.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from smartcart.services.models import Product
from smartcart.services.money import format_feed_total, multiply, to_decimal
from .feed import FeedSnapshot, TrolleyFeed, Unsubscribe, quantity_for
from .models import CartItem, CartState
from .storage import CartStore

logger = get_logger(__name__)

MirrorWrite = Callable[[], Awaitable[None]]

# Pending mirror writes get this long on shutdown
SHUTDOWN_DRAIN_TIMEOUT = 5.0


class MirrorSink:
    """Best-effort output channel: a FIFO of writes drained by one worker task."""

    def __init__(self, name: str):
        self.name = name
        self._queue: asyncio.Queue = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def put(self, label: str, write: MirrorWrite) -> None:
        self._queue.put_nowait((label, write))

    def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            label, write = await self._queue.get()
            try:
                await write()
            except Exception as e:
                logger.warning(f"{self.name} mirror write failed ({label}): {e}", exc_info=True)
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Wait until every queued write has been attempted."""
        if self._worker is not None:
            await self._queue.join()

    async def stop(self, timeout: float = SHUTDOWN_DRAIN_TIMEOUT) -> None:
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{self.name} mirror stopped with {self.pending} writes pending")
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None


class CartEngine:
    """
    Owns the cart state for one trolley.

    Mutations never raise and never wait for I/O. Unknown product ids are
    ignored.
    """

    def __init__(self, store: CartStore, feed: TrolleyFeed):
        self._store = store
        self._feed = feed

        restored = store.load()
        self.state: CartState = restored if restored is not None else CartState()
        # Feed truth is re-established per session
        self.state.reconciled = False
        if restored is not None:
            logger.info(f"Restored cart with {self.state.total_items} items")

        self._catalog: list[Product] = []
        self._last_snapshot: Optional[FeedSnapshot] = None
        self._unsubscribe: Optional[Unsubscribe] = None

        self.feed_sink = MirrorSink("feed")
        self.store_sink = MirrorSink("store")

    # ==================== LIFECYCLE ====================

    async def start(self) -> None:
        self.feed_sink.start()
        self.store_sink.start()
        if self._unsubscribe is None:
            self._unsubscribe = self._feed.subscribe(self._on_feed_snapshot)

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        await self.feed_sink.stop()
        await self.store_sink.stop()

    async def flush(self) -> None:
        await self.feed_sink.flush()
        await self.store_sink.flush()

    async def __aenter__(self) -> "CartEngine":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @property
    def catalog(self) -> list[Product]:
        return list(self._catalog)

    @property
    def has_feed_snapshot(self) -> bool:
        return self._last_snapshot is not None

    # ==================== MIRRORS ====================

    def _persist(self) -> None:
        snapshot = self.state.to_dict()
        self.store_sink.put("save", partial(self._store.save, snapshot))

    def _mirror_quantity(self, item: CartItem) -> None:
        self.feed_sink.put(
            f"set {item.feed_key}={item.quantity}",
            partial(self._feed.set_quantity, item.feed_key, item.quantity),
        )

    def _mirror_delete(self, item: CartItem) -> None:
        self.feed_sink.put(f"delete {item.feed_key}", partial(self._feed.delete_key, item.feed_key))

    def _mirror_total(self) -> None:
        total = format_feed_total(self.state.total_price)
        self.feed_sink.put(f"total={total}", partial(self._feed.set_total_price, total))

    # ==================== MUTATIONS ====================

    def add_item(self, product: Product) -> None:
        """Add one unit of `product`."""
        items = list(self.state.items)
        existing = self.state.find(product.id)
        if existing is not None:
            item = replace(existing, quantity=existing.quantity + 1)
            items[items.index(existing)] = item
        else:
            item = CartItem(product=product, quantity=1)
            items.append(item)

        self.state = replace(
            self.state,
            items=items,
            total_items=self.state.total_items + 1,
            total_price=self.state.total_price + item.price,
        )
        logger.info(f"{sanitize_string_for_logging(product.name)} added to cart (qty {item.quantity})")

        self._mirror_quantity(item)
        self._mirror_total()
        self._persist()

    def remove_item(self, product_id: str) -> None:
        """Remove a product entirely. Unknown ids are a no-op."""
        existing = self.state.find(product_id)
        if existing is None:
            logger.debug(f"remove_item: {sanitize_id_for_logging(product_id)} not in cart")
            return

        self.state = replace(
            self.state,
            items=[item for item in self.state.items if item.id != product_id],
            total_items=self.state.total_items - existing.quantity,
            total_price=self.state.total_price - existing.subtotal,
        )
        logger.info(f"{sanitize_string_for_logging(existing.product.name)} removed from cart")

        self._mirror_delete(existing)
        self._mirror_total()
        self._persist()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set an item's quantity; zero or less removes it. Unknown ids are a no-op."""
        existing = self.state.find(product_id)
        if existing is None:
            logger.debug(f"set_quantity: {sanitize_id_for_logging(product_id)} not in cart")
            return
        if quantity <= 0:
            self.remove_item(product_id)
            return

        delta = quantity - existing.quantity
        item = replace(existing, quantity=quantity)
        items = list(self.state.items)
        items[items.index(existing)] = item

        self.state = replace(
            self.state,
            items=items,
            total_items=self.state.total_items + delta,
            total_price=self.state.total_price + multiply(existing.price, delta),
        )

        self._mirror_quantity(item)
        self._mirror_total()
        self._persist()

    def clear_cart(self) -> None:
        """Empty the cart, keeping the reconciled flag."""
        self.state = CartState(reconciled=self.state.reconciled)
        logger.info("Cart cleared")

        self.feed_sink.put("reset", self._feed.reset_namespace)
        self._persist()

    # ==================== RECONCILIATION ====================

    def reconcile_with_feed(self, catalog: Iterable[Product], snapshot: FeedSnapshot) -> None:
        """
        Replace the cart with catalog ∩ feed.

        Every catalog product the feed reports with a positive quantity is
        in the cart with exactly that quantity; nothing else is. With an
        empty catalog the call is deferred: the snapshot is remembered and
        the state left alone until `update_catalog` supplies products.
        """
        self._last_snapshot = dict(snapshot)
        catalog = list(catalog)
        if not catalog:
            logger.debug("Reconciliation deferred: catalog is empty")
            return
        self._catalog = catalog

        items: list[CartItem] = []
        seen: set[str] = set()
        for product in catalog:
            if product.id in seen:
                continue
            quantity = quantity_for(snapshot, product.name)
            if quantity > 0:
                items.append(CartItem(product=product, quantity=quantity))
                seen.add(product.id)

        self.state = CartState.from_items(items, reconciled=True)
        logger.info(f"Cart reconciled with trolley feed: {self.state.total_items} items")

        self._persist()
        if to_decimal(snapshot.get(RedisKeys.TOTAL_PRICE)) != self.state.total_price:
            self._mirror_total()

    def update_catalog(self, catalog: Iterable[Product]) -> None:
        """Remember the catalog and reconcile if a feed snapshot is waiting."""
        catalog = list(catalog)
        if not catalog:
            logger.debug("update_catalog: empty catalog ignored")
            return
        self._catalog = catalog
        if self._last_snapshot is not None:
            self.reconcile_with_feed(catalog, self._last_snapshot)

    def _on_feed_snapshot(self, snapshot: FeedSnapshot) -> None:
        if self._catalog:
            self.reconcile_with_feed(self._catalog, snapshot)
        else:
            self._last_snapshot = dict(snapshot)
            logger.debug("Feed snapshot received before catalog; reconciliation deferred")
