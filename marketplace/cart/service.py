"""CartStore: in-memory cart collection mirrored to a durable key-value store."""
import asyncio
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from marketplace import config
from marketplace.db import KeyValueStore, StorageKeys
from marketplace.errors import MalformedCartData, StorageError
from marketplace.logging import get_logger, sanitize_id_for_logging
from .models import LineItem, ProductInput, dump_products, load_products

logger = get_logger(__name__)

Snapshot = Tuple[LineItem, ...]
CartListener = Callable[[Snapshot], Any]


def _write_retry(attempts: int) -> AsyncRetrying:
    return AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=config.CART_WRITE_BACKOFF_MAX),
        retry=retry_if_exception_type((StorageError, OSError)),
    )


class CartStore:
    """
    Owns the cart collection for one session.

    - Hydrated once from the durable store
    - Mutated only through add_to_cart / increment / decrement
    - Every effective mutation notifies subscribers with the new snapshot,
      then writes the full collection through to the durable store
    - Durable writes are serialized so they land in the order they were issued
    """

    def __init__(
        self,
        backend: KeyValueStore,
        key: Optional[str] = None,
        write_attempts: Optional[int] = None,
    ):
        self._backend = backend
        self._key = key or StorageKeys.CART_PRODUCTS
        self._write_attempts = max(1, write_attempts or config.CART_WRITE_ATTEMPTS)
        self._products: List[LineItem] = []
        self._listeners: List[CartListener] = []
        self._write_lock = asyncio.Lock()
        self._hydrated = False
        self._hydration: Optional["asyncio.Future[None]"] = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def products(self) -> Snapshot:
        """Current collection. Items are immutable, so the tuple is a safe snapshot."""
        return tuple(self._products)

    @property
    def is_hydrated(self) -> bool:
        return self._hydrated

    # ==================== LIFECYCLE ====================

    async def hydrate(self) -> Snapshot:
        """
        Load the persisted collection once.

        Missing, unreadable or malformed data leaves the cart empty.
        Concurrent callers share the same load; mutations issued while it
        is in flight wait for it and apply on top of the loaded cart.
        """
        if self._hydration is None:
            self._hydration = asyncio.ensure_future(self._load())
        await asyncio.shield(self._hydration)
        return self.products

    async def _load(self) -> None:
        try:
            raw = await self._backend.get(self._key)
        except Exception as e:
            logger.warning(f"Failed to read cart from storage, starting empty: {e}")
            raw = None

        loaded: List[LineItem] = []
        if raw:
            try:
                loaded = load_products(raw)
            except MalformedCartData as e:
                logger.warning(f"Ignoring corrupted cart data under {self._key}: {e.detail}")

        if loaded:
            self._products = loaded
            logger.info(f"Cart hydrated with {len(loaded)} line item(s)")
            self._notify(self.products)

        self._hydrated = True

    async def _await_hydration(self) -> None:
        if self._hydration is not None and not self._hydration.done():
            await asyncio.shield(self._hydration)

    async def flush(self) -> None:
        """Wait until every durable write issued so far has completed."""
        async with self._write_lock:
            pass

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener called with each new snapshot. Returns an unsubscribe function."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, snapshot: Snapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Cart listener {listener!r} failed")

    # ==================== OPERATIONS ====================

    async def add_to_cart(
        self, product: Union[ProductInput, LineItem, Mapping[str, Any]]
    ) -> Snapshot:
        """Add one unit of a product; an existing line is incremented instead of duplicated."""
        product = ProductInput.coerce(product)
        await self._await_hydration()

        if self._index_of(product.id) is not None:
            return await self.increment(product.id)

        self._products.append(LineItem.from_product(product))
        logger.info(f"Added {sanitize_id_for_logging(product.id)} to cart")
        return await self._commit()

    async def increment(self, product_id: str) -> Snapshot:
        """Increase quantity by one. Unknown ids are ignored."""
        await self._await_hydration()
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"increment: {sanitize_id_for_logging(product_id)} not in cart")
            return self.products

        item = self._products[index]
        self._products[index] = replace(item, quantity=item.quantity + 1)
        return await self._commit()

    async def decrement(self, product_id: str) -> Snapshot:
        """Decrease quantity by one, removing the line at quantity 1. Unknown ids are ignored."""
        await self._await_hydration()
        index = self._index_of(product_id)
        if index is None:
            logger.debug(f"decrement: {sanitize_id_for_logging(product_id)} not in cart")
            return self.products

        item = self._products[index]
        if item.quantity == 1:
            del self._products[index]
            logger.info(f"Removed {sanitize_id_for_logging(product_id)} from cart")
        else:
            self._products[index] = replace(item, quantity=item.quantity - 1)
        return await self._commit()

    # ==================== INTERNALS ====================

    def _index_of(self, product_id: str) -> Optional[int]:
        return next(
            (i for i, item in enumerate(self._products) if item.id == product_id),
            None,
        )

    async def _commit(self) -> Snapshot:
        # Memory is updated before the first await; the write trails it
        snapshot = self.products
        self._notify(snapshot)
        await self._persist(snapshot)
        return snapshot

    async def _persist(self, snapshot: Snapshot) -> None:
        payload = dump_products(snapshot)
        async with self._write_lock:
            try:
                async for attempt in _write_retry(self._write_attempts):
                    with attempt:
                        await self._backend.set(self._key, payload)
            except Exception as e:
                logger.error(
                    f"Failed to persist cart ({len(snapshot)} line item(s)) under {self._key}, "
                    f"keeping in-memory state: {e}"
                )
