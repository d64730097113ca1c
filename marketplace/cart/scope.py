"""
Scoped access to the session's CartStore.

The composition root owns the store and binds it with cart_scope (or
open_cart); consumers reach it through use_cart. Using the accessor with
nothing bound is a wiring bug and fails loudly.
"""
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import AsyncIterator, Iterator, Optional

from marketplace.db import KeyValueStore
from marketplace.errors import CartScopeError
from marketplace.logging import get_logger
from .service import CartStore

logger = get_logger(__name__)

_current_cart: ContextVar[Optional[CartStore]] = ContextVar("_current_cart", default=None)


@dataclass(frozen=True)
class CartLookup:
    """Outcome of resolving the accessor: exactly one of store / error is set."""
    store: Optional[CartStore] = None
    error: Optional[CartScopeError] = None

    @property
    def ok(self) -> bool:
        return self.store is not None

    def unwrap(self) -> CartStore:
        if self.store is None:
            raise self.error or CartScopeError()
        return self.store


@contextmanager
def cart_scope(store: CartStore) -> Iterator[CartStore]:
    """Bind a live store to the current context for the duration of the block."""
    token = _current_cart.set(store)
    try:
        yield store
    finally:
        _current_cart.reset(token)


@asynccontextmanager
async def open_cart(backend: KeyValueStore, key: Optional[str] = None) -> AsyncIterator[CartStore]:
    """
    Build, hydrate and bind a CartStore for one session.

    Usage:
        async with open_cart(RedisStore()) as cart:
            await cart.add_to_cart(product)
    """
    store = CartStore(backend, key=key)
    await store.hydrate()
    with cart_scope(store):
        try:
            yield store
        finally:
            await store.flush()


def resolve_cart() -> CartLookup:
    """Resolve the bound store without raising."""
    store = _current_cart.get()
    if store is None:
        return CartLookup(error=CartScopeError())
    return CartLookup(store=store)


def use_cart() -> CartStore:
    """
    Get the bound store.

    Raises:
        CartScopeError: If called outside cart_scope / open_cart
    """
    lookup = resolve_cart()
    if not lookup.ok:
        logger.error(str(lookup.error))
    return lookup.unwrap()
