"""
Tests for the scoped cart accessor
"""

import pytest

from marketplace.cart import CartStore, cart_scope, open_cart, resolve_cart, use_cart
from marketplace.db import MemoryStore, StorageKeys
from marketplace.errors import CartScopeError


def test_use_cart_outside_scope_fails():
    """Test the accessor fails loudly with no store bound"""
    with pytest.raises(CartScopeError, match="use_cart must be used within a cart_scope"):
        use_cart()


def test_scope_error_is_runtime_error():
    """Test misuse is a programming error, not a data error"""
    assert issubclass(CartScopeError, RuntimeError)
    assert not issubclass(CartScopeError, ValueError)


def test_resolve_cart_outside_scope_returns_error():
    """Test the typed lookup reports misuse without raising"""
    lookup = resolve_cart()

    assert not lookup.ok
    assert lookup.store is None
    assert isinstance(lookup.error, CartScopeError)
    with pytest.raises(CartScopeError):
        lookup.unwrap()


def test_cart_scope_binds_and_restores(memory_backend):
    """Test the bound store is visible inside the block only"""
    store = CartStore(memory_backend)

    with cart_scope(store):
        assert use_cart() is store
        assert resolve_cart().store is store

    assert not resolve_cart().ok


def test_nested_scopes(memory_backend):
    """Test an inner scope shadows and then restores the outer one"""
    outer = CartStore(memory_backend)
    inner = CartStore(MemoryStore())

    with cart_scope(outer):
        with cart_scope(inner):
            assert use_cart() is inner
        assert use_cart() is outer


@pytest.mark.asyncio
async def test_open_cart_hydrates_and_binds(persisted_cart, sample_product):
    """Test open_cart hands out a hydrated, bound store"""
    backend = MemoryStore({StorageKeys.CART_PRODUCTS: persisted_cart})

    async with open_cart(backend) as cart:
        assert cart.is_hydrated
        assert use_cart() is cart
        assert [item.id for item in cart.products] == ["a"]
        await cart.add_to_cart(sample_product)

    assert not resolve_cart().ok
    assert '"id": "x"' in await backend.get(StorageKeys.CART_PRODUCTS)


@pytest.mark.asyncio
async def test_open_cart_custom_key(sample_product):
    """Test open_cart honours a custom storage key"""
    backend = MemoryStore()

    async with open_cart(backend, key="@Test:cart") as cart:
        await cart.add_to_cart(sample_product)

    assert "@Test:cart" in backend
    assert StorageKeys.CART_PRODUCTS not in backend
