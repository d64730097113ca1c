"""Pytest configuration and fixtures"""
import os
import json
import pytest
from unittest.mock import AsyncMock

# Tests never talk to a real Redis
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from marketplace.cart import CartStore
from marketplace.db import MemoryStore, StorageKeys


@pytest.fixture
def memory_backend():
    """Empty in-memory durable store"""
    return MemoryStore()


@pytest.fixture
def store(memory_backend):
    """CartStore over an empty in-memory backend"""
    return CartStore(memory_backend, write_attempts=1)


@pytest.fixture
def mock_backend():
    """Durable store mock with nothing persisted"""
    backend = AsyncMock()
    backend.get = AsyncMock(return_value=None)
    backend.set = AsyncMock(return_value=None)
    return backend


@pytest.fixture
def sample_product():
    """Sample catalog product (no quantity)"""
    return {
        "id": "x",
        "title": "Shoe",
        "imageUrl": "img",
        "price": 50,
    }


@pytest.fixture
def other_product():
    """Second catalog product"""
    return {
        "id": "y",
        "title": "Sock",
        "imageUrl": "https://cdn.example.com/sock.png",
        "price": 4.5,
    }


@pytest.fixture
def persisted_cart():
    """Serialized cart as written by a previous session"""
    return json.dumps([
        {"id": "a", "title": "T", "imageUrl": "u", "price": 9.99, "quantity": 2},
    ])


@pytest.fixture
def read_stored():
    """Decode what a MemoryStore currently holds under the cart key"""
    def _read(backend: MemoryStore):
        return json.loads(backend._data[StorageKeys.CART_PRODUCTS])
    return _read
