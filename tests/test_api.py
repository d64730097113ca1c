"""Tests for the cart HTTP bridge"""
import pytest
from unittest.mock import patch
from fastapi import FastAPI
from fastapi.testclient import TestClient

from marketplace.app import create_app
from marketplace.cart import CartStore
from marketplace.db import MemoryStore, StorageKeys
from marketplace.routers import cart_router


@pytest.fixture
def backend(persisted_cart):
    return MemoryStore({StorageKeys.CART_PRODUCTS: persisted_cart})


@pytest.fixture
def client(backend):
    """Client for an app owning one hydrated store"""
    app = create_app(CartStore(backend, write_attempts=1))
    with TestClient(app) as test_client:
        yield test_client


def test_get_cart_hydrated(client):
    """Test the persisted cart is served after startup"""
    response = client.get("/cart")

    assert response.status_code == 200
    data = response.json()
    assert data["hydrated"] is True
    assert data["products"] == [
        {"id": "a", "title": "T", "imageUrl": "u", "price": 9.99, "quantity": 2}
    ]


def test_add_increment_decrement(client, sample_product, backend):
    """Test the full add / increment / decrement flow over HTTP"""
    response = client.post("/cart/items", json=sample_product)
    assert response.status_code == 200
    assert [p["id"] for p in response.json()["products"]] == ["a", "x"]

    response = client.post("/cart/items/x/increment")
    assert response.json()["products"][1]["quantity"] == 2

    client.post("/cart/items/x/decrement")
    response = client.post("/cart/items/x/decrement")
    assert [p["id"] for p in response.json()["products"]] == ["a"]

    assert client.app.state.cart_store.products[0].quantity == 2
    assert '"x"' not in backend._data[StorageKeys.CART_PRODUCTS]


def test_unknown_ids_are_noops(client):
    """Test increment / decrement of an id not in the cart change nothing"""
    assert client.post("/cart/items/missing/increment").status_code == 200
    response = client.post("/cart/items/missing/decrement")

    assert response.status_code == 200
    assert [p["id"] for p in response.json()["products"]] == ["a"]


def test_add_invalid_body(client):
    """Test a product without id is rejected by validation"""
    response = client.post("/cart/items", json={"title": "T", "imageUrl": "u", "price": 1})

    assert response.status_code == 422


def test_add_non_finite_price(client):
    """Test a price the cart cannot store is a bad request"""
    response = client.post(
        "/cart/items",
        content='{"id": "n", "title": "T", "imageUrl": "u", "price": Infinity}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code in (400, 422)


def test_router_without_scope_fails():
    """Test serving the router without a bound store is reported as misuse"""
    app = FastAPI()
    app.include_router(cart_router)

    with TestClient(app) as client:
        response = client.get("/cart")

    assert response.status_code == 500
    assert "use_cart must be used within a cart_scope" in response.json()["detail"]


def test_store_dependency_uses_accessor(memory_backend):
    """Test the router reaches the store through use_cart"""
    app = FastAPI()
    app.include_router(cart_router)
    store = CartStore(memory_backend)

    with patch("marketplace.routers.cart.use_cart", return_value=store) as accessor:
        with TestClient(app) as client:
            response = client.get("/cart")

    assert response.status_code == 200
    assert response.json()["products"] == []
    accessor.assert_called_once_with()
