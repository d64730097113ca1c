"""
Cart Router

Exposes the consumer surface of the session's CartStore:
read the collection, add, increment, decrement.
The store is reached through the scoped accessor; a request served
without a bound store is a wiring bug and answers 500.
"""
from fastapi import APIRouter, Depends, HTTPException

from marketplace.cart import CartStore, use_cart
from marketplace.errors import CartScopeError
from .models import AddToCartRequest, CartResponse, LineItemOut

router = APIRouter(prefix="/cart", tags=["cart"])


async def get_cart_store() -> CartStore:
    """Dependency resolving the bound CartStore."""
    try:
        return use_cart()
    except CartScopeError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _cart_response(store: CartStore, products=None) -> CartResponse:
    items = store.products if products is None else products
    return CartResponse(
        products=[LineItemOut.from_item(item) for item in items],
        hydrated=store.is_hydrated,
    )


@router.get("", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get the current cart."""
    return _cart_response(store)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add one unit of a product."""
    try:
        products = await store.add_to_cart(
            {
                "id": request.id,
                "title": request.title,
                "imageUrl": request.image_url,
                "price": request.price,
            }
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _cart_response(store, products)


@router.post("/items/{product_id}/increment", response_model=CartResponse)
async def increment_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    """Increase a line's quantity by one."""
    products = await store.increment(product_id)
    return _cart_response(store, products)


@router.post("/items/{product_id}/decrement", response_model=CartResponse)
async def decrement_item(product_id: str, store: CartStore = Depends(get_cart_store)):
    """Decrease a line's quantity by one, removing it at one."""
    products = await store.decrement(product_id)
    return _cart_response(store, products)
