"""Cart package: models, store, and scoped accessor."""
from .models import LineItem, ProductInput, dump_products, load_products
from .service import CartStore
from .scope import CartLookup, cart_scope, open_cart, resolve_cart, use_cart

__all__ = [
    "LineItem",
    "ProductInput",
    "dump_products",
    "load_products",
    "CartStore",
    "CartLookup",
    "cart_scope",
    "open_cart",
    "resolve_cart",
    "use_cart",
]
