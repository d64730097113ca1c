"""
GoMarketplace Cart Module

This package contains the client-side cart components:
- db: Durable key-value stores (Upstash Redis + in-memory)
- cart: CartStore, line item models, scoped accessor
- routers: FastAPI bridge for webview consumers

Note: Imports are lazy so that importing the package does not require
the Redis client or FastAPI to be installed.
"""

__all__ = [
    "CartStore",
    "LineItem",
    "open_cart",
    "use_cart",
    "get_redis",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name in ("CartStore", "LineItem", "open_cart", "use_cart"):
        from marketplace import cart
        return getattr(cart, name)
    elif name == "get_redis":
        from marketplace.db import get_redis
        return get_redis
    raise AttributeError(f"module 'marketplace' has no attribute '{name}'")
