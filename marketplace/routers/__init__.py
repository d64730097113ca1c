"""HTTP bridge for webview consumers."""
from .cart import router as cart_router

__all__ = ["cart_router"]
