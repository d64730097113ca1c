"""
Cart bridge - FastAPI application

Composition root: owns one CartStore for the app's lifetime, hydrates it
on startup and binds it to every request.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from marketplace.cart import CartStore, cart_scope
from marketplace.db import KeyValueStore, MemoryStore, RedisStore
from marketplace import config
from marketplace.logging import get_logger
from marketplace.routers import cart_router

logger = get_logger(__name__)


def default_backend() -> KeyValueStore:
    """Redis when credentials are configured, in-memory otherwise."""
    if config.UPSTASH_REDIS_REST_URL and config.UPSTASH_REDIS_REST_TOKEN:
        return RedisStore()
    logger.warning("Upstash Redis not configured, cart will not survive restarts")
    return MemoryStore()


def create_app(store: Optional[CartStore] = None) -> FastAPI:
    store = store or CartStore(default_backend())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await store.hydrate()
        yield
        await store.flush()

    app = FastAPI(title="GoMarketplace Cart", version="1.0.0", lifespan=lifespan)
    app.state.cart_store = store

    @app.middleware("http")
    async def bind_cart(request: Request, call_next):
        with cart_scope(store):
            return await call_next(request)

    app.include_router(cart_router)
    return app
