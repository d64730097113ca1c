"""
Environment configuration.

All settings come from environment variables with safe defaults, so the
cart works locally (in-memory store) without any configuration.
"""

import os

# Fixed key the cart collection is mirrored under
CART_STORAGE_KEY = os.environ.get("CART_STORAGE_KEY", "@GoMarketplace:products")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Durable write retry policy
CART_WRITE_ATTEMPTS = int(os.environ.get("CART_WRITE_ATTEMPTS", "3"))
CART_WRITE_BACKOFF_MAX = float(os.environ.get("CART_WRITE_BACKOFF_MAX", "2"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
MARKETPLACE_ENV = os.environ.get("MARKETPLACE_ENV", "development")
