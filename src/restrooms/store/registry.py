"""Process-wide store selection.

``get_store()`` lazily builds the store named by ``RESTROOMS_STORE_URL``;
``use_store()`` replaces it (application bootstrap, tests).
"""

import threading

from restrooms.config import get_settings
from restrooms.store.base import KeyValueStore
from restrooms.store.memory import MemoryStore
from restrooms.utils.logging import get_logger

logger = get_logger(__name__)

_REDIS_SCHEMES = ("redis://", "rediss://", "unix://")

_current: KeyValueStore | None = None
_lock = threading.Lock()


def build_store(url: str, timeout: float = 5.0) -> KeyValueStore:
    """Build a store backend from a URL."""
    if not url or url.startswith("memory://"):
        return MemoryStore()
    if url.startswith(_REDIS_SCHEMES):
        from restrooms.store.redis_store import RedisStore

        return RedisStore.from_url(url, timeout=timeout)
    raise ValueError(f"Unsupported store URL: {url!r}")


def get_store() -> KeyValueStore:
    global _current
    with _lock:
        if _current is None:
            settings = get_settings()
            _current = build_store(settings.store_url, timeout=settings.store_timeout)
            logger.info("Store initialised", backend=type(_current).__name__)
        return _current


def use_store(store: KeyValueStore) -> KeyValueStore:
    """Make ``store`` the process-wide store. Returns it for chaining."""
    global _current
    with _lock:
        _current = store
    return store
