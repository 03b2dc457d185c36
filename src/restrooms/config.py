"""Runtime settings for the Restrooms service.

All values come from environment variables so the same build runs against
the in-memory store in tests and Redis in production.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_STORE_URL = "memory://"
DEFAULT_KEY_PREFIX = "bathroom"


@dataclass(frozen=True)
class Settings:
    """Immutable service settings."""

    store_url: str = DEFAULT_STORE_URL
    key_prefix: str = DEFAULT_KEY_PREFIX
    store_timeout: float = 5.0  # seconds, Redis socket timeout

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            store_url=os.getenv("RESTROOMS_STORE_URL", DEFAULT_STORE_URL).strip() or DEFAULT_STORE_URL,
            key_prefix=os.getenv("RESTROOMS_KEY_PREFIX", DEFAULT_KEY_PREFIX).strip() or DEFAULT_KEY_PREFIX,
            store_timeout=float(os.getenv("RESTROOMS_STORE_TIMEOUT", "5.0")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings singleton, read from the environment on first use."""
    return Settings.from_env()
