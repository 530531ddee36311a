"""Bind DN caching keyed by account name."""

import threading
import time
from collections.abc import Callable

import structlog
from cachetools import TTLCache

logger = structlog.get_logger()


class BindDNCache:
    """In-memory TTL cache mapping account names to resolved bind DNs.

    Safe to share between threads and concurrent tasks; concurrent writes to
    the same key are last-writer-wins.
    """

    def __init__(
        self,
        ttl_seconds: float = 60,
        maxsize: int = 1000,
        timer: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache with TTL in seconds (default: 1 minute)."""
        self.ttl_seconds = ttl_seconds
        self._cache: TTLCache[str, str] = TTLCache(
            maxsize=maxsize, ttl=ttl_seconds, timer=timer
        )
        self._lock = threading.Lock()

    def get(self, account_name: str) -> str | None:
        """Get cached bind DN for account name if not expired."""
        with self._lock:
            bind_user_dn = self._cache.get(account_name)

        if bind_user_dn is not None:
            logger.debug("Bind DN cache hit", account_name=account_name)
        return bind_user_dn

    def set(self, account_name: str, bind_user_dn: str) -> None:
        """Cache bind DN for account name, replacing any existing entry."""
        with self._lock:
            self._cache[account_name] = bind_user_dn
        logger.debug("Bind DN cached", account_name=account_name)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._cache.clear()
        logger.debug("Bind DN cache cleared")

    def size(self) -> int:
        """Return number of unexpired entries."""
        with self._lock:
            self._cache.expire()
            return len(self._cache)
