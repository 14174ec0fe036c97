"""TTL cache for generated reports.

Report generation is a pure function of the ledger snapshot, so a report can
be reused for as long as the snapshot is byte-for-byte the same. Entries are
keyed by a fingerprint of the canonical JSON of the snapshot and parameters.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from cachetools import TTLCache

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


def ledger_fingerprint(snapshot: BaseModel, **params: object) -> str:
    """Stable SHA-256 fingerprint of a snapshot plus report parameters.

    Args:
        snapshot: Ledger snapshot model
        **params: Extra inputs that change the report (tax year etc.)

    Returns:
        Hex digest suitable as a cache key
    """
    payload = {
        "snapshot": snapshot.model_dump(mode="json"),
        "params": {key: str(value) for key, value in sorted(params.items())},
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class ReportCache(Generic[T]):
    """Thread-safe TTL cache of computed reports."""

    def __init__(self, maxsize: int = 128, ttl: float = 300) -> None:
        """Initialize the cache.

        Args:
            maxsize: Maximum number of entries in cache
            ttl: Time-to-live in seconds
        """
        self.maxsize = maxsize
        self.ttl = ttl
        self._cache: TTLCache[str, T] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, key: str, factory: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing it on a miss."""
        with self._lock:
            if key in self._cache:
                self._hits += 1
                logger.debug("Report cache hit for %s", key[:12])
                return self._cache[key]
            self._misses += 1

        logger.debug("Report cache miss for %s", key[:12])
        value = factory()

        with self._lock:
            self._cache[key] = value
        return value

    def clear(self) -> None:
        """Drop every cached report."""
        with self._lock:
            self._cache.clear()

    def cache_info(self) -> dict[str, Any]:
        """Hit/miss counters and current size."""
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "maxsize": self.maxsize,
                "currsize": self._cache.currsize,
                "ttl": self.ttl,
            }
