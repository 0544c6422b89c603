"""
Fingerprint cache: a time-expiring key → value store.

Entries are never swept in the background; an entry older than the TTL is
simply treated as a miss when it is looked up. ``max_entries`` optionally
caps the store for long-running processes.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

logger = logging.getLogger("FingerprintCache")


def _now_ms() -> int:
    return int(time.time() * 1000)


def fingerprint(endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Deterministic key for an endpoint and its query parameters (sorted by name)."""
    if not params:
        return endpoint
    query = urlencode(sorted((str(k), str(v)) for k, v in params.items()))
    return f"{endpoint}?{query}"


@dataclass
class CacheEntry:
    data: Any
    timestamp: int  # wall-clock ms


class FingerprintCache:
    def __init__(
        self,
        ttl_seconds: float = 1800.0,
        max_entries: Optional[int] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self.ttl_ms = int(ttl_seconds * 1000)
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_valid(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp < self.ttl_ms

    def get(self, key: str) -> Optional[Any]:
        """Cached value for ``key``, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None or not self._is_valid(entry):
            return None
        return entry.data

    def put(self, key: str, value: Any) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(data=value, timestamp=self._clock())

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted cache entry: {evicted}")

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        expired = [k for k, entry in self._entries.items() if not self._is_valid(entry)]
        for key in expired:
            del self._entries[key]
        return len(expired)
