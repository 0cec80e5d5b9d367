from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..data.models import SupplierCandidate
from ..logging import get_logger

logger = get_logger(__name__)


def cache_key(item_name: str) -> str:
    return " ".join(item_name.split()).lower()


class SupplierSearchCache:
    """In-memory TTL cache of supplier search results, keyed by normalised item name.

    Shared between workflows, so every access takes the lock. ``clock`` must be
    monotonic; tests pass a fake.
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, List[SupplierCandidate]]] = {}
        self._lock = threading.Lock()

    def get(self, item_name: str) -> Optional[List[SupplierCandidate]]:
        key = cache_key(item_name)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, candidates = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Supplier cache entry expired: {key}")
                return None
            return list(candidates)

    def set(self, item_name: str, candidates: List[SupplierCandidate]) -> None:
        with self._lock:
            self._entries[cache_key(item_name)] = (self._clock(), list(candidates))

    def invalidate(self, item_name: str) -> bool:
        """Drop one entry; returns whether anything was cached."""
        with self._lock:
            return self._entries.pop(cache_key(item_name), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
