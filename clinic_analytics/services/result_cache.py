"""In-memory result cache for dashboard aggregations.

Entries are keyed by operation, principal and normalised parameters, expire a
fixed time after insertion and are evicted oldest-inserted first once the
store is full. Suitable for single-instance deployments; every process keeps
its own store.
"""
import json
import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


def build_cache_key(operation: str, principal_id: Optional[str], params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Build the composite key for a cached result.

    Args:
        operation: Name of the aggregation, e.g. "weekly-patients"
        principal_id: Identifier of the authenticated principal (mandatory)
        params: Parameters that change the result; order does not matter

    Returns:
        JSON encoding of the three parts, so no value can spill into another
        part of the key
    """
    if not operation:
        raise ValueError("operation is required to build a cache key")
    if principal_id is None or not str(principal_id).strip():
        raise ValueError("principal_id is required to build a cache key")

    normalized = {str(name): str(value) for name, value in (params or {}).items()}
    return json.dumps(
        {"operation": operation, "principal": str(principal_id), "params": normalized},
        sort_keys=True,
        separators=(",", ":"),
    )


class ResultCache:
    """
    Bounded TTL cache guarded by a lock.

    Insertion order doubles as eviction order: re-putting a key moves it to
    the newest position, and reads do not refresh it.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry measured from insertion
            max_entries: Maximum number of live entries kept
            clock: Monotonic time source in seconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = Lock()

    def _purge_expired(self, current_time: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= current_time]
        for key in expired:
            del self._entries[key]

    def get(self, key: str) -> Optional[Any]:
        current_time = self._clock()

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= current_time:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Any) -> None:
        current_time = self._clock()

        with self._lock:
            self._entries.pop(key, None)
            self._purge_expired(current_time)
            while len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Result cache full, evicted key={evicted}")
            self._entries[key] = (current_time + self.ttl_seconds, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        current_time = self._clock()

        with self._lock:
            self._purge_expired(current_time)
            return len(self._entries)

    def stats(self) -> Dict[str, int]:
        return {"entries": len(self), "max_entries": self.max_entries, "ttl_seconds": self.ttl_seconds}
