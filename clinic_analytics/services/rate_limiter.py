"""Simple in-memory rate limiter for the analytics routes.

Requests are budgeted per principal over a sliding window. State lives in the
process, so each instance of the service enforces its own budget.
"""
import logging
import time
from collections import defaultdict
from threading import Lock
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding-window rate limiter.

    Tracks request timestamps per key (the principal id) and rejects once the
    window already holds ``max_requests`` of them.
    """

    def __init__(self, max_requests: int = 100, window_seconds: int = 60, clock: Callable[[], float] = time.time):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maximum number of requests allowed per window
            window_seconds: Time window in seconds (default: 1 minute)
            clock: Time source in seconds
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._lock = Lock()

    def _cleanup_old_requests(self, key: str, current_time: float) -> None:
        """Remove requests outside the current window."""
        cutoff = current_time - self.window_seconds
        recent = [t for t in self._requests[key] if t > cutoff]
        if recent:
            self._requests[key] = recent
        else:
            self._requests.pop(key, None)

    def hit(self, key: str) -> Tuple[bool, int]:
        """
        Count a request against ``key`` if the budget allows it.

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        current_time = self._clock()

        with self._lock:
            self._cleanup_old_requests(key, current_time)
            request_count = len(self._requests.get(key, ()))

            if request_count >= self.max_requests:
                logger.warning(f"Rate limit exceeded for principal {key}: {request_count} requests in window")
                return False, 0

            self._requests[key].append(current_time)
            return True, self.max_requests - request_count - 1

    def get_request_count(self, key: str) -> int:
        """Get current request count for a key."""
        current_time = self._clock()

        with self._lock:
            self._cleanup_old_requests(key, current_time)
            return len(self._requests.get(key, ()))

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
