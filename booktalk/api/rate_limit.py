"""
In-process request rate limiting per client address.
"""

import logging
import threading
import time
from typing import Dict, List, Optional

from flask import request

from booktalk.core.errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window counter keyed by client IP."""

    def __init__(self, max_requests: int = 100, window_seconds: int = 15 * 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.requests: Dict[str, List[float]] = {}
        self._last_sweep: Optional[float] = None
        self._lock = threading.Lock()

    def _sweep(self, current_time: float):
        """Drop addresses with no request inside the window. Caller holds the lock."""
        expired = [
            ip for ip, times in self.requests.items()
            if not times or current_time - times[-1] >= self.window_seconds
        ]
        for ip in expired:
            del self.requests[ip]
        self._last_sweep = current_time
        if expired:
            logger.debug(f"Rate limiter dropped {len(expired)} idle addresses")

    def is_rate_limited(self, ip: str, now: float = None) -> bool:
        current_time = time.time() if now is None else now
        with self._lock:
            # at most one full sweep per window
            if self._last_sweep is None:
                self._last_sweep = current_time
            elif current_time - self._last_sweep >= self.window_seconds:
                self._sweep(current_time)

            # Clean old requests
            recent = [t for t in self.requests.get(ip, []) if current_time - t < self.window_seconds]

            if len(recent) >= self.max_requests:
                self.requests[ip] = recent
                return True

            recent.append(current_time)
            self.requests[ip] = recent
            return False


def register_rate_limiter(app, limiter: RateLimiter):
    @app.before_request
    def enforce_rate_limit():
        ip = request.remote_addr or 'unknown'
        if limiter.is_rate_limited(ip):
            logger.warning(f"Rate limit exceeded for {ip}")
            raise RateLimitError("Too many requests. Please try again later.")
