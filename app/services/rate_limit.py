"""
rate_limit.py
-------------

Fixed-window, per-client request limiting for sensitive endpoints.

Counters live in memory, one store per Flask application (kept in
``app.extensions``), so each worker process enforces its own limits.
Clients are identified by ``X-Forwarded-For`` (first hop), then
``X-Real-IP``, then the socket address.
"""

import threading
import time
from functools import wraps

from flask import current_app, request

from app.logger import logger

STORE_KEY = "rate_limit_store"


class RateLimitStore:
    """Thread-safe map of ``key -> [count, reset_at]``."""

    def __init__(self, clock=time.monotonic):
        self._entries = {}
        self._lock = threading.Lock()
        self._clock = clock

    def hit(self, key, window_seconds, max_requests):
        """
        Count one request for ``key``.

        Returns:
            tuple: (allowed (bool), remaining (int), retry_after (int))
        """
        now = self._clock()
        with self._lock:
            self._purge(now)
            entry = self._entries.get(key)
            if entry is None or now >= entry[1]:
                self._entries[key] = [1, now + window_seconds]
                return True, max_requests - 1, 0
            if entry[0] >= max_requests:
                return False, 0, max(int(entry[1] - now), 1)
            entry[0] += 1
            return True, max_requests - entry[0], 0

    def reset(self):
        with self._lock:
            self._entries.clear()

    def _purge(self, now):
        expired = [key for key, entry in self._entries.items() if now >= entry[1]]
        for key in expired:
            del self._entries[key]


class RateLimiter:
    """A named limit: at most ``max_requests`` per ``window_seconds``."""

    def __init__(self, name, window_seconds, max_requests, message):
        self.name = name
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.message = message

    def __repr__(self):
        return (
            f"<RateLimiter {self.name} "
            f"{self.max_requests}/{self.window_seconds}s>"
        )


admin_limiter = RateLimiter(
    "admin", 15 * 60, 100, "Too many admin requests. Please try again later."
)
login_limiter = RateLimiter(
    "login", 15 * 60, 5, "Too many login attempts. Please try again later."
)
sensitive_limiter = RateLimiter(
    "sensitive",
    60 * 60,
    10,
    "Too many sensitive operations. Please try again later.",
)
public_event_limiter = RateLimiter(
    "public_event", 60, 60, "Too many events. Please slow down."
)


def init_rate_limiting(app):
    """Attach a fresh counter store to ``app``."""
    app.extensions[STORE_KEY] = RateLimitStore()


def client_ip():
    """Best-effort client address for the current request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or request.remote_addr or "unknown"


def check_rate_limit(limiter):
    """
    Count the current request against ``limiter``.

    Returns:
        tuple or None: a ``(body, 429, headers)`` response when the limit
        is exceeded, otherwise None.
    """
    if not current_app.config.get("RATE_LIMIT_ENABLED", True):
        return None
    store = current_app.extensions.get(STORE_KEY)
    if store is None:
        return None

    ip = client_ip()
    allowed, _, retry_after = store.hit(
        f"{limiter.name}:{ip}", limiter.window_seconds, limiter.max_requests
    )
    if allowed:
        return None
    logger.warning(
        "Rate limit exceeded.", limiter=limiter.name, ip=ip, path=request.path
    )
    return {"error": limiter.message}, 429, {"Retry-After": str(retry_after)}


def rate_limited(limiter):
    """Decorator applying ``limiter`` to a view or resource method."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            rejection = check_rate_limit(limiter)
            if rejection is not None:
                return rejection
            return view_func(*args, **kwargs)

        return wrapped

    return decorator
