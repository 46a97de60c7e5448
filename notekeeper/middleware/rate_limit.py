"""
Per-address rate limiting at the transport boundary.

Two fixed-window limiters keyed by client address:
- general: every request counts against RATE_LIMIT_GENERAL_MAX
- auth: only unsuccessful (status >= 400) responses count against the
  stricter RATE_LIMIT_AUTH_MAX, with separate budgets for /auth/signup and
  /auth/login

Counters live in process memory, so limits are per worker. This is a coarse
layer in front of the persisted per-account lockout, not a replacement for it.
"""

import logging
import math
import threading
import time
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

AUTH_PATHS = frozenset({"/auth/signup", "/auth/login"})


class FixedWindowCounter:
    """Counts hits per key in fixed windows of window_seconds."""

    def __init__(self, window_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (count, window_expires_at)
        self._windows: dict[str, tuple[int, float]] = {}

    def _current(self, key: str, now: float) -> tuple[int, float]:
        count, expires_at = self._windows.get(key, (0, 0.0))
        if expires_at <= now:
            return 0, now + self.window_seconds
        return count, expires_at

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, exp) in self._windows.items() if exp <= now]
        for k in expired:
            del self._windows[k]

    def hit(self, key: str) -> tuple[int, int]:
        """Record one hit; return (count in window, seconds until the window resets)."""
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            count, expires_at = self._current(key, now)
            count += 1
            self._windows[key] = (count, expires_at)
        return count, math.ceil(expires_at - now)

    def peek(self, key: str) -> tuple[int, int]:
        """Return (count in window, seconds until reset) without recording a hit."""
        now = self._clock()
        with self._lock:
            count, expires_at = self._current(key, now)
        return count, math.ceil(expires_at - now)

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _limit_headers(limit: int, count: int, reset_in: int) -> dict[str, str]:
    return {
        "RateLimit-Limit": str(limit),
        "RateLimit-Remaining": str(max(0, limit - count)),
        "RateLimit-Reset": str(reset_in),
    }


def _too_many(message: str, headers: dict[str, str], reset_in: int) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"message": message},
        headers={**headers, "Retry-After": str(reset_in)},
    )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware applying the general and auth limiters."""

    def __init__(
        self,
        app,
        window_seconds: int,
        general_max: int,
        auth_max: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(app)
        self.general_max = general_max
        self.auth_max = auth_max
        self.general = FixedWindowCounter(window_seconds, clock)
        self.auth_failures = FixedWindowCounter(window_seconds, clock)

    async def dispatch(self, request: Request, call_next) -> Response:
        address = client_address(request)
        path = request.url.path.rstrip("/") or "/"

        count, reset_in = self.general.hit(address)
        headers = _limit_headers(self.general_max, count, reset_in)
        if count > self.general_max:
            logger.warning("Rate limit exceeded", extra={"client": address, "path": path})
            return _too_many(
                "Too many requests from this IP, please try again later.",
                headers,
                reset_in,
            )

        is_auth = path in AUTH_PATHS
        # Signup and login failures are counted separately.
        auth_key = f"{address}:{path}"
        if is_auth:
            failures, auth_reset_in = self.auth_failures.peek(auth_key)
            if failures >= self.auth_max:
                logger.warning("Auth rate limit exceeded", extra={"client": address, "path": path})
                return _too_many(
                    "Too many authentication attempts from this IP, please try again later.",
                    _limit_headers(self.auth_max, failures, auth_reset_in),
                    auth_reset_in,
                )

        response = await call_next(request)

        if is_auth and response.status_code >= 400:
            self.auth_failures.hit(auth_key)
        for key, value in headers.items():
            response.headers[key] = value
        return response
