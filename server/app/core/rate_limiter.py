import math
import threading
import time
from typing import Callable, Dict, Optional
from fastapi import Request
from app.core.config import settings
from app.core.errors import RateLimitExceeded

class Window:
    def __init__(self, reset_at: float):
        self.hits = 0
        self.reset_at = reset_at

class RateLimitResult:
    def __init__(self, allowed: bool, limit: int, remaining: int, reset_in: int):
        self.allowed = allowed
        self.limit = limit
        self.remaining = remaining
        self.reset_in = reset_in

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_in),
        }

class RateLimiter:
    """Fixed-window request counter keyed by client address."""

    def __init__(self, window_ms: int, max_requests: int, message: str,
                 clock: Callable[[], float] = time.monotonic):
        self.window = window_ms / 1000.0
        self.max_requests = max_requests
        self.message = message
        self.clock = clock
        self.windows: Dict[str, Window] = {}
        self._next_purge = 0.0
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        now = self.clock()
        with self._lock:
            if now >= self._next_purge:
                self._purge(now)
            window = self.windows.get(key)
            if window is None or window.reset_at <= now:
                window = Window(now + self.window)
                self.windows[key] = window
            window.hits += 1
            remaining = max(self.max_requests - window.hits, 0)
            reset_in = max(math.ceil(window.reset_at - now), 0)
            return RateLimitResult(window.hits <= self.max_requests, self.max_requests, remaining, reset_in)

    def _purge(self, now: float):
        # Drop finished windows, at most once per window length
        stale = [key for key, window in self.windows.items() if window.reset_at <= now]
        for key in stale:
            del self.windows[key]
        self._next_purge = now + self.window

    def reset(self, key: Optional[str] = None):
        with self._lock:
            if key is None:
                self.windows.clear()
            else:
                self.windows.pop(key, None)

def client_key(request: Request) -> str:
    # uvicorn's proxy header handling already rewrites request.client behind a trusted proxy
    if request.client:
        return request.client.host
    return "unknown"

class RateLimit:
    """Route dependency that enforces a limiter for a single router."""

    def __init__(self, limiter: RateLimiter):
        self.limiter = limiter

    async def __call__(self, request: Request):
        result = self.limiter.hit(client_key(request))
        if not result.allowed:
            raise RateLimitExceeded(self.limiter.message, headers=result.headers)

# General API rate limiter
api_limiter = RateLimiter(
    settings.RATE_LIMIT_WINDOW_MS,
    settings.RATE_LIMIT_MAX_REQUESTS,
    "Too many requests from this IP, please try again later.",
)

# OTP spam protection, also applied to the AI routes
auth_limiter = RateLimiter(900000, 5, "Too many OTP attempts. Please try again later.")

ALL_LIMITERS = (api_limiter, auth_limiter)
