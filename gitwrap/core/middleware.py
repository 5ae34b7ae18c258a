from collections import defaultdict
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import Lock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

RATE_LIMITED_PREFIX = "/api/stats/"


class SlidingWindowLimiter:
    """Count hits per key over the last `window_seconds`."""

    def __init__(self, max_hits: int, window_seconds: int) -> None:
        self.max_hits = max(1, max_hits)
        self.window_seconds = max(1, window_seconds)
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = Lock()

    def retry_after(self, key: str, now: float) -> int | None:
        """Record a hit for `key`, or return seconds to wait when over the limit."""

        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - self.window_seconds:
                hits.popleft()

            if len(hits) >= self.max_hits:
                return max(1, int(self.window_seconds - (now - hits[0])))

            hits.append(now)
            return None


class StatsRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client limit on GET /api/stats/* since each one may call GitHub."""

    def __init__(
        self, app, requests_per_window: int = 30, window_seconds: int = 60
    ) -> None:
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(requests_per_window, window_seconds)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "GET" and request.url.path.startswith(RATE_LIMITED_PREFIX):
            wait = self.limiter.retry_after(client_key(request), monotonic())
            if wait is not None:
                return JSONResponse(
                    status_code=429,
                    content={"detail": "Too Many Requests"},
                    headers={"Retry-After": str(wait)},
                )

        return await call_next(request)


def client_key(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded_for.split(",")[0].strip()
    if first_hop:
        return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
