import logging
import time
import uuid
from http import HTTPStatus

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from netflim_api.core.trace import set_session_id, set_trace_id

alog = logging.getLogger("access")


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, session_header: str = "X-Session-Id"):
        super().__init__(app)
        self.session_header = session_header

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())
        set_trace_id(trace_id)
        set_session_id(request.headers.get(self.session_header)
                       or client_ip(request))
        start = time.perf_counter()
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["X-Trace-Id"] = trace_id
            return response
        finally:
            dur_ms = int((time.perf_counter() - start) * 1000)
            alog.info(
                "access",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "query": str(request.url.query)
                    if request.url.query else "",
                    "status": status if "status" in locals() else 500,
                    "latency_ms": dur_ms,
                    "client_ip": client_ip(request),
                },
            )


class FixedWindowLimiter:
    """Counts hits per key inside fixed windows of `window_ms`."""

    def __init__(self, max_requests: int, window_ms: int,
                 clock=time.monotonic) -> None:
        self.max_requests = max_requests
        self.window = window_ms / 1000.0
        self._clock = clock
        self._hits: dict[str, tuple[float, int]] = {}
        self._next_sweep = 0.0

    def hit(self, key: str) -> tuple[bool, int, float]:
        """Register one hit; return (allowed, remaining, seconds_to_reset)."""
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        started, count = self._hits.get(key, (now, 0))
        if now - started >= self.window:
            started, count = now, 0
        count += 1
        self._hits[key] = (started, count)
        remaining = max(self.max_requests - count, 0)
        reset_in = max(self.window - (now - started), 0.0)
        return count <= self.max_requests, remaining, reset_in

    def _sweep(self, now: float) -> None:
        # at most once per window: forget keys whose window has ended
        self._hits = {
            key: hit for key, hit in self._hits.items()
            if now - hit[0] < self.window
        }
        self._next_sweep = now + self.window

    def __len__(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()
        self._next_sweep = 0.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_requests: int, window_ms: int,
                 exempt_paths: tuple[str, ...] = ("/health",)):
        super().__init__(app)
        self.limiter = FixedWindowLimiter(max_requests, window_ms)
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next):
        if (self.limiter.max_requests <= 0
                or request.url.path in self.exempt_paths):
            return await call_next(request)

        allowed, remaining, reset_in = self.limiter.hit(client_ip(request))
        headers = {
            "X-RateLimit-Limit": str(self.limiter.max_requests),
            "X-RateLimit-Remaining": str(remaining),
        }
        if not allowed:
            alog.warning("rate_limited",
                         extra={"client_ip": client_ip(request)})
            headers["Retry-After"] = str(int(reset_in) + 1)
            return JSONResponse(
                status_code=HTTPStatus.TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "error": "rate_limited",
                    "message": "Too many requests from this IP, "
                               "please try again later.",
                },
                headers=headers,
            )
        response = await call_next(request)
        response.headers.update(headers)
        return response
