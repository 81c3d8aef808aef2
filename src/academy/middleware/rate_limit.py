"""Redis-backed fixed window rate limiting middleware.

Requests are counted per signed-in user when a valid bearer token is
present, otherwise per client IP. Writes (enrolling, publishing, messaging,
liking) draw on their own, smaller budget so a burst of them cannot eat the
read budget used for browsing.
"""

import time
from typing import Any

import jwt
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from academy.auth.jwt import verify_token
from academy.redis_client import get_redis

_EXEMPT_PATHS = frozenset({"/health", "/ready", "/version"})
_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def rate_limit_identity(request: Request) -> str:
    """``user:<id>`` for a valid bearer token, else ``ip:<address>``."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            payload = verify_token(token)
        except jwt.InvalidTokenError:
            payload = None
        if payload is not None:
            return f"user:{payload['sub']}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limit requests per principal (or IP) using Redis counters."""

    def __init__(
        self,
        app: Any,  # noqa: ANN401
        requests_per_window: int = 100,
        window_seconds: int = 60,
        write_requests_per_window: int = 30,
    ) -> None:
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.write_requests_per_window = write_requests_per_window
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Return 429 once the caller exceeds its window."""
        if request.url.path in _EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        try:
            redis = get_redis()
        except RuntimeError:
            # Redis not initialized: no rate limiting
            return await call_next(request)

        if request.method in _WRITE_METHODS:
            bucket, limit = "write", self.write_requests_per_window
        else:
            bucket, limit = "read", self.requests_per_window
        window = int(time.time()) // self.window_seconds
        rate_key = f"ratelimit:{bucket}:{rate_limit_identity(request)}:{window}"

        pipe = redis.pipeline()
        pipe.incr(rate_key)
        pipe.expire(rate_key, self.window_seconds + 1)
        results: list[Any] = await pipe.execute()

        current_count: int = results[0]
        remaining = max(0, limit - current_count)

        if current_count > limit:
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later.", "error": "rate_limited"},
                headers={
                    "Retry-After": str(self.window_seconds - int(time.time()) % self.window_seconds),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Limit": str(limit),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Limit"] = str(limit)
        return response
