"""Middleware registration."""

from fastapi import FastAPI

from academy.config import Settings
from academy.middleware.cors import setup_cors
from academy.middleware.error_handler import setup_error_handlers
from academy.middleware.logging import setup_logging
from academy.middleware.rate_limit import RateLimitMiddleware
from academy.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure logging and error rendering, then stack the middleware.

    Outermost to innermost: CORS, request id, rate limit. The request id is
    bound before the limiter runs so a 429 is logged against it, and CORS
    headers land on every response including rejections.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        write_requests_per_window=settings.rate_limit_write_requests,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
