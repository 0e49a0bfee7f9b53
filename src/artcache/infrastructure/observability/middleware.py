"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from artcache.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


# Hey future me, image requests come in BURSTS (a grid page = 50 covers), so
# successful requests log at DEBUG and only failures make it to INFO.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Sets a correlation ID per request and logs the outcome."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        set_correlation_id(request.headers.get("X-Correlation-ID"))
        method = request.method
        path = request.url.path

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed: %s %s",
                method,
                path,
                extra={"error_type": type(e).__name__},
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        level = logging.DEBUG if response.status_code < 400 else logging.INFO
        logger.log(
            level,
            "%s %s?%s → %d (%.0fms)",
            method,
            path,
            request.url.query,
            response.status_code,
            duration_ms,
            extra={"status_code": response.status_code, "duration_ms": int(duration_ms)},
        )
        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
