"""
Request context: IDs, timing and the access log line.

X-Correlation-ID is supplied by the admin UI and stays the same for a browser
session; X-Request-ID is unique per request. Both are generated when missing,
echoed back on the response and exposed to log records through
RequestContextLogFilter.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

# Health checks would otherwise flood the access log
QUIET_PATHS = {"/health"}


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


def get_request_id() -> str:
    return request_id_ctx.get() or "unknown"


class RequestContextLogFilter(logging.Filter):
    """Adds request_id and correlation_id attributes to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        record.correlation_id = correlation_id_ctx.get() or "-"
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or generate_id()
        request_id = request.headers.get("X-Request-ID") or generate_id()
        correlation_token = correlation_id_ctx.set(correlation_id)
        request_token = request_id_ctx.set(request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000

            if request.url.path not in QUIET_PATHS:
                logger.info(
                    "%s %s -> %d (%.1fms)",
                    request.method,
                    request.url.path,
                    response.status_code,
                    elapsed_ms,
                )

            response.headers["X-Correlation-ID"] = correlation_id
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"
            return response
        finally:
            correlation_id_ctx.reset(correlation_token)
            request_id_ctx.reset(request_token)
