"""
HTTP middleware: request ids and one access log line per request.
"""

import time
from typing import Callable, Optional

import structlog
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _session_user_id(request: Request) -> Optional[str]:
    # Set by the session dependency once the cookie has been re-validated
    return getattr(request.state, "user_id", None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its status, duration and, when signed in, the user."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        log = logger.bind(
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
        )
        log.debug("Request started")

        try:
            response = await call_next(request)
        except Exception:
            log.exception("Request failed", user_id=_session_user_id(request), process_time_ms=_elapsed_ms(started))
            raise

        log.info(
            "Request completed",
            status_code=response.status_code,
            user_id=_session_user_id(request),
            process_time_ms=_elapsed_ms(started),
        )
        return response


def setup_middleware(app):
    """Install request id and access logging middleware."""

    # Starlette runs middleware LIFO: logging is added first so the
    # correlation id is already bound when it executes.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        update_request_header=True,
    )
