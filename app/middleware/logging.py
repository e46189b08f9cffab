"""
Request/response logging middleware.

Tags every request with an `X-Request-ID` (the caller's, or a fresh one)
so that service and model-client log lines can be traced back to it.
"""
import time
from typing import Any, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.logging import (
    generate_request_id,
    set_request_id,
    log_event
)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled endpoints that would flood the log
QUIET_PATHS = {"/health"}


def _log_http(level: str, event: str, message: str, context: Dict[str, Any], exc_info=None) -> None:
    log_event(
        level=level,
        logger=__name__,
        function="dispatch",
        operation="http_request",
        event=event,
        message=message,
        context=context,
        exc_info=exc_info
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assign request IDs and log each request and its response."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)

        route = f"{request.method} {request.url.path}"
        verbose = request.url.path not in QUIET_PATHS
        start_time = time.time()

        if verbose:
            _log_http("INFO", "request_received", f"Request received: {route}", {
                "client_host": request.client.host if request.client else None,
                "content_length": request.headers.get("content-length"),
                "origin": request.headers.get("origin"),
            })

        try:
            response = await call_next(request)
        except Exception as e:
            _log_http("ERROR", "request_error", f"Request error: {route}", {
                "duration_seconds": round(time.time() - start_time, 3),
                "error_type": type(e).__name__,
            }, exc_info=e)
            raise

        if verbose or response.status_code >= 400:
            _log_http("INFO", "response_sent", f"Response sent: {route} -> {response.status_code}", {
                "status_code": response.status_code,
                "duration_seconds": round(time.time() - start_time, 3),
            })

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
