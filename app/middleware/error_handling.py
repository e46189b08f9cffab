"""
Error handling middleware.

Every failure leaves the service as `{"error": message}`; the status code
comes from the application exception, or 500 for anything unexpected.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from app.core.exceptions import TaskPrioritizerException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "AI service error"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert exceptions raised by endpoints into error bodies."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except TaskPrioritizerException as e:
            # 4xx at warning level
            log = logger.warning if e.status_code < 500 else logger.error
            log(
                f"{type(e).__name__}: {e.message}",
                extra={"context": {
                    "status_code": e.status_code,
                    "path": request.url.path,
                }}
            )
            return error_response(e.status_code, e.message)
        except Exception as e:
            logger.error(
                f"Unexpected error: {e}",
                exc_info=True,
                extra={"context": {"path": request.url.path, "method": request.method}}
            )
            return error_response(500, str(e) or GENERIC_ERROR_MESSAGE)
