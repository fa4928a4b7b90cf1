"""Global exception handling: middleware plus the FastAPI exception handler."""

import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.exceptions import WindspireException
from app.utils.logger import ROOT_LOGGER, get_logger

logger = get_logger(__name__)


def error_envelope(status_code: int, error: Dict[str, Any]) -> JSONResponse:
    """Wrap an ``{code, message, details}`` dict in the failure envelope."""
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def windspire_exception_handler(request: Request, exc: WindspireException) -> JSONResponse:
    """Render application exceptions raised inside route handlers."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{request.method} {request.url.path} failed: {exc.error_code} - {exc.message}",
        extra={"extra_data": {"error_code": exc.error_code, "details": exc.details, "path": request.url.path}},
    )
    return error_envelope(exc.status_code, exc.to_dict())


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches anything the route-level handlers let through."""

    async def dispatch(self, request: Request, call_next: Any) -> JSONResponse:
        # CORS preflight goes straight through
        if request.method == "OPTIONS":
            return await call_next(request)

        try:
            return await call_next(request)
        except WindspireException as e:
            return await windspire_exception_handler(request, e)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.url.path}: {e}",
                extra={"extra_data": {"exception_type": type(e).__name__}},
                exc_info=True,
            )
            # Exception text is only exposed when running with DEBUG
            verbose = logging.getLogger(ROOT_LOGGER).isEnabledFor(logging.DEBUG)
            wrapped = WindspireException(details={"error": str(e)} if verbose else None)
            return error_envelope(wrapped.status_code, wrapped.to_dict())
