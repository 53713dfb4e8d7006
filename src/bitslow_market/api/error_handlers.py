"""Exception handlers mapping failures to JSON error responses.

Typed marketplace errors keep their status and code. Request validation
errors become 400. Storage and unexpected errors are logged with the request
path and surfaced as an opaque 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bitslow_market.core.errors import AuthError, MarketError

logger = logging.getLogger(__name__)


async def market_error_handler(request: Request, exc: MarketError) -> JSONResponse:
    """Handle all typed marketplace errors."""
    log = logger.warning if isinstance(exc, AuthError) else logger.info
    log(
        "%s on %s: %s", exc.code, request.url.path, exc.message,
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors with a structured 400 response."""
    logger.info("Validation error on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err["loc"]),
                        "message": err["msg"],
                        "type": err["type"],
                    }
                    for err in exc.errors()
                ],
            },
        },
    )


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failures never leak SQL or driver details to the caller."""
    logger.error(
        "Storage error on %s", request.url.path,
        exc_info=exc, extra={"path": request.url.path},
    )
    return _internal_error()


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for anything else."""
    logger.error(
        "Unhandled exception on %s", request.url.path,
        exc_info=exc, extra={"path": request.url.path},
    )
    return _internal_error()


def register_error_handlers(app: FastAPI) -> None:
    """Attach all handlers to ``app``."""
    app.add_exception_handler(MarketError, market_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
