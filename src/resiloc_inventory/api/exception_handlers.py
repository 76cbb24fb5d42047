"""
Exception handlers for the inventory HTTP surface.

Domain errors render as ``{"error": {code, message, details, type}}`` with
the status from ``HTTP_STATUS_MAP``; anything else becomes a 500.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import ResilocError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the inventory's exception handlers on an application."""

    def __init__(self, is_production: bool = True):
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        @app.exception_handler(ResilocError)
        async def resiloc_exception_handler(request: Request, exc: ResilocError):
            """Handle inventory domain exceptions."""
            return JSONResponse(
                status_code=get_http_status_code(exc),
                content=create_error_response(exc),
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "error": {
                        "code": "ValidationError",
                        "message": "Request validation failed",
                        "details": {"errors": jsonable_errors(exc)},
                        "type": "RequestValidationError",
                    }
                },
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)

            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": {
                        "code": "InternalServerError",
                        "message": message,
                        "details": {},
                        "type": exc.__class__.__name__,
                    }
                },
            )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """Create an ``ExceptionHandlerRegistry`` and register its handlers."""
    registry = ExceptionHandlerRegistry(is_production)
    registry.register_handlers(app)
