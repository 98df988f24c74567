"""Error Handlers — global exception handlers for the Tarefas API.

Invariants:
    - TarefasError → its own to_response() body and http_status
    - RequestValidationError → 400 validation problem (field -> messages), never 422
    - Exception (catch-all) → opaque 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (TarefasError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py so create_app stays a short wiring function
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import TarefasError, ErrorSeverity, ValidationProblemError
from app.core.validation import errors_from_locations

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(TarefasError)
    async def tarefas_error_handler(request: Request, exc: TarefasError):
        """Handle all Tarefas domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.info
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=exc.to_response(),
            headers=exc.response_headers(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle request parsing errors with the validation-problem shape."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        problem = ValidationProblemError(errors_from_locations(list(exc.errors())))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=problem.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
