"""Service-layer exceptions and the FastAPI handlers that render them.

Every AppError subclass maps to one ErrorType of the classifier, which
supplies its HTTP status and the default user-facing message.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.core.error_classifier import STATUS_CODES, USER_MESSAGES, ErrorType, classify_error

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for errors raised deliberately by the services."""

    error_type = ErrorType.UNKNOWN
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or USER_MESSAGES[self.error_type]
        self.status_code = STATUS_CODES[self.error_type]
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    error_type = ErrorType.NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, message: str | None = None, resource: str | None = None):
        super().__init__(message, {"resource": resource} if resource else None)


class ValidationError(AppError):
    """Business-rule violation on otherwise well-formed input (400)."""

    error_type = ErrorType.VALIDATION
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str | None = None, field: str | None = None):
        super().__init__(message, {"field": field} if field else None)


class ConflictError(AppError):
    error_type = ErrorType.CONFLICT
    error_code = "CONFLICT"

    def __init__(self, message: str | None = None, resource: str | None = None):
        super().__init__(message, {"resource": resource} if resource else None)


class UnauthorizedError(AppError):
    error_type = ErrorType.AUTHENTICATION
    error_code = "UNAUTHORIZED"


class ForbiddenError(AppError):
    error_type = ErrorType.AUTHORIZATION
    error_code = "FORBIDDEN"


def error_response(status_code: int, payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": payload})


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "AppError on %s: %s (code=%s, status=%d)",
        request.url.path,
        exc.message,
        exc.error_code,
        exc.status_code,
        extra={"details": exc.details},
    )
    return error_response(
        exc.status_code,
        {"code": exc.error_code, "message": exc.message, "details": exc.details or None},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Constraint violations that escaped the services become 4xx responses."""
    classified = classify_error(exc.orig if exc.orig is not None else exc)
    logger.warning("IntegrityError on %s: %s", request.url.path, classified.message)
    return error_response(classified.status_code, classified.to_payload())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception: %s", str(exc))
    classified = classify_error(exc, context={"path": request.url.path})
    return error_response(classified.status_code, classified.to_payload())


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Register the handlers; in debug mode unhandled exceptions keep their traceback."""
    app.add_exception_handler(AppError, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
    if not debug:
        app.add_exception_handler(Exception, unhandled_exception_handler)
