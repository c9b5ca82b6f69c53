"""
Global exception handling for the application.
Every error leaves the API in the same envelope:
{"error": {"code", "message", "details", "path"}}.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError

from staffpicks.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppError):
    """Malformed or missing input."""
    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized - Please log in", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class SessionRevokedException(UnauthorizedException):
    """The session cookie is valid but its user may no longer use it."""
    def __init__(self, message: str = "Session is no longer valid", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"redirectUrl": "/login", **(details or {})})


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class EntityNotFoundException(AppError):
    """Resource not found, or outside the caller's scope."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictException(AppError):
    """Uniqueness or state-transition conflict."""
    def __init__(self, message: str = "Conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class AccountLockedException(AppError):
    """Too many failed logins."""
    def __init__(self, message: str = "Account locked", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_423_LOCKED, details)


class RateLimitExceededException(AppError):
    def __init__(self, message: str = "Too many attempts", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_429_TOO_MANY_REQUESTS, details)


class ExternalServiceException(AppError):
    """Third-party provider failed."""
    def __init__(self, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY, details)


def _error_response(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    content = {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
            "path": request.url.path,
        }
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    response = _error_response(request, exc.status_code, exc.__class__.__name__, exc.message, exc.details)
    if isinstance(exc, SessionRevokedException):
        response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "ValidationException",
        "Validation error",
        {"errors": errors},
    )


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    logger.warning("Duplicate key on write", path=request.url.path, error=str(exc.details))
    return _error_response(
        request,
        status.HTTP_409_CONFLICT,
        "ConflictException",
        "A record with this identifier already exists",
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unexpected error occurred", path=request.url.path)
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(Exception, global_exception_handler)
