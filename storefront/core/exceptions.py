"""
Global exception handling for the application.
Every error leaves the API as ``{"message": ..., "errors": [...]}``.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.config import get_settings

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(self.message)


class ValidationException(AppError):
    """Malformed or missing input. ``errors`` holds one entry per field."""
    def __init__(self, message: str = "Validation error", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationException":
        return cls(message, [{"field": field, "message": message}])


class InvalidOrExpiredCodeException(ValidationException):
    """Password reset code does not match or has expired."""
    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, errors)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, errors)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, errors)


class ConflictException(AppError):
    """Unique constraint or referential guard violation."""
    def __init__(self, message: str = "Conflict", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, errors)


class UpstreamException(AppError):
    """Unexpected persistence failure."""
    def __init__(self, message: str = "Database error. Please try again later.", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, errors)


def _error_body(message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "Request rejected",
        method=request.method,
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.__class__.__name__,
        message=exc.message,
        errors=exc.errors,
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg")})

    logger.info(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        status_code=status.HTTP_400_BAD_REQUEST,
        errors=exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Validation error", errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("HTTP error", method=request.method, path=request.url.path, status_code=exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error", method=request.method, path=request.url.path, error=str(exc.orig))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("A record with this value already exists or a related record is missing."),
        )

    logger.exception("Database error", method=request.method, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(UpstreamException().message),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unexpected error occurred", method=request.method, path=request.url.path)

    if get_settings().ENVIRONMENT == "production":
        content = _error_body("Internal Server Error. Please try again later.")
    else:
        content = _error_body(str(exc) or exc.__class__.__name__)
        content["errorType"] = exc.__class__.__name__

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
