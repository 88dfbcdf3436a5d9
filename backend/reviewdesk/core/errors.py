"""
Error taxonomy and production-safe error responses.

Handlers raise ``AppError`` (an ``HTTPException``) through the small factory
functions below. The exception handlers registered by ``register_error_handlers``
turn every error into the same JSON shape with a fixed public message, and
attach internal detail only outside production.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from reviewdesk.core.config import settings

logger = logging.getLogger("reviewdesk.errors")


class ErrorType(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    AUTHENTICATION = "AUTHENTICATION_ERROR"
    AUTHORIZATION = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND_ERROR"
    RATE_LIMIT = "RATE_LIMIT_ERROR"
    DATABASE = "DATABASE_ERROR"
    EXTERNAL_API = "EXTERNAL_API_ERROR"
    SERVER = "SERVER_ERROR"


PUBLIC_MESSAGES: dict[ErrorType, str] = {
    ErrorType.VALIDATION: "Invalid input provided",
    ErrorType.AUTHENTICATION: "Authentication required",
    ErrorType.AUTHORIZATION: "Access denied",
    ErrorType.NOT_FOUND: "Resource not found",
    ErrorType.RATE_LIMIT: "Too many requests. Please try again later",
    ErrorType.DATABASE: "Database operation failed",
    ErrorType.EXTERNAL_API: "External service unavailable",
    ErrorType.SERVER: "Internal server error",
}

STATUS_TO_TYPE: dict[int, ErrorType] = {
    status.HTTP_400_BAD_REQUEST: ErrorType.VALIDATION,
    status.HTTP_401_UNAUTHORIZED: ErrorType.AUTHENTICATION,
    status.HTTP_403_FORBIDDEN: ErrorType.AUTHORIZATION,
    status.HTTP_404_NOT_FOUND: ErrorType.NOT_FOUND,
    422: ErrorType.VALIDATION,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorType.RATE_LIMIT,
}

# Types whose message is written for the end user (field-specific input
# problems and business-rule rejections) and is always returned.
USER_FACING_TYPES = {ErrorType.VALIDATION, ErrorType.NOT_FOUND}


class AppError(HTTPException):
    """An HTTP error tagged with its taxonomy type."""

    def __init__(
        self,
        error_type: ErrorType,
        status_code: int,
        message: str,
        field: Optional[str] = None,
        code: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.error_type = error_type
        self.message = message
        self.field = field
        self.code = code


def validation_error(
    message: str, field: Optional[str] = None, code: Optional[str] = None
) -> AppError:
    return AppError(ErrorType.VALIDATION, status.HTTP_400_BAD_REQUEST, message, field, code)


def authentication_error(message: str = "Authentication required") -> AppError:
    return AppError(ErrorType.AUTHENTICATION, status.HTTP_401_UNAUTHORIZED, message)


def authorization_error(message: str = "Access denied") -> AppError:
    return AppError(ErrorType.AUTHORIZATION, status.HTTP_403_FORBIDDEN, message)


def not_found_error(message: str = "Resource not found") -> AppError:
    return AppError(ErrorType.NOT_FOUND, status.HTTP_404_NOT_FOUND, message)


def rate_limit_error(message: str = "Rate limit exceeded") -> AppError:
    return AppError(ErrorType.RATE_LIMIT, status.HTTP_429_TOO_MANY_REQUESTS, message)


def database_error(message: str = "Database operation failed") -> AppError:
    return AppError(ErrorType.DATABASE, status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def server_error(message: str = "Internal server error") -> AppError:
    return AppError(ErrorType.SERVER, status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def build_error_body(
    error_type: ErrorType,
    message: Optional[str] = None,
    field: Optional[str] = None,
    code: Optional[str] = None,
    detail: Any = None,
    production: Optional[bool] = None,
) -> dict[str, Any]:
    """
    Build the JSON body for an error response.

    Args:
        error_type: Taxonomy type of the error
        message: Message raised with the error
        field: Offending input field, for validation errors
        code: Machine-readable code for business-rule rejections
        detail: Internal detail, only exposed outside production
        production: Override for ``settings.is_production``

    Returns:
        The response body dictionary
    """
    if production is None:
        production = settings.is_production

    body: dict[str, Any] = {
        "error": PUBLIC_MESSAGES[error_type],
        "type": error_type.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message and error_type in USER_FACING_TYPES:
        body["message"] = message
    if field:
        body["field"] = field
    if code:
        body["code"] = code
    if not production:
        if message:
            body.setdefault("message", message)
        if detail is not None:
            body["detail"] = detail
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        error_type, field, code = exc.error_type, exc.field, exc.code
    else:
        error_type = STATUS_TO_TYPE.get(exc.status_code, ErrorType.SERVER)
        field, code = None, None

    message = exc.detail if isinstance(exc.detail, str) else None
    if exc.status_code >= 500:
        logger.error(f"{error_type.value} on {request.method} {request.url.path}: {message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(error_type, message, field, code),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    field = None
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(location) or None
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_body(ErrorType.VALIDATION, message, field),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(ErrorType.DATABASE, detail=str(exc)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(ErrorType.SERVER, detail=str(exc)),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the taxonomy handlers to the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
