"""API error types and FastAPI exception handlers."""

from datetime import datetime
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mealcart.logging_config import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard API error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_API_ERROR = "EXTERNAL_API_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ApiError(Exception):
    """Error with an HTTP status, a stable code and optional details."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @classmethod
    def validation(cls, message: str, details: Any = None) -> "ApiError":
        return cls(message, status.HTTP_400_BAD_REQUEST, ErrorCode.VALIDATION_ERROR, details)

    @classmethod
    def bad_request(cls, message: str, details: Any = None) -> "ApiError":
        return cls(message, status.HTTP_400_BAD_REQUEST, ErrorCode.BAD_REQUEST, details)

    @classmethod
    def not_found(cls, message: str, details: Any = None) -> "ApiError":
        return cls(message, status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND, details)

    @classmethod
    def external_api(cls, message: str, details: Any = None) -> "ApiError":
        return cls(message, status.HTTP_502_BAD_GATEWAY, ErrorCode.EXTERNAL_API_ERROR, details)


def error_body(message: str, code: ErrorCode, details: Any = None) -> dict[str, Any]:
    """Build the standard error response payload."""
    body: dict[str, Any] = {
        "success": False,
        "error": message,
        "code": code.value,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }
    if details is not None:
        body["details"] = details
    return body


def format_validation_errors(errors: list[dict[str, Any]]) -> list[str]:
    """Render pydantic errors as "path: message" strings, relative to the body."""
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        path = f"{'.'.join(loc)}: " if loc else ""
        messages.append(f"{path}{err.get('msg', 'Invalid value')}")
    return messages


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError."""
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code.value} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.details),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 VALIDATION_ERROR."""
    errors = format_validation_errors(list(exc.errors()))
    logger.info(f"Validation failed for {request.url.path}: {', '.join(errors)}")
    error = ApiError.validation("Invalid request data", {"errors": errors})
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(error.message, error.code, error.details),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other exception as a 500."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("An unexpected error occurred", ErrorCode.INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the standard error handlers to an application."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
