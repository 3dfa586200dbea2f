"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action

Server-side failures (status >= 500) carry a generic message; the
underlying error text is only logged.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from heirloom.application.dto.responses import ErrorResponse
from heirloom.config import get_logger
from heirloom.core.exceptions import (
    ArchiveSearchError,
    AuthenticationRequiredError,
    ForbiddenError,
    LLMError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    LLMError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

GENERIC_MESSAGES: dict[int, str] = {
    500: "The request could not be completed.",
    503: "A required service is temporarily unavailable.",
}

HINT_MAP: dict[str, str] = {
    "INVALID_REQUEST": "Check the query, time range and filters in the request body.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "AUTH_REQUIRED": "Sign in again; the request carried no authenticated user.",
    "FORBIDDEN": "Only the owner of a content item can index or remove it.",
    "SEARCH_ERROR": "Search is temporarily failing. Retry later.",
    "PROVIDER_CONFIGURATION_ERROR": "The search service is misconfigured. Contact the administrator.",
    "LLM_UNAVAILABLE": "The assistant is offline. Retry later.",
    "LLM_TIMEOUT": "The assistant took too long to respond. Retry with a shorter question.",
    "CIRCUIT_BREAKER_OPEN": "Too many assistant failures. Wait for cooldown before retrying.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    403: "The requested resource belongs to another user.",
    404: "The requested resource was not found.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _get_status(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _get_status(exc)
    error_code = exc.code if isinstance(exc, ArchiveSearchError) else "INTERNAL_ERROR"
    request_id = getattr(request.state, "request_id", None)

    logger.error(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        status=status_code,
        error_code=error_code,
        error_type=exc.__class__.__name__,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    if status_code >= 500:
        message = GENERIC_MESSAGES.get(status_code, GENERIC_MESSAGES[500])
        detail = None
    else:
        message = str(exc)
        detail = exc.details if isinstance(exc, ArchiveSearchError) and exc.details else None

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything the registered exception handlers did not.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(ArchiveSearchError)
    async def domain_exception_handler(
        request: Request,
        exc: ArchiveSearchError,
    ) -> JSONResponse:
        """Handle domain errors."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle request body validation errors as invalid requests."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error_code="INVALID_REQUEST",
                message="Request validation failed",
                hint=HINT_MAP["VALIDATION_ERROR"],
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}.get(exc.status_code, "HTTP_ERROR")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
