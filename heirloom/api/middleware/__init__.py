"""API middleware."""

from heirloom.api.middleware.error_handler import ErrorHandlerMiddleware
from heirloom.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
