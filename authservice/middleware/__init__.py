"""
Middleware package for the auth service.
"""

from authservice.middleware.logging import LoggingMiddleware
from authservice.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers

__all__ = [
    "LoggingMiddleware",
    "ErrorHandlerMiddleware",
    "register_exception_handlers"
]
