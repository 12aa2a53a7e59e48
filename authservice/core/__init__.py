"""
Core module for the auth service.
Configuration, security primitives, exceptions and constants.
"""

from authservice.core.config import Settings, get_settings
from authservice.core.exceptions import (
    ErrorKind,
    AuthServiceError,
    ValidationError,
    DuplicateResourceError,
    AuthenticationError,
    AuthorizationError,
    TokenError,
    InternalError
)

__all__ = [
    "Settings",
    "get_settings",
    "ErrorKind",
    "AuthServiceError",
    "ValidationError",
    "DuplicateResourceError",
    "AuthenticationError",
    "AuthorizationError",
    "TokenError",
    "InternalError"
]
