"""
Exception hierarchy for the auth service.
Every error carries an ErrorKind tag; transport status codes are derived
from the tag at the boundary only.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Transport-agnostic failure classification."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL = "INTERNAL"


class AuthServiceError(Exception):
    """Base exception for all auth service errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        kind: Optional[ErrorKind] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize exception.

        Args:
            message: Error message
            kind: Error classification, defaults to the class tag
            details: Additional error details
        """
        self.message = message
        if kind is not None:
            self.kind = kind
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """Invalid request input."""

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, details=details)
        self.field = field


class DuplicateResourceError(AuthServiceError):
    """Resource already exists (e.g. duplicate email)."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message)


class AuthenticationError(AuthServiceError):
    """Authentication failed."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidCredentialsException(AuthenticationError):
    """Wrong email or password. The message never says which."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class TokenError(AuthenticationError):
    """Bearer token rejected."""

    def __init__(self, message: str = "Invalid or expired token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class ExpiredTokenException(TokenError):
    """Bearer token past its expiry."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, details={"expired": True})


class InvalidTokenException(TokenError):
    """Malformed, wrongly signed or wrong-algorithm token."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class AuthorizationError(AuthServiceError):
    """Caller is identified but not allowed to proceed."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, message: str = "Permission denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class AccountLockedException(AuthorizationError):
    """Too many failed logins for this identity."""

    def __init__(self, message: str = "Too many failed login attempts, please try again later"):
        super().__init__(message)


class AccountDisabledException(AuthorizationError):
    """The account exists but is inactive."""

    def __init__(self, message: str = "Account is disabled"):
        super().__init__(message)


class InternalError(AuthServiceError):
    """Cryptographic, store or repository failure. Never echoed to callers."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Internal error", transient: bool = False):
        super().__init__(message, details={"transient": transient})
        self.transient = transient


class InvalidHashFormatError(InternalError):
    """Stored password hash could not be parsed."""

    def __init__(self, message: str = "Invalid password hash format"):
        super().__init__(message)


class StoreError(InternalError):
    """Session store round-trip failed."""

    def __init__(self, message: str = "Session store failure", transient: bool = False):
        super().__init__(message, transient=transient)


class RepositoryError(InternalError):
    """User repository round-trip failed."""

    def __init__(self, message: str = "User repository failure", transient: bool = False):
        super().__init__(message, transient=transient)
