"""
Utils module for the auth service.
"""

from authservice.utils.validators import (
    ValidationResult,
    normalize_email,
    validate_email,
    validate_password,
    validate_login_password,
    validate_name,
    validate_token,
    first_failure,
    ensure_valid
)

__all__ = [
    "ValidationResult",
    "normalize_email",
    "validate_email",
    "validate_password",
    "validate_login_password",
    "validate_name",
    "validate_token",
    "first_failure",
    "ensure_valid"
]
