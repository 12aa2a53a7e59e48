"""
Validator utilities for the auth service.
Pure functions that inspect a single input and return a ValidationResult;
nothing here touches the store or the repository.
"""

import re
import string
from dataclasses import dataclass
from typing import Iterable, Optional

from email_validator import validate_email as validate_email_lib, EmailNotValidError

from authservice.core.constants import InputLimit
from authservice.core.exceptions import ValidationError


# Regex patterns
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$')
NAME_PATTERN = re.compile(r"^[a-zA-Z '\-]+$")

SPECIAL_CHARACTERS = frozenset(string.punctuation)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validation."""
    ok: bool
    field: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, field: str, message: str) -> "ValidationResult":
        return cls(ok=False, field=field, message=message)

    def raise_for_error(self) -> None:
        """Raise ValidationError if this outcome is a failure."""
        if not self.ok:
            raise ValidationError(self.message, field=self.field)


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()


def validate_email(email: Optional[str]) -> ValidationResult:
    """
    Validate email address format and length.

    Args:
        email: Email address to validate

    Returns:
        ValidationResult
    """
    if not email or not isinstance(email, str) or not email.strip():
        return ValidationResult.failure("email", "email is required")

    email = email.strip()

    if len(email) > InputLimit.EMAIL_MAX_LENGTH:
        return ValidationResult.failure(
            "email", f"email must not exceed {InputLimit.EMAIL_MAX_LENGTH} characters"
        )

    if not EMAIL_PATTERN.match(email):
        return ValidationResult.failure("email", "invalid email format")

    try:
        validate_email_lib(email, check_deliverability=False)
    except EmailNotValidError:
        return ValidationResult.failure("email", "invalid email format")

    return ValidationResult.success()


def validate_password(password: Optional[str], field: str = "password") -> ValidationResult:
    """
    Validate password strength.

    Rules:
    - 8 to 128 characters
    - at least one uppercase letter, one lowercase letter, one digit
      and one special character

    Args:
        password: Password to validate
        field: Field name reported on failure

    Returns:
        ValidationResult listing every missing character class
    """
    if not password or not isinstance(password, str):
        return ValidationResult.failure(field, "password is required")

    if len(password) < InputLimit.PASSWORD_MIN_LENGTH:
        return ValidationResult.failure(
            field, f"password must be at least {InputLimit.PASSWORD_MIN_LENGTH} characters long"
        )

    if len(password) > InputLimit.PASSWORD_MAX_LENGTH:
        return ValidationResult.failure(
            field, f"password must not exceed {InputLimit.PASSWORD_MAX_LENGTH} characters"
        )

    missing = []
    if not any("A" <= char <= "Z" for char in password):
        missing.append("at least one uppercase letter")
    if not any("a" <= char <= "z" for char in password):
        missing.append("at least one lowercase letter")
    if not any("0" <= char <= "9" for char in password):
        missing.append("at least one number")
    if not any(char in SPECIAL_CHARACTERS for char in password):
        missing.append("at least one special character")

    if missing:
        return ValidationResult.failure(field, f"password must contain {', '.join(missing)}")

    return ValidationResult.success()


def validate_login_password(password: Optional[str]) -> ValidationResult:
    """
    Validate a password supplied at login.
    Only presence and the upper length bound are checked so that the
    response does not reveal the strength policy.
    """
    if not password or not isinstance(password, str):
        return ValidationResult.failure("password", "password is required")

    if len(password) > InputLimit.PASSWORD_MAX_LENGTH:
        return ValidationResult.failure(
            "password", f"password must not exceed {InputLimit.PASSWORD_MAX_LENGTH} characters"
        )

    return ValidationResult.success()


def validate_name(name: Optional[str], field: str) -> ValidationResult:
    """
    Validate a first or last name.

    Rules:
    - 1 to 100 characters after trimming
    - only ASCII letters, spaces, hyphens and apostrophes

    Args:
        name: Name to validate
        field: Field name reported on failure

    Returns:
        ValidationResult
    """
    if not name or not isinstance(name, str) or not name.strip():
        return ValidationResult.failure(field, f"{field} is required")

    name = name.strip()

    if len(name) < InputLimit.NAME_MIN_LENGTH:
        return ValidationResult.failure(
            field, f"{field} must be at least {InputLimit.NAME_MIN_LENGTH} characters long"
        )

    if len(name) > InputLimit.NAME_MAX_LENGTH:
        return ValidationResult.failure(
            field, f"{field} must not exceed {InputLimit.NAME_MAX_LENGTH} characters"
        )

    if not NAME_PATTERN.match(name):
        return ValidationResult.failure(field, f"{field} contains invalid characters")

    return ValidationResult.success()


def validate_token(token: Optional[str], field: str = "token") -> ValidationResult:
    """
    Validate the shape of an opaque or JWT token string.

    Args:
        token: Token to validate
        field: Field name reported on failure

    Returns:
        ValidationResult
    """
    if not token or not isinstance(token, str) or not token.strip():
        return ValidationResult.failure(field, "token is required")

    if len(token.strip()) > InputLimit.TOKEN_MAX_LENGTH:
        return ValidationResult.failure(field, "token is too long")

    return ValidationResult.success()


def first_failure(results: Iterable[ValidationResult]) -> ValidationResult:
    """Return the first failed outcome, or success if all passed."""
    for result in results:
        if not result.ok:
            return result
    return ValidationResult.success()


def ensure_valid(*results: ValidationResult) -> None:
    """
    Raise for the first failed outcome.

    Raises:
        ValidationError: If any result failed
    """
    first_failure(results).raise_for_error()
