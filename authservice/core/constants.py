"""
Constants used across the auth service.
"""

from enum import Enum


class TokenType(str, Enum):
    """Bearer token kinds carried in the `type` claim."""
    ACCESS = "access"
    REFRESH = "refresh"


class LoginFailureReason(str, Enum):
    """Reasons a login attempt was rejected (used in logs)."""
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    UNKNOWN_USER = "UNKNOWN_USER"


# Response Messages
class ResponseMessage:
    """Standard response messages."""
    # Success messages
    REGISTER_SUCCESS = "User registered successfully"
    LOGOUT_SUCCESS = "Logged out successfully"
    PASSWORD_RESET_REQUESTED = "If your email is registered, you will receive a password reset link"
    PASSWORD_RESET_SUCCESS = "Password reset successfully"
    TOKEN_VALID = "token is valid"

    # Error messages
    INVALID_CREDENTIALS = "Invalid email or password"
    ACCOUNT_LOCKED = "Too many failed login attempts, please try again later"
    ACCOUNT_DISABLED = "Account is disabled"
    TOKEN_INVALID = "invalid or expired token"
    REFRESH_TOKEN_INVALID = "Invalid or expired refresh token"
    RESET_TOKEN_INVALID = "Invalid or expired reset token"
    USER_NOT_FOUND = "user not found"
    USER_DISABLED = "user account is disabled"
    EMAIL_ALREADY_EXISTS = "Email already registered"
    INTERNAL_ERROR = "An internal error occurred"


# Cache Keys
class CacheKey:
    """Templates for session store keys."""
    REFRESH_TOKEN = "refresh_token:{jti}"
    USER_SESSIONS = "user_sessions:{user_id}"
    PASSWORD_RESET = "reset_token:{token}"
    LOGIN_ATTEMPTS = "rate_limit:{identity}"

    @classmethod
    def refresh_token(cls, jti: str) -> str:
        return cls.REFRESH_TOKEN.format(jti=jti)

    @classmethod
    def user_sessions(cls, user_id: str) -> str:
        return cls.USER_SESSIONS.format(user_id=user_id)

    @classmethod
    def password_reset(cls, token: str) -> str:
        return cls.PASSWORD_RESET.format(token=token)

    @classmethod
    def login_attempts(cls, identity: str) -> str:
        return cls.LOGIN_ATTEMPTS.format(identity=identity)


# Input limits
class InputLimit:
    """Length limits for validated input."""
    EMAIL_MAX_LENGTH = 255
    PASSWORD_MIN_LENGTH = 8
    PASSWORD_MAX_LENGTH = 128
    NAME_MIN_LENGTH = 1
    NAME_MAX_LENGTH = 100
    TOKEN_MAX_LENGTH = 2000
    RESET_TOKEN_BYTES = 32
