"""
Schemas module for the auth service.
Pydantic models for request/response payloads.
"""

from authservice.schemas.auth import (
    SignUpRequest,
    SignUpResponse,
    LoginRequest,
    LoginResponse,
    ValidateTokenRequest,
    ValidateTokenResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    RefreshTokenRequest,
    LogoutRequest,
    MessageResponse
)
from authservice.schemas.user import UserSummary
from authservice.schemas.response import ErrorResponse, HealthCheckResponse

__all__ = [
    "SignUpRequest",
    "SignUpResponse",
    "LoginRequest",
    "LoginResponse",
    "ValidateTokenRequest",
    "ValidateTokenResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "RefreshTokenRequest",
    "LogoutRequest",
    "MessageResponse",
    "UserSummary",
    "ErrorResponse",
    "HealthCheckResponse",
]
