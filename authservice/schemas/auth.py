"""
Authentication schemas for the auth service.
Request models only describe the payload shape; the auth flows themselves
enforce format and strength rules so every caller gets the same checks.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from authservice.schemas.user import UserSummary


class SignUpRequest(BaseModel):
    """
    Sign-up request schema.
    """
    email: str = Field(
        ...,
        description="User email address"
    )
    password: str = Field(
        ...,
        description="Password (8-128 chars, upper, lower, digit and special character)"
    )
    first_name: str = Field(
        ...,
        description="First name"
    )
    last_name: str = Field(
        ...,
        description="Last name"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "Str0ng!Pass",
                "first_name": "Jane",
                "last_name": "Doe"
            }
        }
    )


class LoginRequest(BaseModel):
    """
    Login request schema.
    """
    email: str = Field(
        ...,
        description="User email address"
    )
    password: str = Field(
        ...,
        description="User password"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "Str0ng!Pass"
            }
        }
    )


class ValidateTokenRequest(BaseModel):
    access_token: str = Field(
        ...,
        description="JWT access token to validate"
    )


class ForgotPasswordRequest(BaseModel):
    email: str = Field(
        ...,
        description="Email address of the account"
    )


class ResetPasswordRequest(BaseModel):
    """
    Password reset confirmation schema.
    """
    token: str = Field(
        ...,
        description="Reset token received out of band"
    )
    new_password: str = Field(
        ...,
        description="New password"
    )


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(
        ...,
        description="JWT refresh token"
    )


class LogoutRequest(BaseModel):
    refresh_token: str = Field(
        ...,
        description="Refresh token to revoke"
    )


class LoginResponse(BaseModel):
    """
    Token pair issued by login and refresh.
    """
    access_token: str = Field(
        ...,
        description="JWT access token"
    )
    refresh_token: str = Field(
        ...,
        description="JWT refresh token"
    )
    token_type: str = Field(
        "bearer",
        description="Token type (always 'bearer')"
    )
    expires_in: int = Field(
        ...,
        description="Access token lifetime in seconds"
    )
    user: UserSummary = Field(
        ...,
        description="Authenticated user"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJSUzI1NiIsInR5cCI6IkpXVCJ9...",
                "refresh_token": "eyJhbGciOiJSUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 900,
                "user": {
                    "id": "550e8400-e29b-41d4-a716-446655440000",
                    "email": "user@example.com",
                    "first_name": "Jane",
                    "last_name": "Doe"
                }
            }
        }
    )


class SignUpResponse(BaseModel):
    success: bool = Field(
        ...,
        description="Whether the account was created"
    )
    message: str = Field(
        ...,
        description="Response message"
    )
    user: UserSummary = Field(
        ...,
        description="Created user"
    )


class ValidateTokenResponse(BaseModel):
    """
    Token validation result.
    An invalid token is reported with valid=false rather than an error.
    """
    valid: bool = Field(
        ...,
        description="Whether the token is valid"
    )
    user: Optional[UserSummary] = Field(
        None,
        description="Token subject when valid"
    )
    message: str = Field(
        ...,
        description="Response message"
    )


class MessageResponse(BaseModel):
    """
    Simple success/message response schema.
    """
    success: bool = Field(
        True,
        description="Whether the operation succeeded"
    )
    message: str = Field(
        ...,
        description="Response message"
    )
