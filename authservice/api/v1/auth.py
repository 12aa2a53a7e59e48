"""
Authentication endpoints for API v1.
Thin wrappers over AuthService; errors are translated to HTTP by the
registered exception handlers.
"""

from fastapi import APIRouter, Depends, status

from authservice.api.dependencies.services import get_auth_service
from authservice.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    MessageResponse,
    RefreshTokenRequest,
    ResetPasswordRequest,
    SignUpRequest,
    SignUpResponse,
    ValidateTokenRequest,
    ValidateTokenResponse,
)
from authservice.schemas.response import ErrorResponse
from authservice.services.auth import AuthService


def _errors(*codes: int) -> dict:
    """OpenAPI entries for the error envelope; 500 applies to every route."""
    return {code: {"model": ErrorResponse} for code in (*codes, 500)}


router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_errors(409, 422)
)
async def signup(
    payload: SignUpRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> SignUpResponse:
    """
    Register a new account.

    Returns 422 for invalid input and 409 if the email is already registered.
    """
    return await auth_service.sign_up(
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name
    )


@router.post("/login", response_model=LoginResponse, responses=_errors(401, 403, 422))
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Exchange email and password for an access/refresh token pair.

    Returns 401 for bad credentials (never saying which part was wrong) and
    403 when the account is locked or disabled.
    """
    return await auth_service.login(payload.email, payload.password)


@router.post("/validate", response_model=ValidateTokenResponse, responses=_errors(422))
async def validate_token(
    payload: ValidateTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> ValidateTokenResponse:
    """
    Check an access token. An invalid token is a 200 with valid=false.
    """
    return await auth_service.validate_token(payload.access_token)


@router.post("/forgot-password", response_model=MessageResponse, responses=_errors(422))
async def forgot_password(
    payload: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Request a password reset. The response does not reveal whether the
    email is registered.
    """
    return await auth_service.forgot_password(payload.email)


@router.post("/reset-password", response_model=MessageResponse, responses=_errors(422))
async def reset_password(
    payload: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    return await auth_service.reset_password(payload.token, payload.new_password)


@router.post("/refresh", response_model=LoginResponse, responses=_errors(401, 422))
async def refresh_token(
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Rotate a refresh token. The presented token stops working.
    """
    return await auth_service.refresh_token(payload.refresh_token)


@router.post("/logout", response_model=MessageResponse, responses=_errors(401, 422))
async def logout(
    payload: LogoutRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    return await auth_service.logout(payload.refresh_token)
