"""
Service dependencies for FastAPI endpoints.
The application lifespan builds one AuthService and stores it on app.state.
"""

from fastapi import Request

from authservice.core.config import Settings
from authservice.services.auth import AuthService


def get_auth_service(request: Request) -> AuthService:
    """
    Dependency returning the application's AuthService.

    Returns:
        AuthService bound to this application
    """
    return request.app.state.auth_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
