"""
API dependencies module.
Reusable dependencies for FastAPI endpoints.
"""

from authservice.api.dependencies.services import get_auth_service, get_app_settings

__all__ = [
    "get_auth_service",
    "get_app_settings"
]
