"""
Models module for the auth service.
"""

from authservice.models.user import User

__all__ = [
    "User"
]
