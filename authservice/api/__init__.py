"""
API module for the auth service.
"""

from authservice.api.v1 import auth, health

__all__ = ["auth", "health"]
