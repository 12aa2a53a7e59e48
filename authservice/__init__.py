"""
Auth Service - authentication and session token management.

Provides:
- Argon2id password hashing
- RS256 access and refresh tokens
- Redis-backed refresh/reset records and login lockout
- Sign-up, login, token validation and password reset flows

Built with FastAPI, SQLAlchemy and Redis.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
