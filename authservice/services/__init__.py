"""
Services module for the auth service.
Business logic, separate from the HTTP and persistence layers.
"""

from authservice.services.auth import AuthService
from authservice.services.notification import (
    DiscardingResetNotifier,
    LoggingResetNotifier,
    ResetNotifier,
    default_reset_notifier,
)
from authservice.services.rate_limit import LoginAttemptTracker
from authservice.services.session_store import SessionStore, create_redis_client
from authservice.services.user import SQLAlchemyUserRepository, UserRecord, UserRepository

__all__ = [
    "AuthService",
    "DiscardingResetNotifier",
    "LoggingResetNotifier",
    "ResetNotifier",
    "default_reset_notifier",
    "LoginAttemptTracker",
    "SessionStore",
    "create_redis_client",
    "SQLAlchemyUserRepository",
    "UserRecord",
    "UserRepository"
]
