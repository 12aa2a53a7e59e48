"""
Password reset notification.
Delivery (email, SMS) is owned by another system; the auth service only
hands the reset token to a ResetNotifier.
"""

import logging
from datetime import timedelta
from typing import Protocol

from authservice.core.config import Settings
from authservice.services.user import UserRecord


logger = logging.getLogger("authservice.notification")


class ResetNotifier(Protocol):
    async def send_password_reset(self, user: UserRecord, token: str, expires_in: timedelta) -> None: ...


class LoggingResetNotifier:
    """
    Development notifier that writes the reset token to the log.
    Never use in production: the token grants a password change.
    """

    async def send_password_reset(self, user: UserRecord, token: str, expires_in: timedelta) -> None:
        minutes = int(expires_in.total_seconds() // 60)
        logger.info(
            f"Password reset requested for user {user.id}; "
            f"token={token} (valid for {minutes} minutes)"
        )


class DiscardingResetNotifier:
    """
    Notifier used outside development when no delivery is configured.
    Records that a reset was requested; the token itself is dropped.
    """

    async def send_password_reset(self, user: UserRecord, token: str, expires_in: timedelta) -> None:
        logger.warning(f"Password reset requested for user {user.id} but no reset notifier is configured")


def default_reset_notifier(settings: Settings) -> ResetNotifier:
    """
    Pick the notifier used when none is injected.

    Only development builds get the token-logging notifier.
    """
    if settings.is_development:
        return LoggingResetNotifier()

    logger.warning(
        f"No reset notifier configured for environment '{settings.ENVIRONMENT}'; "
        "password reset tokens will not be delivered"
    )
    return DiscardingResetNotifier()
