"""
Login-attempt tracking for the auth service.
Counts failed logins per identity in the session store and reports when an
identity is locked out.
"""

import logging
from datetime import timedelta

from authservice.core.config import Settings
from authservice.core.exceptions import StoreError
from authservice.services.session_store import SessionStore
from authservice.utils.validators import normalize_email


logger = logging.getLogger("authservice.rate_limit")


class LoginAttemptTracker:
    """
    Per-identity failed-login counter.

    Once `max_attempts` failures have been recorded inside the lockout window,
    the identity is locked until the window expires. Each failure restarts the
    window. Store outages never block a login: they are logged and the
    tracker behaves as if no failures were recorded.
    """

    def __init__(
        self,
        store: SessionStore,
        max_attempts: int = 5,
        lockout_window: timedelta = timedelta(minutes=15)
    ):
        """
        Initialize tracker.

        Args:
            store: Session store holding the counters
            max_attempts: Failures allowed before lockout
            lockout_window: Counter TTL
        """
        self.store = store
        self.max_attempts = max_attempts
        self.lockout_window = lockout_window

    @classmethod
    def from_settings(cls, store: SessionStore, settings: Settings) -> "LoginAttemptTracker":
        return cls(
            store=store,
            max_attempts=settings.MAX_LOGIN_ATTEMPTS,
            lockout_window=settings.login_lockout_timedelta
        )

    async def get_attempts(self, identity: str) -> int:
        """
        Get the number of recorded failures.

        Returns:
            Failure count, 0 if unknown or the store is unavailable
        """
        try:
            return await self.store.get_login_attempts(normalize_email(identity))
        except StoreError:
            logger.warning("Login attempt lookup failed; treating identity as unlocked")
            return 0

    async def is_locked(self, identity: str) -> bool:
        """Check whether identity has reached the failure limit."""
        return await self.get_attempts(identity) >= self.max_attempts

    async def record_failure(self, identity: str) -> int:
        """
        Record a failed login.

        Returns:
            New failure count, 0 if the store is unavailable
        """
        try:
            attempts = await self.store.increment_login_attempts(
                normalize_email(identity),
                self.lockout_window
            )
        except StoreError:
            logger.warning("Failed to record login attempt; continuing without throttling")
            return 0

        if attempts >= self.max_attempts:
            logger.warning(f"Login locked after {attempts} failed attempts")
        return attempts

    async def clear(self, identity: str) -> None:
        """Reset the failure counter after a successful login."""
        try:
            await self.store.clear_login_attempts(normalize_email(identity))
        except StoreError:
            logger.warning("Failed to clear login attempts")
