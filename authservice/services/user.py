"""
User repository for the auth service.
The auth flows depend only on the UserRepository protocol; the SQLAlchemy
adapter is the default implementation.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol, Callable

from sqlalchemy import select, update, func, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from authservice.core.constants import ResponseMessage
from authservice.core.exceptions import DuplicateResourceError, RepositoryError
from authservice.models.user import User


logger = logging.getLogger("authservice.repository")


@dataclass
class UserRecord:
    """Plain user data handed to the auth flows."""
    id: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, user: User) -> "UserRecord":
        return cls(
            id=str(user.u_id),
            email=user.u_email,
            password_hash=user.u_password_hash,
            first_name=user.u_first_name,
            last_name=user.u_last_name,
            is_active=user.u_is_active,
            is_verified=user.u_is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login_at=user.u_last_login_at,
        )


class UserRepository(Protocol):
    """Persistence operations the auth flows need."""

    async def email_exists(self, email: str) -> bool: ...

    async def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str
    ) -> UserRecord: ...

    async def get_by_email(self, email: str) -> Optional[UserRecord]: ...

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]: ...

    async def update_last_login(self, user_id: str) -> None: ...

    async def update_password(self, user_id: str, password_hash: str) -> bool: ...

    async def ping(self) -> bool: ...


def _wrap(operation: str, error: SQLAlchemyError) -> RepositoryError:
    logger.error(f"Database {operation} failed: {error}")
    return RepositoryError(
        f"user repository {operation} failed",
        transient=isinstance(error, OperationalError)
    )


class SQLAlchemyUserRepository:
    """
    UserRepository backed by the `users` table.

    Each call runs in its own session from the factory, so the repository is
    safe to share between concurrent requests.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        """
        Initialize repository.

        Args:
            session_factory: async_sessionmaker producing AsyncSession objects
        """
        self.session_factory = session_factory

    async def email_exists(self, email: str) -> bool:
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(func.count()).select_from(User).where(User.u_email == email)
                )
                return result.scalar_one() > 0
        except SQLAlchemyError as e:
            raise _wrap("email lookup", e) from e

    async def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str
    ) -> UserRecord:
        """
        Insert a new user.

        Raises:
            DuplicateResourceError: Email taken by a concurrent sign-up
            RepositoryError: Any other database failure
        """
        user = User(
            u_email=email,
            u_password_hash=password_hash,
            u_first_name=first_name,
            u_last_name=last_name,
            u_is_active=True,
            u_is_verified=False,
        )
        try:
            async with self.session_factory() as db:
                db.add(user)
                try:
                    await db.commit()
                except IntegrityError as e:
                    await db.rollback()
                    # Race between email_exists and insert
                    logger.info(f"Duplicate email on insert: {e.orig}")
                    raise DuplicateResourceError(ResponseMessage.EMAIL_ALREADY_EXISTS) from e
                await db.refresh(user)
                return UserRecord.from_model(user)
        except SQLAlchemyError as e:
            raise _wrap("create", e) from e

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(select(User).where(User.u_email == email))
                user = result.scalar_one_or_none()
                return UserRecord.from_model(user) if user else None
        except SQLAlchemyError as e:
            raise _wrap("email lookup", e) from e

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        try:
            async with self.session_factory() as db:
                user = await db.get(User, user_id)
                return UserRecord.from_model(user) if user else None
        except SQLAlchemyError as e:
            raise _wrap("id lookup", e) from e

    async def update_last_login(self, user_id: str) -> None:
        try:
            async with self.session_factory() as db:
                await db.execute(
                    update(User)
                    .where(User.u_id == user_id)
                    .values(u_last_login_at=datetime.now(timezone.utc))
                )
                await db.commit()
        except SQLAlchemyError as e:
            raise _wrap("last login update", e) from e

    async def update_password(self, user_id: str, password_hash: str) -> bool:
        """
        Replace a user's password hash.

        Returns:
            True if the user existed
        """
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    update(User)
                    .where(User.u_id == user_id)
                    .values(
                        u_password_hash=password_hash,
                        updated_at=datetime.now(timezone.utc)
                    )
                )
                await db.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise _wrap("password update", e) from e

    async def ping(self) -> bool:
        try:
            async with self.session_factory() as db:
                await db.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            raise _wrap("ping", e) from e
