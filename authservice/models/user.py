"""
User model for the auth service.
"""

import uuid

from sqlalchemy import Column, String, Boolean, DateTime, UniqueConstraint, CheckConstraint

from authservice.db.base import BaseModel


class User(BaseModel):
    """
    User account record.

    Attributes:
        u_id: Unique user ID (UUID string)
        u_email: User's email address (unique, lowercase)
        u_password_hash: Argon2id PHC string
        u_first_name: First name
        u_last_name: Last name
        u_is_active: Whether user account is active
        u_is_verified: Whether email is verified
        created_at: Account creation timestamp
        updated_at: Last update timestamp
        u_last_login_at: Last successful login timestamp
    """

    __tablename__ = "users"

    u_id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        nullable=False
    )

    u_email = Column(
        String(255),
        nullable=False,
        index=True
    )
    u_password_hash = Column(
        String(255),
        nullable=False
    )
    u_first_name = Column(
        String(100),
        nullable=False
    )
    u_last_name = Column(
        String(100),
        nullable=False
    )

    u_is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        index=True
    )
    u_is_verified = Column(
        Boolean,
        default=False,
        nullable=False
    )

    u_last_login_at = Column(
        DateTime(timezone=True),
        nullable=True
    )

    __table_args__ = (
        UniqueConstraint('u_email', name='uq_users_email'),
        CheckConstraint('length(u_email) >= 3', name='ck_users_email_length'),
    )
