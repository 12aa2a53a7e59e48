"""
SQLAlchemy base model.
All models inherit from BaseModel to get the common timestamp fields.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, inspect
from sqlalchemy.orm import as_declarative, declared_attr


@as_declarative()
class Base:
    """
    Declarative base for all SQLAlchemy models.
    """

    def __repr__(self) -> str:
        class_name = self.__class__.__name__

        primary_keys = []
        for column in inspect(self.__class__).primary_key:
            value = getattr(self, column.name)
            primary_keys.append(f"{column.name}={value}")

        if primary_keys:
            return f"<{class_name}({', '.join(primary_keys)})>"
        return f"<{class_name}>"


class BaseModel(Base):
    """
    Abstract base model with created/updated timestamps.
    """
    __abstract__ = True

    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True
    )

    updated_at = Column(
        DateTime(timezone=True),
        default=None,
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=True
    )

    @declared_attr
    def __mapper_args__(cls):
        return {
            "eager_defaults": True
        }
