"""
Database module for the auth service.
"""

from authservice.db.base import Base, BaseModel
from authservice.db.session import (
    create_engine,
    create_session_factory,
    init_db,
    close_db
)

__all__ = [
    "Base",
    "BaseModel",
    "create_engine",
    "create_session_factory",
    "init_db",
    "close_db"
]
