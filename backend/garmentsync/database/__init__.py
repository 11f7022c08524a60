"""Relational persistence: declarative base, row classes and engine management."""

from garmentsync.database.base import Base
from garmentsync.database.connection import (
    close_database_connections,
    create_tables,
    get_engine,
    get_session,
)

__all__ = [
    "Base",
    "close_database_connections",
    "create_tables",
    "get_engine",
    "get_session",
]
