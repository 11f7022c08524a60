"""Storage interface and its in-memory and SQL backends."""

from garmentsync.repositories.base import (
    DuplicateRecordError,
    RepositoryError,
    Storage,
)
from garmentsync.repositories.memory import InMemoryStorage, get_memory_storage

__all__ = [
    "DuplicateRecordError",
    "InMemoryStorage",
    "RepositoryError",
    "Storage",
    "get_memory_storage",
]
