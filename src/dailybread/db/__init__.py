"""Database module for local SQLite key/value storage."""

from .models import Base, KeyValue
from .sqlite import Database, get_db, reset_db
from .storage import DebouncedWriter, KeyValueStore, StorageError

__all__ = [
    "Base",
    "KeyValue",
    "Database",
    "get_db",
    "reset_db",
    "DebouncedWriter",
    "KeyValueStore",
    "StorageError",
]
