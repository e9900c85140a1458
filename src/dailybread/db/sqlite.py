"""SQLite database operations.

Handles database connection, session management and the raw key/value
table operations used by the storage adapter.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, KeyValue


class Database:
    """Database connection and key/value operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     DAILYBREAD_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "DAILYBREAD_DB_PATH",
                str(Path.home() / ".dailybread" / "dailybread.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Key/Value Operations
    # ========================================================================

    def read_value(self, key: str) -> Optional[str]:
        """Return the raw JSON text stored under key, or None."""
        with self.get_session() as session:
            row = session.get(KeyValue, key)
            return row.value if row else None

    def write_value(self, key: str, value: str) -> None:
        """Insert or replace the raw JSON text stored under key."""
        with self.get_session() as session:
            row = session.get(KeyValue, key)
            if row is None:
                session.add(KeyValue(key=key, value=value))
            else:
                row.value = value

    def write_many(self, items: dict[str, str]) -> None:
        """Write several keys in a single transaction."""
        with self.get_session() as session:
            for key, value in items.items():
                row = session.get(KeyValue, key)
                if row is None:
                    session.add(KeyValue(key=key, value=value))
                else:
                    row.value = value

    def delete_values(self, keys: list[str]) -> int:
        """Delete keys, returning the number of rows removed."""
        if not keys:
            return 0
        with self.get_session() as session:
            result = session.execute(delete(KeyValue).where(KeyValue.key.in_(keys)))
            return result.rowcount or 0

    def list_keys(self, prefix: Optional[str] = None) -> list[str]:
        """List stored keys, optionally filtered by prefix."""
        with self.get_session() as session:
            stmt = select(KeyValue.key).order_by(KeyValue.key)
            if prefix:
                stmt = stmt.where(KeyValue.key.startswith(prefix))
            return list(session.scalars(stmt))

    def total_size(self, keys: Optional[list[str]] = None) -> int:
        """Return the total stored JSON length for keys (all keys if None)."""
        with self.get_session() as session:
            stmt = select(func.coalesce(func.sum(func.length(KeyValue.value)), 0))
            if keys is not None:
                stmt = stmt.where(KeyValue.key.in_(keys))
            return int(session.scalar(stmt) or 0)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
