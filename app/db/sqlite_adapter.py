"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

SQLite is a file-based database that's perfect for:
- Local development
- Testing
- Single-instance deployments

Key characteristics:
- File-based (single .db file)
- No server required
- Single writer at a time (file locking)
"""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from app.db.interface import DatabaseAdapter


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    This adapter handles all SQLite-specific configuration and operations.
    """

    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.

        SQLite uses NullPool: a file-based database doesn't benefit from
        connection pooling and only one writer runs at a time anyway.

        Returns:
            NullPool class
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        """
        Get SQLite-specific connection arguments.

        Returns:
            Dictionary with SQLite connection arguments
        """
        return {
            "check_same_thread": False,
            # Seconds a writer waits on the file lock before failing
            "timeout": 30,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        """
        Get SQLite-specific engine configuration.

        Returns:
            Dictionary with SQLite engine options
        """
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def is_unique_violation(self, error: IntegrityError, column: str) -> bool:
        """
        SQLite reports ``UNIQUE constraint failed: <table>.<column>``.
        """
        message = str(error.orig)
        if "UNIQUE constraint failed" not in message:
            return False
        failed = message.split(":", 1)[-1]
        return any(
            part.strip().split(".")[-1] == column
            for part in failed.split(",")
        )

    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for SQLite.

        Returns:
            'sqlite'
        """
        return "sqlite"
