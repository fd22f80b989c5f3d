"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    DatabaseError,
    PersistenceError,
)

__all__ = [
    "DatabaseConnectionError",
    "DatabaseError",
    "PersistenceError",
]
