"""Database-specific exceptions shared by the repositories."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Raised when a database connection cannot be obtained."""

    pass


class PersistenceError(DatabaseError):
    """Raised when a repository statement fails.

    Repositories wrap driver errors in this type so services only need to
    know about one failure shape.
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation
