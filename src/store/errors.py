"""Domain exceptions for the snapshot store.

Separates infrastructure errors (database issues) from data errors
(a stored snapshot that cannot be decoded).
"""


class SnapshotStoreError(Exception):
    """Base exception for all snapshot store errors.

    Callers that treat persistence as best-effort catch this class.
    """


class StoreConnectionError(SnapshotStoreError):
    """Raised when the database connection fails or is not established."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class StoreOperationError(SnapshotStoreError):
    """Raised when a read or write against the database fails."""

    def __init__(self, operation: str, reason: str) -> None:
        """Initialize the operation error.

        Args:
            operation: Name of the failed operation.
            reason: Underlying error message.
        """
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store operation {operation} failed: {reason}")


class SnapshotDecodeError(SnapshotStoreError):
    """Raised when a stored snapshot cannot be turned back into a ranking."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize the decode error.

        Args:
            key: Storage key of the snapshot.
            reason: Why decoding failed.
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Snapshot {key!r} unreadable: {reason}")


class MigrationError(SnapshotStoreError):
    """Raised when a schema migration fails."""

    def __init__(self, version: int, message: str) -> None:
        """Initialize the migration error.

        Args:
            version: The migration version that failed.
            message: Human-readable error message.
        """
        self.version = version
        super().__init__(f"Migration {version} failed: {message}")
