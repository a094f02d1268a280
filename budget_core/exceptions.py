"""Domain-specific exceptions for the finance tracker core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class TransactionIndexError(IndexError):
    """Raised when a ledger position does not refer to a transaction."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""


class SnapshotNotFoundError(PersistenceError):
    """Raised when no snapshot exists at the requested location."""


class CorruptSnapshotError(PersistenceError):
    """Raised when a snapshot cannot be read back into a ledger."""
