class StorageError(Exception):
    """Base exception for all storage-related errors."""


class PersistenceError(StorageError):
    """Raised when a key cannot be read from or written to the adapter."""
