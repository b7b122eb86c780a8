class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""
