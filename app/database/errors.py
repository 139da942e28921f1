"""
Store error types

The API layer maps each of these onto a status code, so they carry only a
human-readable message.
"""


class StoreError(Exception):
    """Base class for clinic store failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFoundError(StoreError):
    """Operation targets an id that is not in its collection"""


class RecordValidationError(StoreError):
    """Create/update payload is missing a required field or has a bad value"""


class StorageError(StoreError):
    """Snapshot file could not be read or written"""
