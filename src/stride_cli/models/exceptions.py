"""Custom exceptions for the STRIDE sync layer."""


class StrideError(Exception):
    """Base exception for all STRIDE errors."""


class NotFoundError(StrideError):
    """Raised when a persistence call targets an id absent from durable storage."""


class StorageError(StrideError):
    """Raised when the key/value storage cannot read or write an item."""


class StorageQuotaError(StorageError):
    """Raised when a write would exceed the storage quota."""
