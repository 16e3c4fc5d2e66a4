from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for recoverable business conditions."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a record id does not exist in its collection."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} with ID {record_id} not found")
        self.collection = collection
        self.record_id = record_id


class ConflictError(DomainError):
    """Raised when a uniqueness rule (id or business key) would be broken."""


class PersistenceError(Exception):
    """Raised when the storage medium is unreadable, unwritable or corrupt.

    Not a DomainError: callers should treat it as fatal for the operation.
    """

    def __init__(self, message: str, *, collection: Optional[str] = None):
        super().__init__(message)
        self.collection = collection
