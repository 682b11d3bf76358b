"""Domain exceptions for the donation tracker."""

from __future__ import annotations


class DonationTrackerError(RuntimeError):
    """Base exception for all donation tracker failures."""


class StorageError(DonationTrackerError):
    """Raised when the SQLite store cannot complete an operation."""


class SchemaError(StorageError):
    """Raised when the database schema cannot be created."""


class NotFoundError(DonationTrackerError, LookupError):
    """Raised when a referenced record does not exist."""

    record_name = "Record"

    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"{self.record_name} #{record_id} was not found.")


class DonorNotFoundError(NotFoundError):
    record_name = "Donor"


class DonationNotFoundError(NotFoundError):
    record_name = "Donation"


class ValidationError(DonationTrackerError, ValueError):
    """Raised when form input is rejected before reaching the store."""


class FileWriteError(DonationTrackerError):
    """Raised when a letter file or the letters directory cannot be written."""
