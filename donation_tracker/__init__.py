"""Data, navigation, and letter helpers for the donation tracker app."""

from .config import TrackerSettings, configure_logging
from .errors import (
    DonationNotFoundError,
    DonationTrackerError,
    DonorNotFoundError,
    FileWriteError,
    NotFoundError,
    SchemaError,
    StorageError,
    ValidationError,
)
from .letters import LetterGenerator, LetterRun
from .models import (
    Donation,
    Donor,
    DonorFields,
    Organization,
    cents_from_amount,
    donor_display_name,
    format_currency,
)
from .navigation import NavigationButtons, NavigationCursor
from .store import DonationStore

__all__ = [
    "DonationNotFoundError",
    "DonationStore",
    "DonationTrackerError",
    "Donation",
    "Donor",
    "DonorFields",
    "DonorNotFoundError",
    "FileWriteError",
    "LetterGenerator",
    "LetterRun",
    "NavigationButtons",
    "NavigationCursor",
    "NotFoundError",
    "Organization",
    "SchemaError",
    "StorageError",
    "TrackerSettings",
    "ValidationError",
    "cents_from_amount",
    "configure_logging",
    "donor_display_name",
    "format_currency",
]
