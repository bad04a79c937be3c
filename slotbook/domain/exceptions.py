"""
Domain-specific exception hierarchy for the slotbook application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import BookedInterval, TimeRange


class SlotbookError(Exception):
    """Base class for all application-level errors."""


class InvalidInputError(SlotbookError, ValueError):
    """Raised when caller-supplied input cannot be used."""


class InvalidDateError(InvalidInputError):
    """Raised when a date is missing or cannot be parsed."""


class InvalidTimeError(InvalidInputError):
    """Raised when a time-of-day string is not in HH:MM form."""


class BookingStoreError(SlotbookError):
    """Raised when booking data cannot be read or parsed."""


class BookingConflictError(SlotbookError):
    """Raised when a requested booking overlaps existing active bookings."""

    def __init__(
        self,
        requested: "TimeRange",
        conflicts: Sequence["BookedInterval"],
    ) -> None:
        self.requested = requested
        self.conflicts = list(conflicts)
        super().__init__(
            f"Requested time {requested} conflicts with "
            f"{len(self.conflicts)} existing booking(s)"
        )
