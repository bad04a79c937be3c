"""
Application services answering slot and day-status queries.

The service loads settings through the ``SettingsResolver`` and bookings
through a store adapter, then delegates the actual computation to the pure
domain functions. The store dependency is a simple protocol so tests can
plug in an in-memory stub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Protocol, Union

from pendulum import DateTime

from ..config import SchedulingSettings, SettingsResolver, parse_day
from ..domain.exceptions import BookingConflictError
from ..domain.models import (
    ACTIVE_STATUSES,
    BookedInterval,
    BookingStatus,
    DayOccupancy,
    DaySummary,
    Slot,
    TimeRange,
)
from ..domain.occupancy import OccupancyClassifier, summarize_days
from ..domain.overlap import find_conflicts
from ..domain.recurrence import RecurrenceRule, expand_recurrence
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

DayInput = Union[str, date, None]

# Longest booking the store accepts, used to look back for overlapping bookings
MAX_BOOKING_DAYS = 30


class BookingStoreProtocol(Protocol):
    """Protocol describing the booking store behaviour needed by the service."""

    def get_bookings(
        self,
        start: DateTime,
        end: DateTime,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> List[BookedInterval]:
        """Return bookings starting within ``[start, end]``."""


@dataclass(frozen=True)
class AvailableSlotsResult:
    """Slots of a day together with the settings that produced them."""
    day: str
    slots: List[Slot]
    settings: SchedulingSettings
    is_working_day: bool = True

    @property
    def available_slots(self) -> List[Slot]:
        return [slot for slot in self.slots if slot.available]

    def to_dict(self) -> dict:
        return {
            "date": self.day,
            "isWorkingDay": self.is_working_day,
            "availableSlots": [slot.to_dict() for slot in self.slots],
            "settings": {
                "workingHoursStart": self.settings.working_hours_start,
                "workingHoursEnd": self.settings.working_hours_end,
                "meetingDuration": self.settings.meeting_duration,
                "bufferTime": self.settings.buffer_time,
            },
        }


class BookingQueryService:
    """
    Orchestrates booking retrieval and the slot engine.
    """

    def __init__(
        self,
        store: BookingStoreProtocol,
        settings_resolver: SettingsResolver,
    ) -> None:
        self._store = store
        self._settings = settings_resolver

    @property
    def timezone(self) -> str:
        return self._settings.timezone

    def available_slots(self, day: DayInput) -> AvailableSlotsResult:
        """
        Compute the slots of ``day`` and whether each one is still free.

        Non-working days produce an empty slot list.

        Raises:
            InvalidDateError: If ``day`` is missing or malformed
        """
        midnight = parse_day(day, self.timezone)
        settings = self._settings.resolve()
        working_hours = settings.to_working_hours(self.timezone)

        if not working_hours.is_working_day(midnight):
            logger.debug("%s is not a working day", midnight.to_date_string())
            return AvailableSlotsResult(
                day=midnight.to_date_string(),
                slots=[],
                settings=settings,
                is_working_day=False,
            )

        bookings = self._active_bookings_for_day(midnight)
        slots = SlotGenerator(working_hours).generate_slots(midnight, bookings)

        return AvailableSlotsResult(
            day=midnight.to_date_string(),
            slots=slots,
            settings=settings,
        )

    def day_status(self, day: DayInput) -> DayOccupancy:
        """
        Classify the occupancy of ``day``.

        Raises:
            InvalidDateError: If ``day`` is missing or malformed
        """
        midnight = parse_day(day, self.timezone)
        working_hours = self._settings.working_hours()
        bookings = self._active_bookings_for_day(midnight)

        return OccupancyClassifier(working_hours).classify_day(midnight, bookings)

    def days_overview(
        self,
        reference_day: DayInput,
        *,
        past_days: int = 30,
        future_days: int = 60,
    ) -> List[DaySummary]:
        """Summarize bookings of every status around ``reference_day``."""
        midnight = parse_day(reference_day, self.timezone)
        bookings = self._store.get_bookings(
            start=midnight.subtract(days=past_days),
            end=midnight.add(days=future_days).end_of("day"),
        )
        return summarize_days(bookings, self.timezone)

    def check_booking_request(
        self,
        start: DateTime,
        end: DateTime,
        recurrence: Optional[RecurrenceRule] = None,
    ) -> List[TimeRange]:
        """
        Validate a requested booking (and its repetitions) against active bookings.

        Returns:
            The requested occurrences when none of them conflicts

        Raises:
            ValueError: If ``start`` is not before ``end``
            InvalidInputError: If the recurrence rule is invalid
            BookingConflictError: For the first occurrence that conflicts
        """
        requested = TimeRange(start=start, end=end)
        instances = expand_recurrence(start, requested.end - requested.start, recurrence)
        if not instances:
            return []

        existing = self._store.get_bookings(
            start=instances[0].start.subtract(days=MAX_BOOKING_DAYS),
            end=instances[-1].end,
            statuses=ACTIVE_STATUSES,
        )

        for instance in instances:
            conflicts = find_conflicts(instance.start, instance.end, existing)
            if conflicts:
                logger.info("Requested time %s conflicts with %d booking(s)", instance, len(conflicts))
                raise BookingConflictError(instance, conflicts)

        return instances

    def _active_bookings_for_day(self, midnight: DateTime) -> List[BookedInterval]:
        return self._store.get_bookings(
            start=midnight,
            end=midnight.end_of("day"),
            statuses=ACTIVE_STATUSES,
        )
