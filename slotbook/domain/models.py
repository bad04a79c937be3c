"""
Domain models for slot generation and day occupancy.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union

import pendulum
from pendulum import DateTime

DayLike = Union[date, datetime]


def weekday_index(day: date) -> int:
    """Return the weekday index with 0=Sunday through 6=Saturday."""
    return day.isoweekday() % 7


def anchor_day(day: DayLike, timezone: str) -> DateTime:
    """
    Normalize a calendar day to midnight in the given timezone.

    Aware datetimes keep their own timezone; naive datetimes and plain
    dates are interpreted in ``timezone``. Any time-of-day is dropped.
    """
    if isinstance(day, datetime):
        return pendulum.instance(day, tz=timezone).start_of("day")
    return pendulum.datetime(day.year, day.month, day.day, tz=timezone)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (half-open ranges)."""
        return self.start < other.end and other.start < self.end

    def contains(self, moment: DateTime) -> bool:
        return self.start <= moment < self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class WorkingHoursConfig:
    """
    Working hours and meeting cadence used to generate a day's slots.

    ``working_days`` uses 0=Sunday .. 6=Saturday. A window that closes
    before it opens, or a non-positive meeting duration, is accepted here
    and simply has no capacity.
    """
    start: time
    end: time
    meeting_duration_minutes: int
    buffer_minutes: int = 0
    working_days: FrozenSet[int] = frozenset({1, 2, 3, 4, 5})
    timezone: str = "UTC"

    def __post_init__(self):
        # Accept any iterable of weekdays but store it frozen
        object.__setattr__(self, "working_days", frozenset(self.working_days))

    @property
    def has_capacity(self) -> bool:
        """Whether this configuration can produce any slot at all."""
        return (
            self.start < self.end
            and self.meeting_duration_minutes > 0
            and self.buffer_minutes >= 0
        )

    def is_working_day(self, day: DayLike) -> bool:
        """Check if a given day is enabled for bookings."""
        return weekday_index(anchor_day(day, self.timezone)) in self.working_days

    def day_bounds(self, day: DayLike) -> Tuple[DateTime, DateTime]:
        """
        Return the opening and closing anchors of the working window on ``day``.
        """
        midnight = anchor_day(day, self.timezone)
        opening = midnight.set(
            hour=self.start.hour,
            minute=self.start.minute,
            second=0,
            microsecond=0
        )
        closing = midnight.set(
            hour=self.end.hour,
            minute=self.end.minute,
            second=0,
            microsecond=0
        )
        return opening, closing


class BookingStatus(str, Enum):
    """Lifecycle status of a stored booking."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @property
    def is_active(self) -> bool:
        """Active bookings occupy capacity and block slots."""
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES: FrozenSet[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)


@dataclass(frozen=True)
class BookedInterval:
    """
    An existing booking as seen by the slot engine.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime
    status: BookingStatus = BookingStatus.CONFIRMED
    booking_id: Optional[str] = None
    title: Optional[str] = None
    client_name: Optional[str] = None

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Booking start {self.start} must be before end {self.end}")

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.booking_id,
            "title": self.title,
            "start": self.start.to_iso8601_string(),
            "end": self.end.to_iso8601_string(),
            "status": self.status.value,
            "clientName": self.client_name,
        }


@dataclass(frozen=True)
class Slot:
    """A candidate meeting slot on a given day."""
    start: DateTime
    end: DateTime
    available: bool

    @property
    def label(self) -> str:
        """Local time-of-day label, e.g. ``09:00``."""
        return self.start.format("HH:mm")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.label,
            "available": self.available,
            "dateTime": self.start.to_iso8601_string(),
        }


class DayStatus(str, Enum):
    """Qualitative occupancy of a day."""
    FULL = "full"
    BUSY = "busy"
    MIXED = "mixed"
    PARTIAL = "partial"
    PENDING = "pending"
    AVAILABLE = "available"
    NON_WORKING = "non_working"


@dataclass(frozen=True)
class DayOccupancy:
    """Aggregate occupancy of a single day."""
    day: str  # YYYY-MM-DD
    is_working_day: bool
    status: DayStatus
    total_slots: int = 0
    occupied_slots: int = 0
    available_slots: int = 0
    occupation_rate: int = 0
    has_pending: bool = False
    has_confirmed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day,
            "isWorkingDay": self.is_working_day,
            "occupationRate": self.occupation_rate,
            "status": self.status.value,
            "totalSlots": self.total_slots,
            "occupiedSlots": self.occupied_slots,
            "availableSlots": self.available_slots,
            "hasPending": self.has_pending,
            "hasConfirmed": self.has_confirmed,
        }


@dataclass
class DaySummary:
    """
    Per-day roll-up of bookings across every status.

    ``total`` only counts active bookings; ``bookings`` keeps the details.
    """
    day: str
    has_pending: bool = False
    has_confirmed: bool = False
    has_cancelled: bool = False
    has_completed: bool = False
    total: int = 0
    bookings: List[BookedInterval] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day,
            "hasPending": self.has_pending,
            "hasConfirmed": self.has_confirmed,
            "hasCancelled": self.has_cancelled,
            "hasCompleted": self.has_completed,
            "total": self.total,
            "details": [booking.to_dict() for booking in self.bookings],
        }
