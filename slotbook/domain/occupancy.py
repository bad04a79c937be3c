"""
Day occupancy classification and multi-day booking summaries.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from .models import (
    BookedInterval,
    BookingStatus,
    DayLike,
    DayOccupancy,
    DayStatus,
    DaySummary,
    WorkingHoursConfig,
    anchor_day,
)
from .slot_generator import SlotGenerator


@dataclass(frozen=True)
class _Tally:
    rate: int
    has_pending: bool
    has_confirmed: bool


# Ordered decision table, first match wins.
STATUS_RULES: Tuple[Tuple[Callable[[_Tally], bool], DayStatus], ...] = (
    (lambda t: t.rate >= 100, DayStatus.FULL),
    (lambda t: t.rate >= 75, DayStatus.BUSY),
    (lambda t: t.rate > 0 and t.has_confirmed and t.has_pending, DayStatus.MIXED),
    (lambda t: t.rate > 0 and t.has_confirmed, DayStatus.PARTIAL),
    (lambda t: t.rate > 0 and t.has_pending, DayStatus.PENDING),
)


def occupation_rate(occupied: int, total: int) -> int:
    """Percentage of capacity used, rounded half up. Zero without capacity."""
    if total <= 0:
        return 0
    return int(math.floor(100 * occupied / total + 0.5))


def classify_status(rate: int, has_pending: bool, has_confirmed: bool) -> DayStatus:
    """Pick the day status from the ordered rule table."""
    tally = _Tally(rate=rate, has_pending=has_pending, has_confirmed=has_confirmed)
    for predicate, status in STATUS_RULES:
        if predicate(tally):
            return status
    return DayStatus.AVAILABLE


class OccupancyClassifier:
    """
    Classifies how occupied a day is.

    Each booking counts as exactly one slot of capacity; bookings are not
    matched against the generated slots.
    """

    def __init__(self, config: WorkingHoursConfig):
        self.config = config
        self._generator = SlotGenerator(config)

    def classify_day(
        self,
        day: DayLike,
        booked_intervals: Sequence[BookedInterval] = ()
    ) -> DayOccupancy:
        """
        Compute the occupancy of ``day`` from its bookings.

        Args:
            day: Calendar day to classify
            booked_intervals: The day's bookings, already restricted by the
                caller to the statuses that occupy capacity

        Returns:
            DayOccupancy for the day
        """
        day_key = anchor_day(day, self.config.timezone).to_date_string()

        if not self.config.is_working_day(day):
            return DayOccupancy(
                day=day_key,
                is_working_day=False,
                status=DayStatus.NON_WORKING
            )

        total = len(self._generator.generate_slots(day, []))

        occupied = 0
        has_pending = False
        has_confirmed = False
        for booking in booked_intervals:
            occupied += 1
            if booking.status is BookingStatus.PENDING:
                has_pending = True
            elif booking.status is BookingStatus.CONFIRMED:
                has_confirmed = True

        rate = occupation_rate(occupied, total)

        return DayOccupancy(
            day=day_key,
            is_working_day=True,
            status=classify_status(rate, has_pending, has_confirmed),
            total_slots=total,
            occupied_slots=occupied,
            available_slots=total - occupied,
            occupation_rate=rate,
            has_pending=has_pending,
            has_confirmed=has_confirmed
        )


def classify_day(
    day: DayLike,
    config: WorkingHoursConfig,
    booked_intervals: Sequence[BookedInterval] = ()
) -> DayOccupancy:
    """Classify the occupancy of ``day``. See ``OccupancyClassifier``."""
    return OccupancyClassifier(config).classify_day(day, booked_intervals)


def summarize_days(bookings: Iterable[BookedInterval], timezone: str = "UTC") -> List[DaySummary]:
    """
    Group bookings by local calendar day.

    Every status sets its flag, but only active bookings count toward
    ``total``. Days come back in date order with bookings sorted by start.
    """
    days: Dict[str, DaySummary] = {}

    for booking in sorted(bookings, key=lambda b: b.start):
        key = booking.start.in_timezone(timezone).to_date_string()
        summary = days.setdefault(key, DaySummary(day=key))

        if booking.status.is_active:
            summary.total += 1

        if booking.status is BookingStatus.PENDING:
            summary.has_pending = True
        elif booking.status is BookingStatus.CONFIRMED:
            summary.has_confirmed = True
        elif booking.status is BookingStatus.CANCELLED:
            summary.has_cancelled = True
        elif booking.status is BookingStatus.COMPLETED:
            summary.has_completed = True

        summary.bookings.append(booking)

    return [days[key] for key in sorted(days)]
