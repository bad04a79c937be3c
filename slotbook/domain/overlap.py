"""
Conflict detection between a candidate time window and existing bookings.

Intervals are half-open: ``[a, b)`` and ``[c, d)`` overlap iff
``a < d and c < b``. Touching boundaries never conflict.
"""

from datetime import datetime
from typing import Iterable, List

from .models import BookedInterval


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime
) -> bool:
    """Check whether two half-open intervals intersect."""
    return a_start < b_end and b_start < a_end


def find_conflicts(
    candidate_start: datetime,
    candidate_end: datetime,
    booked_intervals: Iterable[BookedInterval]
) -> List[BookedInterval]:
    """
    Return the bookings that overlap the candidate window, in input order.

    Covers a candidate starting inside a booking, ending inside it, and
    containing or being contained by it.
    """
    return [
        booking for booking in booked_intervals
        if intervals_overlap(candidate_start, candidate_end, booking.start, booking.end)
    ]


def is_available(
    candidate_start: datetime,
    candidate_end: datetime,
    booked_intervals: Iterable[BookedInterval]
) -> bool:
    """Check that the candidate window overlaps none of the bookings."""
    return not any(
        intervals_overlap(candidate_start, candidate_end, booking.start, booking.end)
        for booking in booked_intervals
    )
