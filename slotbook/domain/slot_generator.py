"""
Core business logic for generating a day's bookable meeting slots.

Pure domain logic without any external dependencies (no database, no I/O):
the caller supplies the configuration and the bookings relevant to the day.
"""

import logging
from typing import List, Sequence

from .models import BookedInterval, DayLike, Slot, WorkingHoursConfig
from .overlap import is_available

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Generates the ordered candidate slots of a day.

    Algorithm:
    1. Anchor a cursor at the opening time of the day
    2. Take the candidate window [cursor, cursor + duration)
    3. Stop once the candidate would end after closing time
    4. Otherwise emit it, flagged against the booked intervals
    5. Advance the cursor by duration + buffer and repeat
    """

    def __init__(self, config: WorkingHoursConfig):
        self.config = config

    def generate_slots(
        self,
        day: DayLike,
        booked_intervals: Sequence[BookedInterval] = ()
    ) -> List[Slot]:
        """
        Generate all slots of ``day`` that fit inside working hours.

        Working days are not consulted here; that gate belongs to the caller.

        Args:
            day: Calendar day; any time-of-day component is ignored
            booked_intervals: Bookings already filtered to this day

        Returns:
            List of Slot objects, earliest first. Empty when the
            configuration has no capacity.
        """
        if not self.config.has_capacity:
            logger.debug("No capacity for configuration %s", self.config)
            return []

        opening, closing = self.config.day_bounds(day)
        duration = self.config.meeting_duration_minutes
        step = duration + self.config.buffer_minutes

        slots: List[Slot] = []
        cursor = opening

        while True:
            candidate_end = cursor.add(minutes=duration)
            if candidate_end > closing:
                break

            slots.append(
                Slot(
                    start=cursor,
                    end=candidate_end,
                    available=is_available(cursor, candidate_end, booked_intervals)
                )
            )
            cursor = cursor.add(minutes=step)

        return slots


def generate_slots(
    day: DayLike,
    config: WorkingHoursConfig,
    booked_intervals: Sequence[BookedInterval] = ()
) -> List[Slot]:
    """Generate the slots of ``day`` for ``config``. See ``SlotGenerator``."""
    return SlotGenerator(config).generate_slots(day, booked_intervals)
