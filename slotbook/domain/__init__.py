"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    BookedInterval,
    BookingStatus,
    DayOccupancy,
    DayStatus,
    DaySummary,
    Slot,
    TimeRange,
    WorkingHoursConfig,
)
from .occupancy import OccupancyClassifier, classify_day, summarize_days
from .overlap import find_conflicts, intervals_overlap, is_available
from .recurrence import Frequency, RecurrenceRule, expand_recurrence
from .slot_generator import SlotGenerator, generate_slots

__all__ = [
    "BookedInterval",
    "BookingStatus",
    "DayOccupancy",
    "DayStatus",
    "DaySummary",
    "Slot",
    "TimeRange",
    "WorkingHoursConfig",
    "OccupancyClassifier",
    "classify_day",
    "summarize_days",
    "find_conflicts",
    "intervals_overlap",
    "is_available",
    "Frequency",
    "RecurrenceRule",
    "expand_recurrence",
    "SlotGenerator",
    "generate_slots",
]
