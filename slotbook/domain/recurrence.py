"""
Expansion of recurring booking requests into concrete time ranges.
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import timedelta
from typing import List, Optional, Sequence

from pendulum import DateTime

from .exceptions import InvalidInputError
from .models import TimeRange, weekday_index

DEFAULT_MAX_INSTANCES = 365


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


@dataclass(frozen=True)
class RecurrenceRule:
    """
    How a booking repeats.

    ``by_weekday`` uses 0=Sunday .. 6=Saturday and only applies to weekly
    rules; ``by_month_day`` only applies to monthly rules. Without ``until``
    the series is bounded to one year after the first occurrence.
    """
    frequency: Frequency
    interval: int = 1
    by_weekday: Sequence[int] = field(default_factory=tuple)
    by_month_day: Optional[int] = None
    until: Optional[DateTime] = None
    count: Optional[int] = None

    def validate(self) -> List[str]:
        """Return a list of problems with this rule (empty when valid)."""
        errors: List[str] = []

        if self.interval < 1:
            errors.append("interval must be at least 1")

        if self.frequency is Frequency.WEEKLY and not self.by_weekday:
            errors.append("weekly rules need at least one weekday")

        if any(day not in range(7) for day in self.by_weekday):
            errors.append("weekdays must be between 0 (Sunday) and 6 (Saturday)")

        if self.frequency is Frequency.MONTHLY:
            if self.by_month_day is None or not 1 <= self.by_month_day <= 31:
                errors.append("monthly rules need a day of month between 1 and 31")

        if self.count is not None and self.count < 1:
            errors.append("count must be at least 1")

        return errors

    def describe(self) -> str:
        """Human readable summary, e.g. ``every 2 weeks on Mon, Wed, 4 times``."""
        units = {
            Frequency.DAILY: "day",
            Frequency.WEEKLY: "week",
            Frequency.MONTHLY: "month",
            Frequency.YEARLY: "year",
        }
        unit = units[self.frequency]
        text = f"every {unit}" if self.interval == 1 else f"every {self.interval} {unit}s"

        if self.frequency is Frequency.WEEKLY and self.by_weekday:
            names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
            text += " on " + ", ".join(names[d] for d in sorted(self.by_weekday))
        if self.frequency is Frequency.MONTHLY and self.by_month_day:
            text += f" on day {self.by_month_day}"

        if self.until is not None:
            text += f" until {self.until.to_date_string()}"
        elif self.count is not None:
            text += f", {self.count} times"
        return text


def expand_recurrence(
    base_start: DateTime,
    duration: timedelta,
    rule: Optional[RecurrenceRule] = None,
    max_instances: int = DEFAULT_MAX_INSTANCES
) -> List[TimeRange]:
    """
    Expand a booking request into its occurrences.

    Args:
        base_start: Start of the first requested occurrence
        duration: Exact length of every occurrence
        rule: Recurrence rule, or None for a single booking
        max_instances: Hard cap on generated occurrences

    Returns:
        List of TimeRange objects in chronological order

    Raises:
        InvalidInputError: If the rule is not valid
    """
    if rule is None:
        return [TimeRange(start=base_start, end=base_start + duration)]

    errors = rule.validate()
    if errors:
        raise InvalidInputError("Invalid recurrence rule: " + "; ".join(errors))

    horizon = rule.until if rule.until is not None else base_start.add(years=1)
    target = min(rule.count or max_instances, max_instances)

    instances: List[TimeRange] = []
    current = base_start

    while len(instances) < target and current <= horizon:
        if _matches(current, rule):
            instances.append(
                TimeRange(start=current, end=current + duration)
            )
        current = _next_occurrence(current, rule)

    return instances


def _matches(moment: DateTime, rule: RecurrenceRule) -> bool:
    if rule.frequency is Frequency.WEEKLY and rule.by_weekday:
        return weekday_index(moment) in rule.by_weekday
    if rule.frequency is Frequency.MONTHLY and rule.by_month_day:
        return moment.day == min(rule.by_month_day, moment.days_in_month)
    return True


def _next_occurrence(current: DateTime, rule: RecurrenceRule) -> DateTime:
    if rule.frequency is Frequency.DAILY:
        return current.add(days=rule.interval)

    if rule.frequency is Frequency.WEEKLY:
        if not rule.by_weekday:
            return current.add(weeks=rule.interval)

        today = weekday_index(current)
        days = sorted(set(rule.by_weekday))
        later_this_week = [day for day in days if day > today]
        if later_this_week:
            return current.add(days=later_this_week[0] - today)
        # Wrap to the first listed weekday, skipping interval - 1 weeks
        return current.add(days=7 - today + days[0] + (rule.interval - 1) * 7)

    if rule.frequency is Frequency.MONTHLY:
        following = current.add(months=rule.interval)
        if rule.by_month_day:
            following = following.set(day=min(rule.by_month_day, following.days_in_month))
        return following

    return current.add(years=rule.interval)
