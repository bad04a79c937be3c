"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
import re
from datetime import date, time
from pathlib import Path
from typing import List, Optional, Union

import pendulum
import yaml
from pendulum import DateTime
from pydantic import BaseModel, Field, field_validator

from .domain.exceptions import InvalidDateError, InvalidTimeError
from .domain.models import WorkingHoursConfig, anchor_day

logger = logging.getLogger(__name__)

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time_of_day(value: str) -> time:
    """
    Parse an ``HH:MM`` string into a time object.

    Raises:
        InvalidTimeError: If the value is not a valid 24h time
    """
    match = _TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeError(f"Invalid time '{value}', expected HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeError(f"Invalid time '{value}', expected HH:MM")
    return time(hour=hour, minute=minute)


def parse_day(value: Union[str, date, None], timezone: str) -> DateTime:
    """
    Parse a ``YYYY-MM-DD`` string (or date) into midnight of that day.

    Raises:
        InvalidDateError: If the date is missing or cannot be parsed
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidDateError("A date is required")

    if isinstance(value, date):
        return anchor_day(value, timezone)

    try:
        return pendulum.from_format(value.strip(), "YYYY-MM-DD", tz=timezone)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


class SchedulingSettings(BaseModel):
    """Working hours and booking cadence."""
    working_hours_start: str = "09:00"
    working_hours_end: str = "18:00"
    working_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # 0=Sunday
    meeting_duration: int = 60
    buffer_time: int = 15
    reminder_hours: int = 24
    auto_approval: bool = False

    @field_validator("working_hours_start", "working_hours_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Ensure times are in HH:MM form."""
        parse_time_of_day(value)
        return value.strip()

    @field_validator("working_days", mode="before")
    @classmethod
    def split_working_days(cls, value):
        """Accept the stored comma separated form, e.g. ``"1,2,3,4,5"``."""
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"working_days must be between 0 and 6, got {invalid_days}")
        return sorted(set(value))

    @field_validator("meeting_duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is positive."""
        if value <= 0:
            raise ValueError("meeting_duration must be greater than zero")
        return value

    @field_validator("buffer_time", "reminder_hours")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("value must not be negative")
        return value

    def to_working_hours(self, timezone: str = "UTC") -> WorkingHoursConfig:
        """Build the domain configuration used by the slot engine."""
        config = WorkingHoursConfig(
            start=parse_time_of_day(self.working_hours_start),
            end=parse_time_of_day(self.working_hours_end),
            meeting_duration_minutes=self.meeting_duration,
            buffer_minutes=self.buffer_time,
            working_days=frozenset(self.working_days),
            timezone=timezone
        )
        if not config.has_capacity:
            logger.warning(
                "Working hours %s-%s leave no room for a %d minute meeting",
                self.working_hours_start,
                self.working_hours_end,
                self.meeting_duration
            )
        return config


DEFAULT_SETTINGS = SchedulingSettings()


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    company_name: str = "Company"
    director_name: str = "Director"
    bookings_file: Path = Path("bookings.json")
    scheduling: Optional[SchedulingSettings] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative bookings paths are resolved next to the config file
        if not config.bookings_file.is_absolute():
            config.bookings_file = config_path.parent / config.bookings_file

        return config


class SettingsResolver:
    """
    Single place that decides which scheduling settings are in effect.

    Falls back to the canonical ``DEFAULT_SETTINGS`` when the configuration
    has no ``scheduling`` section.
    """

    def __init__(self, config: AppConfig):
        self.config = config

    @property
    def timezone(self) -> str:
        return self.config.timezone

    def resolve(self) -> SchedulingSettings:
        if self.config.scheduling is None:
            logger.info("No scheduling settings configured, using defaults")
            return DEFAULT_SETTINGS
        return self.config.scheduling

    def working_hours(self) -> WorkingHoursConfig:
        return self.resolve().to_working_hours(self.config.timezone)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
