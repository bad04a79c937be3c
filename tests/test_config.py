"""
Tests for configuration loading and settings resolution.
"""

from datetime import date, time

import pendulum
import pytest
from pydantic import ValidationError

from slotbook.config import (
    DEFAULT_SETTINGS,
    AppConfig,
    SchedulingSettings,
    SettingsResolver,
    parse_day,
    parse_time_of_day,
)
from slotbook.domain.exceptions import InvalidDateError, InvalidInputError, InvalidTimeError


class TestParsing:
    """Tests for time and date parsing helpers."""

    def test_parse_time_of_day(self):
        """Test parsing HH:MM strings."""
        assert parse_time_of_day("09:30") == time(9, 30)
        assert parse_time_of_day("7:05") == time(7, 5)

    @pytest.mark.parametrize("value", ["", "9", "24:00", "12:60", "noon", "09:00:00"])
    def test_parse_time_of_day_rejects_malformed(self, value):
        """Test parse time of day rejects malformed."""
        with pytest.raises(InvalidTimeError):
            parse_time_of_day(value)

    def test_parse_day(self):
        """Test parsing a YYYY-MM-DD string."""
        day = parse_day("2025-03-10", "Europe/Berlin")

        assert day == pendulum.datetime(2025, 3, 10, tz="Europe/Berlin")

    def test_parse_day_accepts_date(self):
        """Test parse day accepts date."""
        assert parse_day(date(2025, 3, 10), "UTC") == pendulum.datetime(2025, 3, 10, tz="UTC")

    @pytest.mark.parametrize("value", [None, "", "  ", "10/03/2025", "2025-02-30"])
    def test_parse_day_rejects_missing_or_invalid(self, value):
        """Test parse day rejects missing or invalid."""
        with pytest.raises(InvalidDateError):
            parse_day(value, "UTC")

    def test_input_errors_are_value_errors(self):
        """Test input errors are value errors."""
        assert issubclass(InvalidDateError, InvalidInputError)
        assert issubclass(InvalidInputError, ValueError)


class TestSchedulingSettings:
    """Tests for SchedulingSettings validation."""

    def test_defaults(self):
        """Test the default scheduling settings."""
        settings = SchedulingSettings()

        assert settings.working_hours_start == "09:00"
        assert settings.working_hours_end == "18:00"
        assert settings.working_days == [1, 2, 3, 4, 5]
        assert settings.meeting_duration == 60
        assert settings.buffer_time == 15

    def test_working_days_from_csv(self):
        """Test working days given as a comma separated string."""
        settings = SchedulingSettings(working_days="5,1,3,3")

        assert settings.working_days == [1, 3, 5]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("working_hours_start", "9h"),
            ("working_hours_end", "25:00"),
            ("working_days", [7]),
            ("meeting_duration", 0),
            ("buffer_time", -1),
        ],
    )
    def test_rejects_malformed_values(self, field, value):
        """Test rejects malformed values."""
        with pytest.raises(ValidationError):
            SchedulingSettings(**{field: value})

    def test_to_working_hours(self):
        """Test conversion to the domain configuration."""
        settings = SchedulingSettings(working_hours_start="08:30", working_days=[0, 6])

        config = settings.to_working_hours("America/Sao_Paulo")

        assert config.start == time(8, 30)
        assert config.end == time(18, 0)
        assert config.meeting_duration_minutes == 60
        assert config.buffer_minutes == 15
        assert config.working_days == frozenset({0, 6})
        assert config.timezone == "America/Sao_Paulo"

    def test_reversed_window_is_accepted_without_capacity(self):
        """Test reversed window is accepted without capacity."""
        settings = SchedulingSettings(working_hours_start="18:00", working_hours_end="09:00")

        assert not settings.to_working_hours().has_capacity


class TestAppConfig:
    """Tests for AppConfig loading."""

    def test_load_from_yaml(self, tmp_path):
        """Test loading configuration from a YAML file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "timezone: Europe/Berlin\n"
            "bookings_file: data/bookings.json\n"
            "scheduling:\n"
            "  working_hours_start: '08:00'\n"
            "  working_days: '1,2,3'\n",
            encoding="utf-8"
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.timezone == "Europe/Berlin"
        assert config.bookings_file == tmp_path / "data" / "bookings.json"
        assert config.scheduling.working_hours_start == "08:00"
        assert config.scheduling.working_days == [1, 2, 3]

    def test_missing_file(self, tmp_path):
        """Test that a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that malformed YAML raises ValueError."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("timezone: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root(self, tmp_path):
        """Test that a YAML list at the root is rejected."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)

    def test_unknown_timezone(self):
        """Test that an unknown timezone is rejected."""
        with pytest.raises(ValidationError):
            AppConfig(timezone="Mars/Olympus_Mons")


class TestSettingsResolver:
    """Tests for SettingsResolver."""

    def test_defaults_when_not_configured(self):
        """Test defaults when not configured."""
        resolver = SettingsResolver(AppConfig(timezone="Europe/Berlin"))

        assert resolver.resolve() is DEFAULT_SETTINGS
        assert resolver.working_hours().timezone == "Europe/Berlin"

    def test_configured_settings_win(self):
        """Test configured settings win."""
        configured = SchedulingSettings(meeting_duration=30)
        resolver = SettingsResolver(AppConfig(scheduling=configured))

        assert resolver.resolve() is configured
        assert resolver.working_hours().meeting_duration_minutes == 30
