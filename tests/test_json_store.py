"""
Tests for the JSON booking store.
"""

import json

import pendulum
import pytest

from slotbook.adapters.json_store import JsonBookingStore
from slotbook.domain.exceptions import BookingStoreError
from slotbook.domain.models import ACTIVE_STATUSES, BookingStatus

TZ = "Europe/Berlin"


def write_bookings(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def store(tmp_path):
    path = write_bookings(
        tmp_path / "bookings.json",
        {
            "bookings": [
                {"id": "2", "start": "2025-03-10T14:00:00", "end": "2025-03-10T15:00:00", "status": "pending"},
                {"id": "1", "start": "2025-03-10T09:00:00", "end": "2025-03-10T10:00:00", "status": "CONFIRMED",
                 "title": "Review", "clientName": "ACME"},
                {"id": "3", "start": "2025-03-10T16:00:00", "end": "2025-03-10T17:00:00", "status": "CANCELLED"},
                {"id": "4", "start": "2025-03-11T09:00:00", "end": "2025-03-11T10:00:00", "status": "CONFIRMED"},
            ]
        }
    )
    return JsonBookingStore(path, timezone=TZ)


def monday():
    day = pendulum.datetime(2025, 3, 10, tz=TZ)
    return day, day.end_of("day")


class TestJsonBookingStore:
    """Tests for JsonBookingStore."""

    def test_get_bookings_for_day_sorted(self, store):
        """Test get bookings for day sorted."""
        start, end = monday()

        bookings = store.get_bookings(start, end)

        assert [b.booking_id for b in bookings] == ["1", "2", "3"]
        assert bookings[0].title == "Review"
        assert bookings[0].client_name == "ACME"
        assert bookings[0].start == pendulum.datetime(2025, 3, 10, 9, tz=TZ)

    def test_status_filter(self, store):
        """Test filtering bookings by status."""
        start, end = monday()

        bookings = store.get_bookings(start, end, statuses=ACTIVE_STATUSES)

        assert [b.status for b in bookings] == [BookingStatus.CONFIRMED, BookingStatus.PENDING]

    def test_plain_list_and_invalid_entries(self, tmp_path):
        """Test plain list and invalid entries."""
        path = write_bookings(
            tmp_path / "bookings.json",
            [
                {"start": "2025-03-10T09:00:00", "end": "2025-03-10T10:00:00"},
                {"start": "2025-03-10T11:00:00"},
                {"start": "2025-03-10T12:00:00", "end": "2025-03-10T11:00:00"},
                {"start": "garbage", "end": "2025-03-10T11:00:00"},
                {"start": "2025-03-10T13:00:00", "end": "2025-03-10T14:00:00", "status": "UNKNOWN"},
            ]
        )
        start, end = monday()

        bookings = JsonBookingStore(path, timezone=TZ).get_bookings(start, end)

        assert len(bookings) == 1
        assert bookings[0].status is BookingStatus.PENDING

    def test_missing_file_is_empty(self, tmp_path):
        """Test missing file is empty."""
        start, end = monday()

        assert JsonBookingStore(tmp_path / "none.json").get_bookings(start, end) == []

    def test_invalid_json_raises(self, tmp_path):
        """Test invalid json raises."""
        path = tmp_path / "bookings.json"
        path.write_text("{not json", encoding="utf-8")
        start, end = monday()

        with pytest.raises(BookingStoreError):
            JsonBookingStore(path).get_bookings(start, end)

    def test_wrong_shape_raises(self, tmp_path):
        """Test wrong shape raises."""
        path = write_bookings(tmp_path / "bookings.json", {"bookings": {"id": 1}})
        start, end = monday()

        with pytest.raises(BookingStoreError):
            JsonBookingStore(path).get_bookings(start, end)
