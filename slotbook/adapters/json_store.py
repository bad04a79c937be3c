"""
Booking store backed by a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.exceptions import BookingStoreError
from ..domain.models import BookedInterval, BookingStatus

logger = logging.getLogger(__name__)


class JsonBookingStore:
    """
    Read-only booking store that loads bookings from a JSON file.

    The file holds either a list of bookings or a mapping with a
    ``bookings`` key. Each booking looks like::

        {"id": "a1", "title": "Kickoff", "start": "2025-03-10T09:00:00",
         "end": "2025-03-10T10:00:00", "status": "CONFIRMED",
         "clientName": "ACME"}

    Times without an offset are interpreted in the store's timezone.
    """

    def __init__(self, path: Path, timezone: str = "UTC"):
        self.path = Path(path)
        self.timezone = timezone
        self._bookings: Optional[List[BookedInterval]] = None

    def _load(self) -> List[BookedInterval]:
        """Load and parse bookings, caching the result."""
        if self._bookings is not None:
            return self._bookings

        if not self.path.exists():
            logger.info("Bookings file %s not found, starting empty", self.path)
            self._bookings = []
            return self._bookings

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BookingStoreError(f"Cannot read bookings from {self.path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("bookings", [])
        if not isinstance(data, list):
            raise BookingStoreError(f"Bookings file {self.path} must contain a list of bookings")

        self._bookings = list(self._parse_entries(data))
        logger.debug("Loaded %d bookings from %s", len(self._bookings), self.path)
        return self._bookings

    def _parse_entries(self, entries: Iterable[Dict[str, Any]]) -> Iterable[BookedInterval]:
        for index, entry in enumerate(entries):
            try:
                booking = BookedInterval(
                    start=pendulum.parse(entry["start"], tz=self.timezone),
                    end=pendulum.parse(entry["end"], tz=self.timezone),
                    status=BookingStatus(str(entry.get("status", "PENDING")).upper()),
                    booking_id=entry.get("id"),
                    title=entry.get("title"),
                    client_name=entry.get("clientName")
                )
            except (KeyError, TypeError, ValueError) as exc:
                # Skip invalid entries but keep the rest usable
                logger.warning("Skipping invalid booking #%d in %s: %s", index, self.path, exc)
            else:
                yield booking

    def get_bookings(
        self,
        start: DateTime,
        end: DateTime,
        statuses: Optional[Iterable[BookingStatus]] = None
    ) -> List[BookedInterval]:
        """
        Return bookings whose start lies within ``[start, end]``.

        Args:
            start: Lower bound for the booking start (inclusive)
            end: Upper bound for the booking start (inclusive)
            statuses: Restrict to these statuses; all statuses when None

        Returns:
            Bookings ordered by start time
        """
        wanted = set(statuses) if statuses is not None else None

        return sorted(
            (
                booking for booking in self._load()
                if start <= booking.start <= end
                and (wanted is None or booking.status in wanted)
            ),
            key=lambda booking: booking.start
        )
