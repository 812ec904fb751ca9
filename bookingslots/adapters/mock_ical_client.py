"""
Mock calendar feed client for running without network access.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum

from ..domain.exceptions import CalendarImportError
from ..domain.models import parse_clock_time
from .ical_client import FeedEvent

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_calendar_events.json"


class MockCalendarFeedClient:
    """
    Mock client that serves events from a JSON file instead of a feed URL.

    Each entry names its ``feed`` (matched against the requested URL), a
    ``day_offset`` relative to ``today`` and "HH:MM" start/end times, so the
    sample data always lands in the coming week.
    """

    def __init__(
        self,
        timezone: str = "UTC",
        data_file: Optional[Path] = None,
        today: Optional[date] = None,
    ):
        self.timezone = timezone
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.today = today
        self._load_calendar_data()

    def _load_calendar_data(self):
        """Load mock calendar data from JSON file."""
        if not self.data_file.exists():
            logger.warning("Mock calendar file %s not found; serving no events", self.data_file)
            self.calendar_events: List[Dict[str, Any]] = []
            return

        with open(self.data_file, "r", encoding="utf-8") as f:
            self.calendar_events = json.load(f)

    def fetch_events(self, url: str, timezone: Optional[str] = None) -> List[FeedEvent]:
        """
        Return the mock events registered for a feed URL.

        Times are anchored in ``timezone`` (the feed owner's), falling back
        to the client timezone.

        Raises:
            CalendarImportError: If the URL has no mock data
        """
        entries = [e for e in self.calendar_events if e.get("feed") == url]
        if not entries:
            raise CalendarImportError(f"No mock calendar data for feed: {url}")

        tz = timezone or self.timezone
        today = self.today or pendulum.today(tz).date()
        base = pendulum.date(today.year, today.month, today.day)
        events: List[FeedEvent] = []

        for entry in entries:
            try:
                day = base.add(days=int(entry.get("day_offset", 0)))
                start_time = parse_clock_time(entry["start"])
                end_time = parse_clock_time(entry["end"])
            except (KeyError, ValueError) as e:
                logger.warning("Skipping invalid mock event %s: %s", entry.get("uid"), e)
                continue

            summary = entry.get("summary", "Busy")
            start = pendulum.datetime(
                day.year, day.month, day.day, start_time.hour, start_time.minute, tz=tz,
            )
            end = pendulum.datetime(
                day.year, day.month, day.day, end_time.hour, end_time.minute, tz=tz,
            )

            if end <= start:
                logger.warning("Skipping event with non-positive duration: %s", summary)
                continue

            events.append(FeedEvent(summary=summary, start=start, end=end, uid=entry.get("uid")))

        return events
