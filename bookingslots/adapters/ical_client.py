"""
iCalendar feed client for importing a host's external busy times.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

import pendulum
import requests
from icalendar import Calendar
from pendulum import DateTime

from ..domain.exceptions import CalendarImportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedEvent:
    """A single event read from an external calendar feed."""
    summary: str
    start: DateTime
    end: DateTime
    uid: Optional[str] = None


class CalendarFeedClient:
    """
    Fetches and parses ``.ics`` feeds over HTTP.

    Only VEVENT components with both DTSTART and DTEND are imported.
    """

    def __init__(self, timezone: str = "UTC", timeout: int = 30):
        """
        Initialize the feed client.

        Args:
            timezone: IANA timezone used for floating times and all-day events
            timeout: HTTP timeout in seconds
        """
        self.timezone = timezone
        self.timeout = timeout

    def fetch_events(self, url: str, timezone: Optional[str] = None) -> List[FeedEvent]:
        """
        Download a feed and return its events.

        Args:
            url: Feed URL
            timezone: Timezone of the feed owner; defaults to the client timezone

        Raises:
            CalendarImportError: If the feed cannot be fetched or parsed
        """
        logger.info("Fetching calendar feed from %s", url)

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise CalendarImportError(f"Failed to fetch calendar feed: {e}") from e

        return self.parse_feed(response.content, timezone)

    def parse_feed(self, payload: bytes | str, timezone: Optional[str] = None) -> List[FeedEvent]:
        """
        Parse raw iCalendar data into feed events.

        Raises:
            CalendarImportError: If the payload is not valid iCalendar data
        """
        try:
            calendar = Calendar.from_ical(payload)
        except ValueError as e:
            raise CalendarImportError(f"Failed to parse calendar feed: {e}") from e

        tz = timezone or self.timezone
        events: List[FeedEvent] = []

        for component in calendar.walk("VEVENT"):
            dtstart = component.get("DTSTART")
            dtend = component.get("DTEND")
            summary = str(component.get("SUMMARY") or "Busy")

            if dtstart is None or dtend is None:
                logger.debug("Skipping event without start/end: %s", summary)
                continue

            start = self._to_datetime(dtstart.dt, tz)
            end = self._to_datetime(dtend.dt, tz)

            if end <= start:
                logger.warning("Skipping event with non-positive duration: %s", summary)
                continue

            uid = component.get("UID")
            events.append(
                FeedEvent(
                    summary=summary,
                    start=start,
                    end=end,
                    uid=str(uid) if uid is not None else None,
                )
            )

        logger.info("Parsed %d event(s) from calendar feed", len(events))
        return events

    @staticmethod
    def _to_datetime(value: date | datetime, tz: str) -> DateTime:
        """
        Convert an iCalendar date or datetime to a pendulum DateTime.

        All-day dates start at midnight and floating times are read in ``tz``.
        """
        if isinstance(value, datetime):
            return pendulum.instance(value, tz=tz).in_timezone(tz)

        return pendulum.datetime(value.year, value.month, value.day, tz=tz)
