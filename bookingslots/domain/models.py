"""
Domain models for time ranges, weekly availability and bookable slots.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import FrozenSet, Iterable

import pendulum
from pendulum import DateTime

from .overlap import overlaps


def parse_clock_time(value: str) -> time:
    """
    Parse a 24-hour ``"HH:MM"`` string into a time object.

    Raises:
        ValueError: If the string is not a valid 24-hour clock time
    """
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Time must use the HH:MM format, got '{value}'")

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time out of range: '{value}'")

    return time(hour=hour, minute=minute)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return (self.end - self.start).in_minutes()

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return overlaps(self.start, self.end, other)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BusyInterval(TimeRange):
    """
    A window in which the host cannot be booked.

    ``source`` records where the interval came from ("booking" or "calendar").
    """
    source: str = "booking"


@dataclass(frozen=True)
class Slot(TimeRange):
    """
    A bookable slot offered to invitees.
    """

    def to_iso8601(self) -> str:
        """Serialize the slot start as an ISO-8601 UTC timestamp."""
        return self.start.in_timezone("UTC").to_iso8601_string()

    def format_display(self, timezone: str | None = None) -> str:
        """
        Format the slot for display, optionally converted to another timezone.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM (TZ)
        """
        start = self.start.in_timezone(timezone) if timezone else self.start
        end = self.end.in_timezone(timezone) if timezone else self.end

        date_str = start.format("dddd, YYYY-MM-DD")
        time_str = f"{start.format('HH:mm')} - {end.format('HH:mm')}"

        return f"{date_str} | {time_str} ({start.timezone_name})"


@dataclass(frozen=True)
class WeeklyAvailability:
    """
    Recurring weekly pattern a host accepts meetings in.

    ``days_of_week`` uses ISO numbering: 1=Monday ... 7=Sunday.
    """
    days_of_week: FrozenSet[int]
    daily_start: time
    daily_end: time
    slot_duration_minutes: int

    @classmethod
    def from_template_fields(
        cls,
        days_of_week: Iterable[int],
        start_time: str,
        end_time: str,
        duration: int,
    ) -> "WeeklyAvailability":
        """Build availability from stored template fields ("HH:MM" strings)."""
        return cls(
            days_of_week=frozenset(days_of_week),
            daily_start=parse_clock_time(start_time),
            daily_end=parse_clock_time(end_time),
            slot_duration_minutes=duration,
        )

    def is_available_on(self, day: date) -> bool:
        """Check if a given day falls on one of the configured weekdays."""
        return day.isoweekday() in self.days_of_week

    def window_for_day(self, day: date, timezone: str) -> tuple[DateTime, DateTime]:
        """
        Get the (start, end) instants of the daily window on a specific day.

        The window is not validated; a start at or after the end simply
        yields an empty window.
        """
        start = pendulum.datetime(
            day.year, day.month, day.day,
            self.daily_start.hour, self.daily_start.minute,
            tz=timezone,
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            self.daily_end.hour, self.daily_end.minute,
            tz=timezone,
        )
        return start, end
