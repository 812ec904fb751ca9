"""
Core business logic for generating bookable time slots.

Pure domain logic without any external dependencies (no API calls, no
storage, no I/O). Callers load the weekly pattern and busy intervals and
pass them in as read-only snapshots.
"""

from datetime import date
from typing import Iterable, List, Sequence

from .models import BusyInterval, Slot, WeeklyAvailability
from .overlap import overlaps


def merge_busy_intervals(*sources: Iterable[BusyInterval]) -> List[BusyInterval]:
    """
    Combine busy intervals from several sources into one list.

    No deduplication happens here: a double-imported event is tested twice
    but cannot change the outcome of the overlap filter.
    """
    merged: List[BusyInterval] = []
    for source in sources:
        merged.extend(source)
    return merged


class SlotGenerator:
    """
    Enumerates duration-aligned slots of a day and drops the busy ones.

    Algorithm:
    1. Skip days that are not part of the weekly pattern
    2. Build the daily window in the host timezone
    3. Step through the window in slot-duration increments
    4. Keep candidates that collide with no busy interval
    """

    def __init__(self, weekly: WeeklyAvailability, timezone: str = "UTC"):
        self.weekly = weekly
        self.timezone = timezone

    def generate(self, day: date, busy: Sequence[BusyInterval] = ()) -> List[Slot]:
        """
        Generate the free slots of a single day.

        Args:
            day: Calendar day to generate slots for
            busy: Busy intervals from bookings and imported calendars

        Returns:
            Slots in ascending chronological order
        """
        if not self.weekly.is_available_on(day) or self.weekly.slot_duration_minutes <= 0:
            return []

        window_start, window_end = self.weekly.window_for_day(day, self.timezone)
        duration = self.weekly.slot_duration_minutes

        slots: List[Slot] = []
        current = window_start

        while current.add(minutes=duration) <= window_end:
            slot_end = current.add(minutes=duration)

            if not any(overlaps(current, slot_end, interval) for interval in busy):
                slots.append(Slot(start=current, end=slot_end))

            current = slot_end

        return slots


def generate_slots(
    day: date,
    weekly: WeeklyAvailability,
    busy: Sequence[BusyInterval] = (),
    timezone: str = "UTC",
) -> List[Slot]:
    """Convenience wrapper around ``SlotGenerator.generate``."""
    return SlotGenerator(weekly, timezone=timezone).generate(day, busy)
