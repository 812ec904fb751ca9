"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import BusyInterval, Slot, TimeRange, WeeklyAvailability, parse_clock_time
from .overlap import overlaps
from .slot_generator import SlotGenerator, generate_slots, merge_busy_intervals

__all__ = [
    "BusyInterval",
    "Slot",
    "TimeRange",
    "WeeklyAvailability",
    "parse_clock_time",
    "overlaps",
    "SlotGenerator",
    "generate_slots",
    "merge_busy_intervals",
]
