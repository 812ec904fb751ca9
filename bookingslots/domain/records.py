"""
Stored records: hosts, meeting templates, bookings and imported events.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pendulum
from pendulum import DateTime

from .models import BusyInterval, WeeklyAvailability

BOOKING_STATUSES = ("confirmed", "cancelled", "completed")


@dataclass
class User:
    """A host who offers meeting templates."""
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    timezone: str = "America/New_York"
    calendar_url: Optional[str] = None
    auto_sync: bool = True
    created_at: DateTime = field(default_factory=pendulum.now)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class MeetingTemplate:
    """
    A bookable meeting type with its weekly availability.

    ``start_time``/``end_time`` are 24-hour "HH:MM" strings.
    """
    id: int
    user_id: int
    name: str
    slug: str
    duration: int
    days_of_week: List[int]
    start_time: str
    end_time: str
    description: Optional[str] = None
    location: str = "zoom"
    buffer_before: int = 0
    buffer_after: int = 0
    collect_phone: bool = False
    notify_on_booking: bool = True
    notify_cancellation: bool = True
    notify_reminder: bool = True
    is_default: bool = False
    created_at: DateTime = field(default_factory=pendulum.now)

    def weekly_availability(self) -> WeeklyAvailability:
        """Convert the stored fields into the domain availability pattern."""
        return WeeklyAvailability.from_template_fields(
            days_of_week=self.days_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            duration=self.duration,
        )


@dataclass
class Booking:
    """An invitee's reservation of a slot."""
    id: int
    template_id: int
    invitee_name: str
    invitee_email: str
    start_time: DateTime
    end_time: DateTime
    timezone: str
    status: str = "confirmed"
    invitee_phone: Optional[str] = None
    additional_info: Optional[str] = None
    created_at: DateTime = field(default_factory=pendulum.now)

    def to_busy_interval(self) -> BusyInterval:
        return BusyInterval(start=self.start_time, end=self.end_time, source="booking")


@dataclass
class CalendarEvent:
    """An event imported from a host's external calendar feed."""
    id: int
    user_id: int
    start_time: DateTime
    end_time: DateTime
    summary: Optional[str] = None
    external_id: Optional[str] = None
    created_at: DateTime = field(default_factory=pendulum.now)
    last_synced: DateTime = field(default_factory=pendulum.now)

    def to_busy_interval(self) -> BusyInterval:
        return BusyInterval(start=self.start_time, end=self.end_time, source="calendar")
