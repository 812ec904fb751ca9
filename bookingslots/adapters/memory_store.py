"""
In-memory record store for hosts, templates, bookings and imported events.

Nothing here is durable: the store lives as long as the process does.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..config import AppConfig
from ..domain.records import Booking, CalendarEvent, MeetingTemplate, User

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Dict-backed storage with per-table id counters starting at 1.

    Getters return None for unknown ids; callers decide whether that is an
    error.
    """

    def __init__(self):
        self._users: Dict[int, User] = {}
        self._templates: Dict[int, MeetingTemplate] = {}
        self._bookings: Dict[int, Booking] = {}
        self._events: Dict[int, CalendarEvent] = {}
        self._next_ids = {"user": 1, "template": 1, "booking": 1, "event": 1}

    @classmethod
    def from_config(cls, config: AppConfig) -> "MemoryStore":
        """Create a store seeded with the hosts and templates of a config."""
        store = cls()

        for host in config.hosts:
            user = store.create_user(
                username=host.username,
                first_name=host.first_name,
                last_name=host.last_name,
                email=host.email,
                timezone=config.host_timezone(host),
                calendar_url=host.calendar_url,
                auto_sync=host.auto_sync,
            )
            for template in host.templates:
                store.create_template(user_id=user.id, **template.model_dump())

        logger.debug(
            "Seeded store with %d user(s) and %d template(s)",
            len(store._users),
            len(store._templates),
        )
        return store

    def _allocate_id(self, table: str) -> int:
        new_id = self._next_ids[table]
        self._next_ids[table] += 1
        return new_id

    # User operations

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def create_user(self, **fields: Any) -> User:
        user = User(id=self._allocate_id("user"), **fields)
        self._users[user.id] = user
        return user

    def update_user(self, user_id: int, **changes: Any) -> Optional[User]:
        user = self._users.get(user_id)
        if user is None:
            return None

        updated = replace(user, **changes)
        self._users[user_id] = updated
        return updated

    # Meeting template operations

    def get_template(self, template_id: int) -> Optional[MeetingTemplate]:
        return self._templates.get(template_id)

    def get_template_by_slug(self, username: str, slug: str) -> Optional[MeetingTemplate]:
        user = self.get_user_by_username(username)
        if user is None:
            return None

        for template in self._templates.values():
            if template.user_id == user.id and template.slug == slug:
                return template
        return None

    def list_templates(self, user_id: int) -> List[MeetingTemplate]:
        return [t for t in self._templates.values() if t.user_id == user_id]

    def create_template(self, **fields: Any) -> MeetingTemplate:
        template = MeetingTemplate(id=self._allocate_id("template"), **fields)
        self._templates[template.id] = template
        return template

    def update_template(self, template_id: int, **changes: Any) -> Optional[MeetingTemplate]:
        template = self._templates.get(template_id)
        if template is None:
            return None

        updated = replace(template, **changes)
        self._templates[template_id] = updated
        return updated

    def delete_template(self, template_id: int) -> bool:
        return self._templates.pop(template_id, None) is not None

    # Booking operations

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def list_bookings_for_template(self, template_id: int) -> List[Booking]:
        return [b for b in self._bookings.values() if b.template_id == template_id]

    def list_bookings_for_user(self, user_id: int) -> List[Booking]:
        template_ids = {t.id for t in self.list_templates(user_id)}
        return [b for b in self._bookings.values() if b.template_id in template_ids]

    def create_booking(self, **fields: Any) -> Booking:
        booking = Booking(id=self._allocate_id("booking"), **fields)
        self._bookings[booking.id] = booking
        return booking

    def update_booking_status(self, booking_id: int, status: str) -> Optional[Booking]:
        booking = self._bookings.get(booking_id)
        if booking is None:
            return None

        updated = replace(booking, status=status)
        self._bookings[booking_id] = updated
        return updated

    def upcoming_bookings(self, user_id: int, now: DateTime | None = None) -> List[Booking]:
        """Confirmed bookings starting after ``now``, soonest first."""
        now = now or pendulum.now("UTC")
        upcoming = [
            b for b in self.list_bookings_for_user(user_id)
            if b.start_time > now and b.status == "confirmed"
        ]
        return sorted(upcoming, key=lambda b: b.start_time)

    def past_bookings(self, user_id: int, now: DateTime | None = None) -> List[Booking]:
        """Bookings already started or completed, most recent first."""
        now = now or pendulum.now("UTC")
        past = [
            b for b in self.list_bookings_for_user(user_id)
            if b.start_time <= now or b.status == "completed"
        ]
        return sorted(past, key=lambda b: b.start_time, reverse=True)

    # Calendar event operations

    def list_calendar_events(
        self,
        user_id: int,
        start: DateTime,
        end: DateTime,
    ) -> List[CalendarEvent]:
        """Events of a user that intersect the [start, end) window."""
        return [
            e for e in self._events.values()
            if e.user_id == user_id and e.start_time < end and e.end_time > start
        ]

    def create_calendar_event(self, **fields: Any) -> CalendarEvent:
        event = CalendarEvent(id=self._allocate_id("event"), **fields)
        self._events[event.id] = event
        return event

    def delete_calendar_events(self, user_id: int) -> int:
        doomed = [event_id for event_id, e in self._events.items() if e.user_id == user_id]
        for event_id in doomed:
            del self._events[event_id]
        return len(doomed)
