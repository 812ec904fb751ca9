"""
Application services for offering slots and managing bookings.

The service coordinates the record store, the calendar feed adapter and the
mailer, and delegates the availability calculation to the domain-level
``SlotGenerator``. Collaborators are described by simple protocols so tests
can plug in stubs.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..adapters.ical_client import FeedEvent
from ..adapters.memory_store import MemoryStore
from ..config import validate_timezone_name
from ..domain.exceptions import (
    BookingSlotsError,
    InvalidRequestError,
    NotFoundError,
    SlotUnavailableError,
)
from ..domain.models import BusyInterval, Slot
from ..domain.records import BOOKING_STATUSES, Booking, MeetingTemplate, User
from ..domain.slot_generator import SlotGenerator, merge_busy_intervals
from .notifications import EmailMessage, booking_confirmation_emails, cancellation_emails

logger = logging.getLogger(__name__)

IMPORTED_EVENTS_DAYS = 30


class CalendarFeedProtocol(Protocol):
    """Protocol describing the calendar feed behaviour needed by the service."""

    def fetch_events(self, url: str, timezone: Optional[str] = None) -> List[FeedEvent]:
        """Return the events published by a feed, anchored in ``timezone``."""


class MailerProtocol(Protocol):
    """Protocol describing the outgoing mail behaviour needed by the service."""

    def send(self, message: EmailMessage) -> bool:
        """Send a single message."""


class SchedulingService:
    """
    Orchestrates slot lookup, booking creation and calendar sync.
    """

    def __init__(
        self,
        store: MemoryStore,
        feed_client: CalendarFeedProtocol,
        mailer: MailerProtocol,
    ) -> None:
        self._store = store
        self._feed_client = feed_client
        self._mailer = mailer

    # Lookups

    def get_host(self, user_id: int) -> User:
        user = self._store.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def get_host_by_username(self, username: str) -> User:
        user = self._store.get_user_by_username(username)
        if user is None:
            raise NotFoundError(f"User not found: {username}")
        return user

    def get_template(self, username: str, slug: str) -> MeetingTemplate:
        template = self._store.get_template_by_slug(username, slug)
        if template is None:
            raise NotFoundError(f"Template not found: {username}/{slug}")
        return template

    def list_templates(self, username: str) -> List[MeetingTemplate]:
        host = self.get_host_by_username(username)
        return self._store.list_templates(host.id)

    # Availability

    def available_slots(
        self,
        username: str,
        slug: str,
        day: date,
        display_timezone: Optional[str] = None,
    ) -> List[Slot]:
        """
        Compute the bookable slots of a template on one day.

        Slots are computed in the host's timezone; ``display_timezone`` only
        changes how the returned instants are expressed.
        """
        if display_timezone is not None:
            self._validate_timezone(display_timezone)

        template = self.get_template(username, slug)
        host = self.get_host(template.user_id)

        busy = self.collect_busy_intervals(host, day)
        generator = SlotGenerator(template.weekly_availability(), timezone=host.timezone)
        slots = generator.generate(day, busy)

        logger.debug(
            "%d slot(s) for %s/%s on %s against %d busy interval(s)",
            len(slots), username, slug, day, len(busy),
        )

        if display_timezone is None:
            return slots

        return [
            Slot(
                start=slot.start.in_timezone(display_timezone),
                end=slot.end.in_timezone(display_timezone),
            )
            for slot in slots
        ]

    def available_slot_strings(
        self,
        username: str,
        slug: str,
        day: date,
        display_timezone: Optional[str] = None,
    ) -> List[str]:
        """Slot starts as ISO-8601 timestamps, ready for a JSON response."""
        return [
            slot.to_iso8601()
            for slot in self.available_slots(username, slug, day, display_timezone)
        ]

    def collect_busy_intervals(self, host: User, day: date) -> List[BusyInterval]:
        """
        Gather the host's busy intervals touching a day.

        Non-cancelled bookings on any of the host's templates are combined
        with the host's imported calendar events.
        """
        day_start = pendulum.datetime(day.year, day.month, day.day, tz=host.timezone)
        day_end = day_start.add(days=1)

        bookings = [
            b.to_busy_interval()
            for b in self._store.list_bookings_for_user(host.id)
            if b.status != "cancelled" and b.start_time < day_end and b.end_time > day_start
        ]
        events = [
            e.to_busy_interval()
            for e in self._store.list_calendar_events(host.id, day_start, day_end)
        ]

        return merge_busy_intervals(bookings, events)

    # Bookings

    def create_booking(
        self,
        *,
        template_id: int,
        invitee_name: str,
        invitee_email: str,
        start: DateTime,
        timezone: str,
        invitee_phone: Optional[str] = None,
        additional_info: Optional[str] = None,
    ) -> Booking:
        """
        Book a slot and notify both parties.

        Raises:
            NotFoundError: If the template or its host does not exist
            InvalidRequestError: If invitee details are malformed
            SlotUnavailableError: If the start is not a free slot
        """
        template = self._store.get_template(template_id)
        if template is None:
            raise NotFoundError(f"Template not found: {template_id}")
        host = self.get_host(template.user_id)

        if not invitee_name.strip():
            raise InvalidRequestError("Invitee name is required")
        if "@" not in invitee_email:
            raise InvalidRequestError(f"Invalid invitee email: '{invitee_email}'")
        if template.collect_phone and not invitee_phone:
            raise InvalidRequestError("A phone number is required for this meeting")
        self._validate_timezone(timezone)

        local_start = start.in_timezone(host.timezone)
        open_slots = self.available_slots(host.username, template.slug, local_start.date())
        if not any(slot.start == local_start for slot in open_slots):
            raise SlotUnavailableError(
                f"{local_start.to_iso8601_string()} is not available for {template.name}"
            )

        booking = self._store.create_booking(
            template_id=template.id,
            invitee_name=invitee_name.strip(),
            invitee_email=invitee_email.strip(),
            invitee_phone=invitee_phone,
            start_time=local_start,
            end_time=local_start.add(minutes=template.duration),
            timezone=timezone,
            additional_info=additional_info,
        )
        logger.info("Created booking %d for %s/%s", booking.id, host.username, template.slug)

        if template.notify_on_booking:
            self._send_all(booking_confirmation_emails(booking, template, host))

        return booking

    def update_booking_status(self, booking_id: int, status: str) -> Booking:
        """
        Change a booking's status, sending cancellation notices when needed.

        Raises:
            InvalidRequestError: If the status is unknown
            NotFoundError: If the booking does not exist
        """
        if status not in BOOKING_STATUSES:
            raise InvalidRequestError(f"Invalid status: '{status}'")

        booking = self._store.update_booking_status(booking_id, status)
        if booking is None:
            raise NotFoundError(f"Booking not found: {booking_id}")

        if status == "cancelled":
            template = self._store.get_template(booking.template_id)
            if template is not None and template.notify_cancellation:
                host = self._store.get_user(template.user_id)
                if host is not None:
                    self._send_all(cancellation_emails(booking, template, host))

        return booking

    def dashboard(self, user_id: int, now: DateTime | None = None) -> Dict[str, list]:
        """
        Upcoming and past bookings of a host, plus the imported calendar
        events of the next 30 days (soonest first).
        """
        self.get_host(user_id)
        now = now or pendulum.now("UTC")
        events = self._store.list_calendar_events(user_id, now, now.add(days=IMPORTED_EVENTS_DAYS))
        return {
            "upcoming": self._store.upcoming_bookings(user_id, now),
            "past": self._store.past_bookings(user_id, now),
            "imported_events": sorted(events, key=lambda e: e.start_time),
        }

    # Calendar import

    def sync_calendar(self, user_id: int) -> int:
        """
        Replace a host's imported events with the current feed contents.

        Raises:
            NotFoundError: If the host does not exist
            InvalidRequestError: If the host has no calendar URL
            CalendarImportError: If the feed cannot be fetched or parsed
        """
        host = self.get_host(user_id)
        if not host.calendar_url:
            raise InvalidRequestError("No calendar URL provided")

        events = self._feed_client.fetch_events(host.calendar_url, timezone=host.timezone)

        removed = self._store.delete_calendar_events(host.id)
        for event in events:
            self._store.create_calendar_event(
                user_id=host.id,
                external_id=event.uid,
                summary=event.summary,
                start_time=event.start,
                end_time=event.end,
            )

        logger.info(
            "Synced %d event(s) for %s (replaced %d)",
            len(events), host.username, removed,
        )
        return len(events)

    def test_feed_url(self, url: str) -> int:
        """Fetch a feed without storing it and report how many events it has."""
        if not url:
            raise InvalidRequestError("No URL provided")
        return len(self._feed_client.fetch_events(url))

    def update_host(self, user_id: int, **changes) -> User:
        """
        Update a host; a new calendar URL triggers a sync when auto-sync is on.

        A failed sync is logged and does not undo the update.
        """
        old = self.get_host(user_id)
        if "timezone" in changes:
            self._validate_timezone(changes["timezone"])

        user = self._store.update_user(user_id, **changes)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")

        new_url = changes.get("calendar_url")
        if new_url and new_url != old.calendar_url and user.auto_sync:
            try:
                self.sync_calendar(user_id)
            except BookingSlotsError:
                logger.exception("Error syncing calendar after URL update for %s", user.username)

        return user

    def _send_all(self, messages: List[EmailMessage]) -> None:
        for message in messages:
            self._mailer.send(message)

    @staticmethod
    def _validate_timezone(value: str) -> None:
        try:
            validate_timezone_name(value)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc
