"""
Shared fixtures.
"""

from typing import List

import pytest

from bookingslots.adapters.ical_client import FeedEvent
from bookingslots.adapters.mailer import LoggingMailer
from bookingslots.adapters.memory_store import MemoryStore
from bookingslots.config import AppConfig, HostConfig, TemplateConfig
from bookingslots.domain.exceptions import CalendarImportError
from bookingslots.services.scheduling import SchedulingService

HOST_TZ = "Europe/Berlin"


class StubFeedClient:
    """Minimal stub matching CalendarFeedProtocol."""

    def __init__(self, events: List[FeedEvent] | None = None, error: str | None = None):
        self.events = events or []
        self.error = error
        self.calls: List[str] = []
        self.timezones: List[str | None] = []

    def fetch_events(self, url: str, timezone: str | None = None) -> List[FeedEvent]:
        self.calls.append(url)
        self.timezones.append(timezone)
        if self.error:
            raise CalendarImportError(self.error)
        return list(self.events)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        timezone=HOST_TZ,
        hosts=[
            HostConfig(
                username="alice",
                first_name="Alice",
                last_name="Example",
                email="alice@example.com",
                calendar_url="https://calendar.example.com/alice.ics",
                templates=[
                    TemplateConfig(
                        name="30 Minute Meeting",
                        slug="30min",
                        duration=30,
                        days_of_week=[1, 2, 3, 4, 5],
                        start_time="09:00",
                        end_time="17:00",
                    ),
                    TemplateConfig(
                        name="Phone Screen",
                        slug="screen",
                        duration=60,
                        location="phone",
                        days_of_week=[1],
                        start_time="13:00",
                        end_time="15:00",
                        collect_phone=True,
                        notify_cancellation=False,
                    ),
                ],
            )
        ],
    )


@pytest.fixture
def feed_client() -> StubFeedClient:
    return StubFeedClient()


@pytest.fixture
def mailer() -> LoggingMailer:
    return LoggingMailer()


@pytest.fixture
def store(config) -> MemoryStore:
    return MemoryStore.from_config(config)


@pytest.fixture
def service(store, feed_client, mailer) -> SchedulingService:
    return SchedulingService(store=store, feed_client=feed_client, mailer=mailer)
