"""
Adapters layer - record storage, calendar feeds and outgoing mail.
"""

from .ical_client import CalendarFeedClient, FeedEvent
from .mailer import LoggingMailer
from .memory_store import MemoryStore
from .mock_ical_client import MockCalendarFeedClient

__all__ = ["CalendarFeedClient", "FeedEvent", "LoggingMailer", "MemoryStore", "MockCalendarFeedClient"]
