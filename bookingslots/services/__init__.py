"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .notifications import EmailMessage, booking_confirmation_emails, cancellation_emails
from .scheduling import CalendarFeedProtocol, MailerProtocol, SchedulingService

__all__ = [
    "EmailMessage",
    "booking_confirmation_emails",
    "cancellation_emails",
    "CalendarFeedProtocol",
    "MailerProtocol",
    "SchedulingService",
]
