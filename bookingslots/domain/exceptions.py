"""
Domain-specific exception hierarchy for the booking application.
"""


class BookingSlotsError(Exception):
    """Base class for all application-level errors."""


class NotFoundError(BookingSlotsError):
    """Raised when a user, template or booking does not exist."""


class InvalidRequestError(BookingSlotsError):
    """Raised when request data is malformed or incomplete."""


class SlotUnavailableError(BookingSlotsError):
    """Raised when a booking targets a slot that is no longer free."""


class CalendarImportError(BookingSlotsError):
    """Raised when an external calendar feed cannot be fetched or parsed."""
