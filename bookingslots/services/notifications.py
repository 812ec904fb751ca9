"""
Email text generation for booking confirmations and cancellations.
"""

from dataclasses import dataclass
from typing import List

from ..domain.records import Booking, MeetingTemplate, User

LOCATION_LABELS = {
    "zoom": "Zoom Video Call (link will be provided)",
    "google-meet": "Google Meet (link will be provided)",
    "ms-teams": "Microsoft Teams (link will be provided)",
    "phone": "Phone Call",
}

SIGNATURE = "Bookingslots"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    body: str


def location_label(location: str) -> str:
    """Human-readable label for a meeting location key."""
    return LOCATION_LABELS.get(location, location)


def _format_when(booking: Booking) -> tuple[str, str]:
    """Render the booking date and time range in the invitee's timezone."""
    start = booking.start_time.in_timezone(booking.timezone)
    end = booking.end_time.in_timezone(booking.timezone)

    date_str = start.format("dddd, MMMM D, YYYY")
    time_str = f"{start.format('hh:mm A')} - {end.format('hh:mm A')} ({booking.timezone})"
    return date_str, time_str


def booking_confirmation_emails(
    booking: Booking,
    template: MeetingTemplate,
    host: User,
) -> List[EmailMessage]:
    """
    Build the confirmation messages for a new booking.

    Returns:
        Two messages: one to the invitee, one to the host
    """
    date_str, time_str = _format_when(booking)

    invitee_email = EmailMessage(
        to=booking.invitee_email,
        subject=f"Confirmed: {template.name} with {host.full_name}",
        body=(
            f"Hello {booking.invitee_name},\n\n"
            f"Your meeting has been confirmed.\n\n"
            f"Meeting Details:\n"
            f"- Type: {template.name}\n"
            f"- Date: {date_str}\n"
            f"- Time: {time_str}\n"
            f"- Location: {location_label(template.location)}\n\n"
            f"Thank you,\n"
            f"{host.full_name}\n"
        ),
    )

    host_email = EmailMessage(
        to=host.email,
        subject=f"New Booking: {template.name} with {booking.invitee_name}",
        body=(
            f"Hello {host.first_name},\n\n"
            f"You have a new meeting scheduled.\n\n"
            f"Meeting Details:\n"
            f"- Type: {template.name}\n"
            f"- With: {booking.invitee_name} ({booking.invitee_email})\n"
            f"- Date: {date_str}\n"
            f"- Time: {time_str}\n"
            f"- Location: {location_label(template.location)}\n\n"
            f"Additional Information: {booking.additional_info or 'None provided'}\n\n"
            f"Thank you,\n"
            f"{SIGNATURE}\n"
        ),
    )

    return [invitee_email, host_email]


def cancellation_emails(
    booking: Booking,
    template: MeetingTemplate,
    host: User,
) -> List[EmailMessage]:
    """
    Build the cancellation messages for a booking.

    Returns:
        Two messages: one to the invitee, one to the host
    """
    date_str, time_str = _format_when(booking)

    invitee_email = EmailMessage(
        to=booking.invitee_email,
        subject=f"Cancelled: {template.name} with {host.full_name}",
        body=(
            f"Hello {booking.invitee_name},\n\n"
            f"Your meeting has been cancelled.\n\n"
            f"Cancelled Meeting Details:\n"
            f"- Type: {template.name}\n"
            f"- Date: {date_str}\n"
            f"- Time: {time_str}\n\n"
            f"Thank you,\n"
            f"{host.full_name}\n"
        ),
    )

    host_email = EmailMessage(
        to=host.email,
        subject=f"Cancelled Booking: {template.name} with {booking.invitee_name}",
        body=(
            f"Hello {host.first_name},\n\n"
            f"A meeting has been cancelled.\n\n"
            f"Cancelled Meeting Details:\n"
            f"- Type: {template.name}\n"
            f"- With: {booking.invitee_name} ({booking.invitee_email})\n"
            f"- Date: {date_str}\n"
            f"- Time: {time_str}\n\n"
            f"Thank you,\n"
            f"{SIGNATURE}\n"
        ),
    )

    return [invitee_email, host_email]
