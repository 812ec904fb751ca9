"""
Outgoing mail adapter.

Messages are logged and kept in memory instead of being delivered.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..services.notifications import EmailMessage

logger = logging.getLogger(__name__)


class LoggingMailer:
    """Mailer that records every message it is asked to send."""

    def __init__(self, sender: str = "notifications@bookingslots.local"):
        self.sender = sender
        self.sent: List[EmailMessage] = []

    def send(self, message: EmailMessage) -> bool:
        logger.info("Sending email from %s to %s: %s", self.sender, message.to, message.subject)
        logger.debug("Email body:\n%s", message.body)
        self.sent.append(message)
        return True
