"""In-memory notification sender for local development and tests."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from loginn.core.notification_sender import NotificationSender
from loginn.exceptions import UpstreamUnavailableError

_TOKEN_PATTERN = re.compile(r"token=([0-9a-f]{64})")


@dataclass
class SentEmail:
    to_address: str
    subject: str
    html_body: str

    @property
    def token(self) -> Optional[str]:
        """Single-use token embedded in the email's link, if any."""
        match = _TOKEN_PATTERN.search(self.html_body)
        return match.group(1) if match else None


class MockNotificationSender(NotificationSender):
    """Records outgoing email in ``outbox`` instead of sending it.

    Set ``fail_next`` to make the next send raise UpstreamUnavailableError.
    """

    def __init__(self) -> None:
        self.outbox: List[SentEmail] = []
        self.fail_next = False

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        if self.fail_next:
            self.fail_next = False
            raise UpstreamUnavailableError("Mock mailer unavailable", "send_email")
        self.outbox.append(SentEmail(to_address, subject, html_body))

    def last_to(self, to_address: str) -> Optional[SentEmail]:
        for email in reversed(self.outbox):
            if email.to_address == to_address:
                return email
        return None
