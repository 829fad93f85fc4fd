"""Abstract notification sender interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class NotificationSender(ABC):
    """Sends transactional email.

    Delivery is fire-and-forget, but a failure to hand the message to the
    mail service is reported synchronously.

    Implementations:
        - SesNotificationSender: AWS SES
        - MockNotificationSender: In-memory outbox for testing
    """

    @abstractmethod
    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        """Queue an HTML email.

        Raises:
            UpstreamUnavailableError: If the mail service rejects or fails
        """
