"""AWS SES implementation of NotificationSender."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from loginn.aws import create_client
from loginn.core.notification_sender import NotificationSender
from loginn.exceptions import UpstreamUnavailableError

log = structlog.get_logger()


class SesNotificationSender(NotificationSender):
    """Sends HTML email through SES.

    Args:
        source: Verified sender address
        region: SES region
        endpoint_url: Custom endpoint URL for LocalStack
        client: Preconfigured boto3 SES client
    """

    def __init__(
        self,
        source: str,
        region: str,
        endpoint_url: Optional[str] = None,
        client: Any = None,
    ):
        self.source = source
        self._client = client or create_client("ses", region, endpoint_url)

    async def send(self, to_address: str, subject: str, html_body: str) -> None:
        try:
            resp = self._client.send_email(
                Source=self.source,
                Destination={"ToAddresses": [to_address]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {"Html": {"Data": html_body, "Charset": "UTF-8"}},
                },
            )
        except (ClientError, BotoCoreError) as e:
            log.error("ses_send_error", error=str(e), subject=subject)
            raise UpstreamUnavailableError(f"Failed to send email: {e}", "send_email") from e
        log.info("ses_email_sent", message_id=resp.get("MessageId"), subject=subject)
