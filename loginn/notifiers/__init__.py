"""Notification sender implementations."""

from loginn.notifiers.mock import MockNotificationSender
from loginn.notifiers.ses import SesNotificationSender

__all__ = ["MockNotificationSender", "SesNotificationSender"]
