"""Notification service: channels (mail, SMS, in-app), dispatcher and delivery jobs."""

from .channels import InAppChannel, MailChannel, NotificationChannel, SmsChannel
from .dispatcher import DispatchResult, NotificationDispatcher
from .exceptions import ConfigurationError, DeliveryError
from .notification_service import NotificationService

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "DispatchResult",
    "InAppChannel",
    "MailChannel",
    "NotificationChannel",
    "NotificationDispatcher",
    "NotificationService",
    "SmsChannel",
]
