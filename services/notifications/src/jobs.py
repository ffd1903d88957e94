"""
Queue entrypoints for notification delivery.
"""
import logging
from typing import Optional

from .exceptions import ConfigurationError
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


def abandon_retries_on_configuration_error(job, connection, type, value, traceback):
    """
    RQ on_failure hook: a misconfigured channel will not fix itself, so skip
    the remaining retries and let the job go straight to the failed registry.
    """
    if isinstance(value, ConfigurationError):
        logger.critical(f"Job {job.id} failed on configuration error, not retrying: {value}")
        job.retries_left = 0


def send_bill_status_notifications(
    bill_id: int,
    old_status: str,
    new_status: str,
    service: Optional[NotificationService] = None,
) -> int:
    service = service or NotificationService()
    try:
        return service.send_bill_status_notifications(bill_id, old_status, new_status)
    except Exception as e:
        logger.error(f"Failed to send status notifications for bill {bill_id}: {e}", exc_info=True)
        raise


def notify_engagement_recipient(engagement_id: int, service: Optional[NotificationService] = None) -> None:
    service = service or NotificationService()
    try:
        service.notify_engagement_recipient(engagement_id)
    except Exception as e:
        logger.error(f"Failed to notify recipient about engagement {engagement_id}: {e}", exc_info=True)
        raise


def deliver_notification(
    kind: str,
    subject_id: int,
    recipient_id: int,
    channel: str,
    service: Optional[NotificationService] = None,
) -> None:
    service = service or NotificationService()
    service.deliver(kind, subject_id, recipient_id, channel)
    logger.info(f"Redelivered {kind} via {channel} to user {recipient_id}")
