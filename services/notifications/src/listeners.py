"""
Event listeners that hand notification work to the queue.
"""
import logging

from shared.events.events import BillStatusChanged, MessageSent
from shared.queue.rq_client import NOTIFICATIONS_QUEUE, default_retry, get_queue

from .jobs import (
    abandon_retries_on_configuration_error,
    notify_engagement_recipient,
    send_bill_status_notifications,
)

logger = logging.getLogger(__name__)


class NotificationListeners:
    """Queues notification jobs for domain events."""

    def __init__(self, queue=None):
        self._queue = queue

    @property
    def queue(self):
        if self._queue is None:
            self._queue = get_queue(NOTIFICATIONS_QUEUE)
        return self._queue

    def on_bill_status_changed(self, event: BillStatusChanged) -> None:
        job = self.queue.enqueue(
            send_bill_status_notifications,
            event.bill.id,
            event.old_status,
            event.new_status,
            retry=default_retry(),
            on_failure=abandon_retries_on_configuration_error,
        )
        logger.info(
            f"Queued status notifications for bill {event.bill.id} "
            f"({event.old_status} -> {event.new_status}), job {job.id}"
        )

    def on_message_sent(self, event: MessageSent) -> None:
        job = self.queue.enqueue(
            notify_engagement_recipient,
            event.engagement.id,
            retry=default_retry(),
            on_failure=abandon_retries_on_configuration_error,
        )
        logger.info(f"Queued engagement notification for engagement {event.engagement.id}, job {job.id}")
