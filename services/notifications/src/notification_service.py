"""
Loads recipients and subjects, builds notifications and hands them to the dispatcher.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from shared.database.supabase_client import get_supabase_client
from shared.models.bill import BillStatus
from shared.queue.rq_client import NOTIFICATIONS_QUEUE, default_retry, get_queue
from shared.utils.config import Settings, get_settings

from services.engagement.src.engagement_repository import EngagementRepository
from services.lifecycle.src.bills_repository import BillsRepository

from .channels import InAppChannel, MailChannel, SmsChannel
from .dispatcher import DispatchResult, NotificationDispatcher
from .exceptions import DeliveryError
from .notifications import (
    BillParticipationClosed,
    BillParticipationOpened,
    NewEngagementMessage,
    Notification,
)
from .recipients_repository import RecipientsRepository

logger = logging.getLogger(__name__)


def build_default_dispatcher(supabase_client, settings: Optional[Settings] = None) -> NotificationDispatcher:
    settings = settings or get_settings()
    channels = [MailChannel(settings), SmsChannel(settings), InAppChannel(supabase_client)]
    return NotificationDispatcher({channel.name: channel for channel in channels})


class NotificationService:
    """Turns domain events into per-recipient notification deliveries."""

    def __init__(
        self,
        dispatcher: Optional[NotificationDispatcher] = None,
        recipients=None,
        bills=None,
        engagements=None,
        queue=None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        supabase = None
        if dispatcher is None or recipients is None or bills is None or engagements is None:
            supabase = get_supabase_client()
        self.dispatcher = dispatcher or build_default_dispatcher(supabase, self.settings)
        self.recipients = recipients or RecipientsRepository(supabase)
        self.bills = bills or BillsRepository(supabase)
        self.engagements = engagements or EngagementRepository(supabase)
        self._queue = queue

    @property
    def queue(self):
        if self._queue is None:
            self._queue = get_queue(NOTIFICATIONS_QUEUE)
        return self._queue

    def notification_for_status(self, bill, new_status: str) -> Optional[Notification]:
        if new_status == BillStatus.OPEN_FOR_PARTICIPATION:
            return BillParticipationOpened(bill, self.settings.app_url)
        if new_status == BillStatus.CLOSED:
            return BillParticipationClosed(bill, self.settings.app_url)
        return None

    def build_notification(self, kind: str, subject_id: int) -> Notification:
        """Rebuild a notification from its kind and subject id (for queued retries)."""
        if kind in (BillParticipationOpened.kind, BillParticipationClosed.kind):
            bill = self.bills.get_bill(subject_id)
            if bill is None:
                raise LookupError(f"Bill {subject_id} not found")
            cls = BillParticipationOpened if kind == BillParticipationOpened.kind else BillParticipationClosed
            return cls(bill, self.settings.app_url)
        if kind == NewEngagementMessage.kind:
            return self._engagement_notification(subject_id)
        raise ValueError(f"Unknown notification kind: {kind}")

    def send_bill_status_notifications(self, bill_id: int, old_status: str, new_status: str) -> int:
        """
        Notify bill followers about a status change.

        Returns:
            Number of recipients the notification was dispatched to
        """
        bill = self.bills.get_bill(bill_id)
        if bill is None:
            logger.warning(f"Bill {bill_id} no longer exists; no status notifications sent")
            return 0
        notification = self.notification_for_status(bill, new_status)
        if notification is None:
            logger.debug(f"No notification for bill {bill_id} {old_status} -> {new_status}")
            return 0

        notified = 0
        for chunk in self.recipients.iter_bill_followers(self.settings.notification_chunk_size):
            results = self.dispatcher.send_to_many(chunk, notification)
            self._queue_retries(notification, results)
            notified += len(results)

        logger.info(
            f"Sent {notification.kind} for bill {bill_id} ({bill.bill_number}) to {notified} follower(s)"
        )
        return notified

    def notify_engagement_recipient(self, engagement_id: int) -> Optional[DispatchResult]:
        notification = self._engagement_notification(engagement_id)
        recipient = self.recipients.get_user(notification.engagement.recipient_id)
        if recipient is None:
            logger.warning(
                f"Recipient {notification.engagement.recipient_id} of engagement {engagement_id} not found"
            )
            return None
        result = self.dispatcher.send(recipient, notification)
        self._queue_retries(notification, [result])
        logger.info(f"Notified user {recipient.id} about engagement {engagement_id}")
        return result

    def deliver(self, kind: str, subject_id: int, recipient_id: int, channel: str) -> DispatchResult:
        """
        Re-attempt one channel for one recipient.

        Raises:
            DeliveryError: if the channel failed again (so the queue retries it)
        """
        recipient = self.recipients.get_user(recipient_id)
        if recipient is None:
            raise LookupError(f"User {recipient_id} not found")
        notification = self.build_notification(kind, subject_id)
        result = self.dispatcher.send(recipient, notification, only=[channel])
        if not result.ok:
            errors = "; ".join(r.error or "unknown error" for r in result.results)
            raise DeliveryError(channel, f"redelivery of {kind} to user {recipient_id} failed: {errors}")
        return result

    def _engagement_notification(self, engagement_id: int) -> NewEngagementMessage:
        engagement = self.engagements.get_engagement(engagement_id)
        if engagement is None:
            raise LookupError(f"Engagement {engagement_id} not found")
        sender = self.recipients.get_user(engagement.sender_id)
        if sender is None:
            raise LookupError(f"Sender {engagement.sender_id} of engagement {engagement_id} not found")
        bill = self.bills.get_bill(engagement.bill_id) if engagement.bill_id else None
        return NewEngagementMessage(engagement, sender, self.settings.app_url, bill=bill)

    def _queue_retries(self, notification: Notification, results: List[DispatchResult]) -> None:
        """Queue one delivery job per failed (recipient, channel) pair."""
        from .jobs import abandon_retries_on_configuration_error, deliver_notification

        delay = timedelta(seconds=(self.settings.job_retry_intervals or [0])[0])
        for result in results:
            for channel in result.failed_channels:
                self.queue.enqueue_in(
                    delay,
                    deliver_notification,
                    notification.kind,
                    notification.subject_id,
                    result.recipient_id,
                    channel,
                    retry=default_retry(),
                    on_failure=abandon_retries_on_configuration_error,
                )
                logger.info(
                    f"Queued redelivery of {notification.kind} via {channel} to user {result.recipient_id}"
                )
