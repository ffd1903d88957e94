"""
Citizen-to-legislator messages and citizen submissions.

Both write the record first and then emit an event; follow-up work
(notifications, analytics) happens in queued jobs.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from shared.database.supabase_client import get_supabase_client
from shared.events.dispatcher import EventDispatcher
from shared.events.events import MessageSent, SubmissionCreated
from shared.models.engagement import CitizenEngagement
from shared.models.submission import Submission
from shared.models.user import User, UserRole

from .engagement_repository import EngagementRepository

logger = logging.getLogger(__name__)


class EngagementError(ValueError):
    """The engagement is not allowed between these users."""


class EngagementService:

    def __init__(
        self,
        repository: Optional[EngagementRepository] = None,
        events: Optional[EventDispatcher] = None,
    ):
        self.repository = repository or EngagementRepository(get_supabase_client())
        self.events = events or EventDispatcher()

    def send_message(
        self,
        sender: User,
        recipient: User,
        subject: str,
        message: str,
        bill_id: Optional[int] = None,
        submission_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> CitizenEngagement:
        """
        Store a message from a citizen to a legislator and emit MessageSent.

        Raises:
            EngagementError: sender is not a citizen or recipient is not a legislator
        """
        if sender.role != UserRole.CITIZEN:
            raise EngagementError("Only citizens can send engagement messages.")
        if recipient.role != UserRole.LEGISLATOR:
            raise EngagementError("Messages can only be sent to legislators.")

        engagement = self.repository.insert_engagement(
            CitizenEngagement(
                sender_id=sender.id,
                recipient_id=recipient.id,
                bill_id=bill_id,
                submission_id=submission_id,
                subject=subject,
                message=message,
                sent_at=now or datetime.now(timezone.utc),
            )
        )
        logger.info(f"Engagement message sent from user {sender.id} to user {recipient.id}")
        self.events.dispatch(MessageSent(engagement=engagement))
        return engagement


class SubmissionService:

    def __init__(
        self,
        repository: Optional[EngagementRepository] = None,
        events: Optional[EventDispatcher] = None,
    ):
        self.repository = repository or EngagementRepository(get_supabase_client())
        self.events = events or EventDispatcher()

    def record_submission(self, submission: Submission) -> Submission:
        """Store a citizen submission and emit SubmissionCreated."""
        stored = self.repository.insert_submission(submission)
        logger.info(
            f"Recorded {stored.submission_type} submission {stored.tracking_id} on bill {stored.bill_id}"
        )
        self.events.dispatch(SubmissionCreated(submission=stored))
        return stored
