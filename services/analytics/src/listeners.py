"""
Event listeners that queue clause analytics recomputes.
"""
import logging

from shared.events.events import BillStatusChanged, SubmissionCreated
from shared.models.bill import BillStatus
from shared.queue.rq_client import ANALYTICS_QUEUE, default_retry, get_queue

from .jobs import update_bill_clause_analytics

logger = logging.getLogger(__name__)


class AnalyticsListeners:

    def __init__(self, queue=None):
        self._queue = queue

    @property
    def queue(self):
        if self._queue is None:
            self._queue = get_queue(ANALYTICS_QUEUE)
        return self._queue

    def _enqueue(self, bill_id: int, reason: str) -> None:
        job = self.queue.enqueue(update_bill_clause_analytics, bill_id, retry=default_retry())
        logger.info(f"Queued clause analytics for bill {bill_id} ({reason}), job {job.id}")

    def on_submission_created(self, event: SubmissionCreated) -> None:
        self._enqueue(event.submission.bill_id, "new submission")

    def on_bill_status_changed(self, event: BillStatusChanged) -> None:
        # Final snapshot once a bill stops taking submissions; the periodic sweep skips closed bills
        if event.new_status == BillStatus.CLOSED:
            self._enqueue(event.bill.id, "participation closed")
