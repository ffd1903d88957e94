"""Unit tests for analytics jobs and listeners."""
from datetime import date

import pytest
from unittest.mock import Mock, patch

from services.analytics.src import jobs
from services.analytics.src.aggregator import AnalyticsError
from services.analytics.src.listeners import AnalyticsListeners
from shared.events.events import BillStatusChanged, SubmissionCreated
from shared.models.bill import Bill, BillStatus
from shared.models.submission import Submission, SubmissionType


class TestAnalyticsJobs:
    """Tests for analytics job entrypoints."""

    def test_update_bill_clause_analytics_returns_clause_count(self):
        aggregator = Mock()
        aggregator.recompute_clause_analytics.return_value = [Mock(), Mock()]
        assert jobs.update_bill_clause_analytics(3, aggregator=aggregator) == 2

    def test_update_bill_clause_analytics_logs_traceback(self):
        aggregator = Mock()
        aggregator.recompute_clause_analytics.side_effect = AnalyticsError("boom")

        with patch.object(jobs, "logger") as mock_logger:
            with pytest.raises(AnalyticsError):
                jobs.update_bill_clause_analytics(3, aggregator=aggregator)

        assert mock_logger.error.call_args.kwargs["exc_info"] is True

    def test_periodic_sweep_covers_open_bills(self):
        aggregator = Mock()
        aggregator.repository.get_bill_ids_accepting_submissions.return_value = [1, 2, 3]
        assert jobs.update_clause_analytics(aggregator=aggregator) == 3
        assert [c.args[0] for c in aggregator.recompute_clause_analytics.call_args_list] == [1, 2, 3]

    def test_periodic_sweep_continues_past_failures(self):
        aggregator = Mock()
        aggregator.repository.get_bill_ids_accepting_submissions.return_value = [1, 2, 3]
        aggregator.recompute_clause_analytics.side_effect = [[], AnalyticsError("boom"), []]

        with pytest.raises(AnalyticsError, match="bill\\(s\\): 2"):
            jobs.update_clause_analytics(aggregator=aggregator)
        assert aggregator.recompute_clause_analytics.call_count == 3


class TestAnalyticsListeners:
    """Tests for AnalyticsListeners."""

    def test_submission_created_queues_recompute(self, mock_queue):
        submission = Submission(bill_id=6, submission_type=SubmissionType.AMEND, content="clause 2")
        AnalyticsListeners(queue=mock_queue).on_submission_created(SubmissionCreated(submission=submission))
        assert mock_queue.enqueue.call_args[0] == (jobs.update_bill_clause_analytics, 6)

    def test_closed_bill_queues_final_recompute(self, mock_queue):
        bill = Bill(id=6, title="t", status=BillStatus.CLOSED, participation_end_date=date(2025, 1, 1))
        event = BillStatusChanged(bill=bill, old_status="open_for_participation", new_status="closed")
        AnalyticsListeners(queue=mock_queue).on_bill_status_changed(event)
        assert mock_queue.enqueue.call_args[0] == (jobs.update_bill_clause_analytics, 6)

    def test_opened_bill_queues_nothing(self, mock_queue):
        bill = Bill(id=6, title="t", status=BillStatus.OPEN_FOR_PARTICIPATION)
        event = BillStatusChanged(bill=bill, old_status="gazetted", new_status="open_for_participation")
        AnalyticsListeners(queue=mock_queue).on_bill_status_changed(event)
        mock_queue.enqueue.assert_not_called()
