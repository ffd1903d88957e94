"""Unit tests for ClauseAnalyticsAggregator and AnalyticsRepository."""
from datetime import datetime, timezone

import pytest
from unittest.mock import Mock

from services.analytics.src.aggregator import AnalyticsError, ClauseAnalyticsAggregator
from services.analytics.src.analytics_repository import AnalyticsRepository
from shared.models.bill import BillClause
from shared.models.clause_analytics import ClauseAnalytics
from shared.models.submission import Submission, SubmissionType

NOW = datetime(2025, 4, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository():
    repo = Mock(spec=AnalyticsRepository)
    repo.get_clauses.return_value = [
        BillClause(id=1, bill_id=9, clause_number="1"),
        BillClause(id=2, bill_id=9, clause_number="2"),
    ]
    repo.get_submissions.return_value = [
        Submission(bill_id=9, submission_type=SubmissionType.SUPPORT, content="clause 1 is good"),
        Submission(bill_id=9, submission_type=SubmissionType.OPPOSE, content="clause 2 is bad"),
        Submission(bill_id=9, submission_type=SubmissionType.SUPPORT, content="clause 2 needs work"),
    ]
    return repo


class TestClauseAnalyticsAggregator:
    """Tests for recompute_clause_analytics."""

    def test_upserts_one_snapshot_per_clause(self, repository):
        snapshots = ClauseAnalyticsAggregator(repository).recompute_clause_analytics(9, now=NOW)

        assert [s.clause_id for s in snapshots] == [1, 2]
        assert repository.upsert_clause_analytics.call_count == 2
        first, second = snapshots
        assert (first.total_submissions, first.sentiment_score) == (1, 100.0)
        assert (second.support_count, second.oppose_count, second.sentiment_score) == (1, 1, 0.0)

    def test_rerun_produces_identical_snapshots(self, repository):
        aggregator = ClauseAnalyticsAggregator(repository)
        assert aggregator.recompute_clause_analytics(9, now=NOW) == aggregator.recompute_clause_analytics(9, now=NOW)

    def test_bill_without_clauses(self, repository):
        repository.get_clauses.return_value = []
        assert ClauseAnalyticsAggregator(repository).recompute_clause_analytics(9, now=NOW) == []
        repository.get_submissions.assert_not_called()

    def test_clause_failure_raises_analytics_error(self, repository):
        repository.upsert_clause_analytics.side_effect = [None, ConnectionError("db gone")]
        with pytest.raises(AnalyticsError, match="clause 2") as exc_info:
            ClauseAnalyticsAggregator(repository).recompute_clause_analytics(9, now=NOW)
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestAnalyticsRepository:
    """Tests for AnalyticsRepository."""

    def test_upsert_is_keyed_on_clause_id(self, mock_supabase):
        analytics = ClauseAnalytics(
            id=77, clause_id=3, total_submissions=2, support_count=2, sentiment_score=100.0,
            last_calculated_at=NOW,
        )
        AnalyticsRepository(mock_supabase).upsert_clause_analytics(analytics)

        mock_supabase.table.assert_called_with("clause_analytics")
        row = mock_supabase.upsert.call_args[0][0]
        assert mock_supabase.upsert.call_args.kwargs["on_conflict"] == "clause_id"
        assert "id" not in row
        assert row["clause_id"] == 3
        assert row["last_calculated_at"] == "2025-04-01T12:00:00Z"

    def test_get_submissions_pages_until_short_page(self, mock_supabase):
        repo = AnalyticsRepository(mock_supabase)
        repo.SUBMISSIONS_PAGE_SIZE = 2
        row = {"tracking_id": "ABCDEFGHIJKL", "bill_id": 9, "submission_type": "support", "content": "x"}
        mock_supabase.execute.side_effect = [Mock(data=[row, row]), Mock(data=[row])]

        submissions = repo.get_submissions(9)

        assert len(submissions) == 3
        assert [c.args for c in mock_supabase.range.call_args_list] == [(0, 1), (2, 3)]

    def test_get_bill_ids_accepting_submissions(self, mock_supabase):
        mock_supabase.execute.return_value.data = [{"id": 1}, {"id": 5}]
        assert AnalyticsRepository(mock_supabase).get_bill_ids_accepting_submissions() == [1, 5]
        mock_supabase.eq.assert_called_with("status", "open_for_participation")
