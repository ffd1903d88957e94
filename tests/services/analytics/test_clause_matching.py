"""Unit tests for clause matching and clause statistics."""
from datetime import datetime, timezone

import pytest

from services.analytics.src.clause_matching import build_clause_analytics, match_submissions_to_clause
from shared.models.bill import BillClause
from shared.models.clause_analytics import ClauseAnalytics, sentiment_score
from shared.models.submission import Submission, SubmissionType

NOW = datetime(2025, 4, 1, 12, 0, tzinfo=timezone.utc)


def submission(kind, content, bill_id=1):
    return Submission(bill_id=bill_id, submission_type=kind, content=content)


@pytest.fixture
def clause():
    return BillClause(id=11, bill_id=1, clause_number="3", title="Penalties", views_count=40)


class TestMatchSubmissionsToClause:
    """Tests for match_submissions_to_clause."""

    def test_matches_on_substring(self):
        subs = [
            submission(SubmissionType.SUPPORT, "I support clause 3"),
            submission(SubmissionType.OPPOSE, "Clause 4 goes too far"),
        ]
        assert match_submissions_to_clause("3", subs) == [subs[0]]

    def test_over_matches_numbers_containing_the_clause_number(self):
        # Known limitation: "3" is found inside "13"
        subs = [submission(SubmissionType.SUPPORT, "Section 13 is fine")]
        assert match_submissions_to_clause("3", subs) == subs

    def test_empty_clause_number_matches_nothing(self):
        subs = [submission(SubmissionType.SUPPORT, "anything")]
        assert match_submissions_to_clause("", subs) == []


class TestBuildClauseAnalytics:
    """Tests for build_clause_analytics."""

    def test_three_support_one_oppose(self, clause):
        subs = [submission(SubmissionType.SUPPORT, "clause 3")] * 3 + [
            submission(SubmissionType.OPPOSE, "clause 3")
        ]
        analytics = build_clause_analytics(clause, subs, NOW)

        assert analytics.clause_id == 11
        assert analytics.total_submissions == 4
        assert analytics.support_count == 3
        assert analytics.oppose_count == 1
        assert analytics.sentiment_score == 50.0
        assert analytics.views_count == 40
        assert analytics.last_calculated_at == NOW

    def test_no_submissions(self, clause):
        analytics = build_clause_analytics(clause, [], NOW)
        assert analytics.total_submissions == 0
        assert analytics.sentiment_score == 0.0
        assert analytics.support_percentage == 0.0

    def test_counts_add_up(self, clause):
        subs = [
            submission(SubmissionType.SUPPORT, "3"),
            submission(SubmissionType.OPPOSE, "3"),
            submission(SubmissionType.AMEND, "3"),
            submission(SubmissionType.AMEND, "3"),
            submission(SubmissionType.NEUTRAL, "3"),
        ]
        analytics = build_clause_analytics(clause, subs, NOW)
        parts = analytics.support_count + analytics.oppose_count + analytics.amend_count + analytics.neutral_count
        assert parts == analytics.total_submissions == 5
        assert analytics.dominant_sentiment == "amend"
        assert analytics.amend_percentage == 40.0


class TestClauseAnalyticsModel:
    """Tests for ClauseAnalytics invariants."""

    @pytest.mark.parametrize(
        "support,oppose,total,expected",
        [(0, 0, 0, 0.0), (4, 0, 4, 100.0), (0, 4, 4, -100.0), (1, 1, 3, 0.0)],
    )
    def test_sentiment_score(self, support, oppose, total, expected):
        assert sentiment_score(support, oppose, total) == expected

    def test_counts_must_add_up(self):
        with pytest.raises(ValueError):
            ClauseAnalytics(clause_id=1, total_submissions=3, support_count=1)

    def test_score_is_bounded(self):
        with pytest.raises(ValueError):
            ClauseAnalytics(clause_id=1, total_submissions=1, support_count=1, sentiment_score=150)

    def test_dominant_sentiment_tie_prefers_support(self):
        analytics = ClauseAnalytics(clause_id=1, total_submissions=2, support_count=1, oppose_count=1)
        assert analytics.dominant_sentiment == "support"
