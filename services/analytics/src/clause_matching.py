"""
Match submissions to clauses and compute clause statistics (pure functions).
"""
from collections import Counter
from datetime import datetime
from typing import Iterable, List

from shared.models.bill import BillClause
from shared.models.clause_analytics import ClauseAnalytics, sentiment_score
from shared.models.submission import Submission, SubmissionType


def match_submissions_to_clause(clause_number: str, submissions: Iterable[Submission]) -> List[Submission]:
    """
    Submissions whose free-text content contains the clause number.

    This is plain substring containment. It misses references written
    differently ("clause two", "2 .1") and over-matches where the number is
    part of another number or unrelated text ("2.1" inside "12.10"). Accurate
    matching needs a structured clause reference on the submission.
    """
    if not clause_number:
        return []
    return [s for s in submissions if clause_number in (s.content or "")]


def build_clause_analytics(
    clause: BillClause, submissions: Iterable[Submission], now: datetime
) -> ClauseAnalytics:
    """Full snapshot of a clause's statistics from the submissions that reference it."""
    submissions = list(submissions)
    counts = Counter(SubmissionType(s.submission_type) for s in submissions)
    support = counts[SubmissionType.SUPPORT]
    oppose = counts[SubmissionType.OPPOSE]
    total = len(submissions)
    return ClauseAnalytics(
        clause_id=clause.id,
        total_submissions=total,
        support_count=support,
        oppose_count=oppose,
        amend_count=counts[SubmissionType.AMEND],
        neutral_count=counts[SubmissionType.NEUTRAL],
        sentiment_score=sentiment_score(support, oppose, total),
        views_count=clause.views_count or 0,
        last_calculated_at=now,
    )
