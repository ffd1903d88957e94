"""
Recompute per-clause submission statistics for a bill.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from shared.database.supabase_client import get_supabase_client
from shared.models.clause_analytics import ClauseAnalytics

from .analytics_repository import AnalyticsRepository
from .clause_matching import build_clause_analytics, match_submissions_to_clause

logger = logging.getLogger(__name__)


class AnalyticsError(Exception):
    """Clause analytics for a bill could not be recomputed."""


class ClauseAnalyticsAggregator:
    """Replaces every clause's analytics snapshot for a bill."""

    def __init__(self, repository: Optional[AnalyticsRepository] = None):
        self.repository = repository or AnalyticsRepository(get_supabase_client())

    def recompute_clause_analytics(self, bill_id: int, now: Optional[datetime] = None) -> List[ClauseAnalytics]:
        """
        Recompute and upsert analytics for every clause of a bill.

        Safe to re-run: each run writes a complete snapshot keyed by clause id,
        never an increment.

        Raises:
            AnalyticsError: if any clause fails; the whole bill is retried by the caller
        """
        now = now or datetime.now(timezone.utc)
        clauses = self.repository.get_clauses(bill_id)
        if not clauses:
            logger.info(f"Bill {bill_id} has no clauses; nothing to recompute")
            return []

        submissions = self.repository.get_submissions(bill_id)
        snapshots = []
        for clause in clauses:
            try:
                matched = match_submissions_to_clause(clause.clause_number, submissions)
                analytics = build_clause_analytics(clause, matched, now)
                self.repository.upsert_clause_analytics(analytics)
            except Exception as e:
                raise AnalyticsError(
                    f"Failed to update analytics for clause {clause.id} "
                    f"({clause.clause_number}) of bill {bill_id}: {e}"
                ) from e
            snapshots.append(analytics)

        logger.info(f"Updated clause analytics for bill {bill_id} ({len(snapshots)} clauses)")
        return snapshots
