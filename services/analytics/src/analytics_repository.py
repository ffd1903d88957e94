"""
Supabase access for clause analytics: clauses, submissions and the
clause_analytics table (unique on clause_id).
"""
import logging
from typing import List

from shared.database.supabase_client import page_ranges
from shared.models.bill import BillClause, BillStatus
from shared.models.clause_analytics import ClauseAnalytics
from shared.models.submission import Submission

logger = logging.getLogger(__name__)


class AnalyticsRepository:

    SUBMISSIONS_PAGE_SIZE = 1000

    def __init__(self, supabase_client):
        self.supabase = supabase_client

    def get_clauses(self, bill_id: int) -> List[BillClause]:
        result = (
            self.supabase.table("bill_clauses")
            .select("id, bill_id, clause_number, title, content, views_count")
            .eq("bill_id", bill_id)
            .order("clause_number")
            .execute()
        )
        return [BillClause.model_validate(row) for row in result.data or []]

    def get_submissions(self, bill_id: int) -> List[Submission]:
        """All submissions for a bill, fetched page by page."""
        submissions = []
        for start, end in page_ranges(self.SUBMISSIONS_PAGE_SIZE):
            result = (
                self.supabase.table("submissions")
                .select("id, tracking_id, bill_id, user_id, submission_type, content, created_at")
                .eq("bill_id", bill_id)
                .order("id")
                .range(start, end)
                .execute()
            )
            rows = result.data or []
            submissions.extend(Submission.model_validate(row) for row in rows)
            if len(rows) < self.SUBMISSIONS_PAGE_SIZE:
                break
        logger.debug(f"Fetched {len(submissions)} submissions for bill {bill_id}")
        return submissions

    def upsert_clause_analytics(self, analytics: ClauseAnalytics) -> None:
        """Insert or replace the analytics row for ``analytics.clause_id``."""
        row = analytics.model_dump(mode="json", exclude={"id"})
        self.supabase.table("clause_analytics").upsert(row, on_conflict="clause_id").execute()

    def get_bill_ids_accepting_submissions(self) -> List[int]:
        result = (
            self.supabase.table("bills")
            .select("id")
            .eq("status", BillStatus.OPEN_FOR_PARTICIPATION.value)
            .order("id")
            .execute()
        )
        return [row["id"] for row in result.data or []]
