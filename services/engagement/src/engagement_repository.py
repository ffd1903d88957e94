"""
citizen_engagements and submissions table access. Engagements are insert-only.
"""
import logging
from typing import Optional

from shared.models.engagement import CitizenEngagement
from shared.models.submission import Submission

logger = logging.getLogger(__name__)


class EngagementRepository:

    def __init__(self, supabase_client):
        self.supabase = supabase_client

    def get_engagement(self, engagement_id: int) -> Optional[CitizenEngagement]:
        result = (
            self.supabase.table("citizen_engagements")
            .select("*")
            .eq("id", engagement_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return CitizenEngagement.model_validate(result.data[0])

    def insert_engagement(self, engagement: CitizenEngagement) -> CitizenEngagement:
        row = engagement.model_dump(mode="json", exclude={"id"})
        result = self.supabase.table("citizen_engagements").insert(row).execute()
        result_data = getattr(result, "data", []) or []
        if not result_data:
            raise RuntimeError("Insert into citizen_engagements returned no data")
        return CitizenEngagement.model_validate(result_data[0])

    def insert_submission(self, submission: Submission) -> Submission:
        row = submission.model_dump(mode="json", exclude={"id", "created_at"})
        result = self.supabase.table("submissions").insert(row).execute()
        result_data = getattr(result, "data", []) or []
        if not result_data:
            raise RuntimeError(f"Insert for submission {submission.tracking_id} returned no data")
        return Submission.model_validate(result_data[0])
