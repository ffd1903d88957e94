from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from .submission import SubmissionType


def sentiment_score(support_count: int, oppose_count: int, total: int) -> float:
    """((support - oppose) / total) * 100, or 0 when there are no submissions."""
    if total == 0:
        return 0.0
    return ((support_count - oppose_count) / total) * 100


class ClauseAnalytics(BaseModel):
    """
    Derived per-clause submission statistics.

    Fully recomputable: each calculation replaces the previous snapshot.
    """
    id: Optional[int] = None
    clause_id: int
    total_submissions: int = 0
    support_count: int = 0
    oppose_count: int = 0
    amend_count: int = 0
    neutral_count: int = 0
    sentiment_score: float = Field(0.0, ge=-100, le=100)
    views_count: int = 0
    last_calculated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def _counts_add_up(self):
        parts = self.support_count + self.oppose_count + self.amend_count + self.neutral_count
        if parts != self.total_submissions:
            raise ValueError(
                f"submission counts ({parts}) do not add up to total_submissions ({self.total_submissions})"
            )
        return self

    def _percentage(self, count: int) -> float:
        if self.total_submissions == 0:
            return 0.0
        return round((count / self.total_submissions) * 100, 2)

    @property
    def support_percentage(self) -> float:
        return self._percentage(self.support_count)

    @property
    def oppose_percentage(self) -> float:
        return self._percentage(self.oppose_count)

    @property
    def amend_percentage(self) -> float:
        return self._percentage(self.amend_count)

    @property
    def neutral_percentage(self) -> float:
        return self._percentage(self.neutral_count)

    @property
    def dominant_sentiment(self) -> str:
        """Submission type with the highest count; ties resolve in support, oppose, amend, neutral order."""
        counts = [
            (SubmissionType.SUPPORT, self.support_count),
            (SubmissionType.OPPOSE, self.oppose_count),
            (SubmissionType.AMEND, self.amend_count),
            (SubmissionType.NEUTRAL, self.neutral_count),
        ]
        best, _ = max(counts, key=lambda pair: pair[1])
        return best.value
