import secrets
import string
from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field

_TRACKING_ALPHABET = string.ascii_uppercase + string.digits

class SubmissionType(str, Enum):
    """How a citizen positions their feedback on a bill"""
    SUPPORT = "support"
    OPPOSE = "oppose"
    AMEND = "amend"
    NEUTRAL = "neutral"


def generate_tracking_id() -> str:
    """12-character code citizens use to follow up on a submission."""
    return "".join(secrets.choice(_TRACKING_ALPHABET) for _ in range(12))


class Submission(BaseModel):
    """Citizen feedback on a bill"""
    id: Optional[int] = None
    tracking_id: str = Field(default_factory=generate_tracking_id)
    bill_id: int
    user_id: Optional[int] = None
    submission_type: SubmissionType
    content: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True
