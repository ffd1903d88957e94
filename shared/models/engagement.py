from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class CitizenEngagement(BaseModel):
    """Direct message from a citizen to a legislator; immutable once sent"""
    id: Optional[int] = None
    sender_id: int
    recipient_id: int
    bill_id: Optional[int] = None
    submission_id: Optional[int] = None
    subject: str
    message: str
    channel: str = "platform"
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True
