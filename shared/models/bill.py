import secrets
import string
from datetime import datetime, date
from typing import Optional, Set
from enum import Enum
from pydantic import BaseModel, Field, field_validator

_BILL_NUMBER_ALPHABET = string.ascii_uppercase + string.digits

class BillStatus(str, Enum):
    """Bill lifecycle status enum"""
    DRAFT = "draft"
    GAZETTED = "gazetted"
    OPEN_FOR_PARTICIPATION = "open_for_participation"
    CLOSED = "closed"
    COMMITTEE_REVIEW = "committee_review"
    PASSED = "passed"
    REJECTED = "rejected"

class BillType(str, Enum):
    """Bill type enum"""
    PUBLIC = "public"
    PRIVATE = "private"
    MONEY = "money"

class BillHouse(str, Enum):
    """House the bill originates in"""
    NATIONAL_ASSEMBLY = "national_assembly"
    SENATE = "senate"
    BOTH = "both"

# The only transitions the lifecycle sweeps may apply; everything else is manual.
TIME_DRIVEN_TRANSITIONS = {
    BillStatus.GAZETTED: BillStatus.OPEN_FOR_PARTICIPATION,
    BillStatus.OPEN_FOR_PARTICIPATION: BillStatus.CLOSED,
}

TERMINAL_STATUSES = frozenset(
    s.value for s in (BillStatus.CLOSED, BillStatus.PASSED, BillStatus.REJECTED)
)


def generate_bill_number(today: Optional[date] = None) -> str:
    """Human-readable bill number, e.g. ``BILL-2025-X7K2QD``."""
    year = (today or date.today()).year
    suffix = "".join(secrets.choice(_BILL_NUMBER_ALPHABET) for _ in range(6))
    return f"BILL-{year}-{suffix}"


class Bill(BaseModel):
    """Legislative bill tracked through the participation lifecycle"""
    id: Optional[int] = None
    bill_number: str = Field(default_factory=generate_bill_number)
    title: str
    description: str = ""
    type: BillType = BillType.PUBLIC
    house: BillHouse = BillHouse.NATIONAL_ASSEMBLY
    status: BillStatus = BillStatus.DRAFT
    sponsor: Optional[str] = None
    committee: Optional[str] = None
    gazette_date: Optional[date] = None
    participation_start_date: Optional[date] = None
    participation_end_date: Optional[date] = None
    tags: Set[str] = Field(default_factory=set)
    views_count: int = 0
    submissions_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags_as_empty(cls, v):
        # bills.tags is a nullable json column
        return set() if v is None else v

    @field_validator("description", mode="before")
    @classmethod
    def _null_description_as_empty(cls, v):
        return "" if v is None else v

    @field_validator("views_count", "submissions_count", mode="before")
    @classmethod
    def _null_counter_as_zero(cls, v):
        return 0 if v is None else v

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def is_open_for_participation(self, now: datetime) -> bool:
        """
        True while the bill is open and ``now`` falls inside its participation window.

        The end date is exclusive: the close sweep closes a bill once its end date
        has been reached.
        """
        if self.status != BillStatus.OPEN_FOR_PARTICIPATION:
            return False
        if not self.participation_start_date or not self.participation_end_date:
            return False
        today = now.date()
        return self.participation_start_date <= today < self.participation_end_date

    def days_remaining(self, now: datetime) -> int:
        if not self.is_open_for_participation(now):
            return 0
        return (self.participation_end_date - now.date()).days


class BillClause(BaseModel):
    """Numbered subsection of a bill; the unit clause analytics are computed for"""
    id: Optional[int] = None
    bill_id: int
    clause_number: str = Field(..., description="Ordering key, unique within the bill (e.g. '2.1')")
    title: Optional[str] = None
    content: str = ""
    views_count: int = 0

    class Config:
        from_attributes = True
