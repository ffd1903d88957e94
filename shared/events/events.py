from dataclasses import dataclass

from shared.models.bill import Bill
from shared.models.engagement import CitizenEngagement
from shared.models.submission import Submission


@dataclass(frozen=True)
class BillStatusChanged:
    """Emitted once per bill whose status was changed."""
    bill: Bill
    old_status: str
    new_status: str


@dataclass(frozen=True)
class MessageSent:
    """Emitted when a citizen engagement message has been stored."""
    engagement: CitizenEngagement


@dataclass(frozen=True)
class SubmissionCreated:
    """Emitted when a new submission has been stored."""
    submission: Submission
