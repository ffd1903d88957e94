from dataclasses import dataclass
from typing import List, Optional


@dataclass
class BillTransitionFailure:
    bill_id: Optional[int]
    bill_number: Optional[str]
    error: str
    status_changed: bool = False


class PartialSweepError(Exception):
    """
    Raised after a lifecycle sweep in which at least one bill failed.

    A failure with ``status_changed`` set was durably moved but its
    BillStatusChanged listeners did not all run; it is not retried by the next
    sweep. Other failed bills stay in their old status and are picked up again.
    """

    def __init__(self, operation: str, transitioned: int, failures: List[BillTransitionFailure]):
        self.operation = operation
        self.transitioned = transitioned
        self.failures = failures
        failed_ids = ", ".join(str(f.bill_id) for f in failures)
        super().__init__(
            f"{operation}: {len(failures)} bill(s) failed ({failed_ids}); "
            f"{transitioned} transitioned"
        )
