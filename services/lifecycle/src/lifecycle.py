"""
Time-driven bill lifecycle: open gazetted bills and close expired ones.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from shared.database.supabase_client import get_supabase_client
from shared.events.dispatcher import EventDispatcher
from shared.events.events import BillStatusChanged
from shared.models.bill import Bill, BillStatus, TIME_DRIVEN_TRANSITIONS

from .bills_repository import BillsRepository
from .exceptions import BillTransitionFailure, PartialSweepError

logger = logging.getLogger(__name__)


class BillLifecycleService:
    """Applies the gazetted -> open_for_participation -> closed transitions."""

    def __init__(
        self,
        bills_repository: Optional[BillsRepository] = None,
        events: Optional[EventDispatcher] = None,
    ):
        self.bills_repository = bills_repository or BillsRepository(
            get_supabase_client()
        )
        self.events = events or EventDispatcher()

    def close_expired_bills(self, now: Optional[datetime] = None) -> int:
        """
        Close every open bill whose participation_end_date <= now.

        Returns:
            Number of bills transitioned to closed

        Raises:
            PartialSweepError: after the sweep, if any bill failed
        """
        now = now or datetime.now(timezone.utc)
        return self._sweep(
            "close_expired_bills",
            self.bills_repository.get_expired_open_bills,
            BillStatus.OPEN_FOR_PARTICIPATION,
            now,
        )

    def open_scheduled_bills(self, now: Optional[datetime] = None) -> int:
        """
        Open every gazetted bill whose participation_start_date <= now.

        Returns:
            Number of bills transitioned to open_for_participation

        Raises:
            PartialSweepError: after the sweep, if any bill failed
        """
        now = now or datetime.now(timezone.utc)
        return self._sweep(
            "open_scheduled_bills",
            self.bills_repository.get_due_gazetted_bills,
            BillStatus.GAZETTED,
            now,
        )

    def _sweep(
        self,
        operation: str,
        select_bills: Callable[[datetime, List[BillTransitionFailure]], List[Bill]],
        from_status: BillStatus,
        now: datetime,
    ) -> int:
        to_status = TIME_DRIVEN_TRANSITIONS[from_status]
        failures: List[BillTransitionFailure] = []
        bills = select_bills(now, failures)

        transitioned = 0

        for i, bill in enumerate(bills, 1):
            logger.debug(
                f"{operation}: bill {bill.id} ({i}/{len(bills)}) {from_status.value} -> {to_status.value}"
            )
            try:
                updated = self.bills_repository.transition_status(bill.id, from_status, to_status, now)
            except Exception as e:
                logger.error(
                    f"{operation}: failed to move bill {bill.id} ({bill.bill_number}) "
                    f"to {to_status.value}: {e}",
                    exc_info=True,
                )
                failures.append(BillTransitionFailure(bill.id, bill.bill_number, str(e)))
                continue

            if updated is None:
                logger.info(f"Bill {bill.id} is no longer {from_status.value}; skipping")
                continue
            transitioned += 1

            try:
                self._emit(updated, from_status, to_status)
            except Exception as e:
                # Status change is durable; the next sweep no longer selects this bill
                logger.error(
                    f"{operation}: bill {bill.id} ({bill.bill_number}) moved to {to_status.value} "
                    f"but BillStatusChanged listeners failed: {e}",
                    exc_info=True,
                )
                failures.append(
                    BillTransitionFailure(bill.id, bill.bill_number, str(e), status_changed=True)
                )

        if transitioned:
            logger.info(f"{operation}: {transitioned} bill(s) moved to {to_status.value}")
        if failures:
            raise PartialSweepError(operation, transitioned, failures)
        return transitioned

    def _emit(self, bill: Bill, from_status: BillStatus, to_status: BillStatus) -> None:
        self.events.dispatch(
            BillStatusChanged(
                bill=bill,
                old_status=from_status.value,
                new_status=to_status.value,
            )
        )
