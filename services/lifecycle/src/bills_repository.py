"""
Bills table Supabase access: select bills due for a time-driven transition and
apply conditional status updates.
"""
import logging
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError

from shared.models.bill import Bill, BillStatus

from .exceptions import BillTransitionFailure

logger = logging.getLogger(__name__)


class BillsRepository:
    """Single place for all bills-table Supabase access."""

    TABLE = "bills"

    def __init__(self, supabase_client):
        self.supabase = supabase_client

    @staticmethod
    def _rows_to_bills(
        rows, invalid_rows: Optional[List[BillTransitionFailure]] = None
    ) -> List[Bill]:
        """
        Validate selected rows into Bills.

        A row that fails validation is appended to ``invalid_rows`` when a list
        is given; otherwise the validation error propagates.
        """
        bills = []
        for row in rows or []:
            try:
                bills.append(Bill.model_validate(row))
            except ValidationError as e:
                if invalid_rows is None:
                    raise
                logger.error(f"Invalid bill row {row.get('id')}: {e}")
                invalid_rows.append(
                    BillTransitionFailure(row.get("id"), row.get("bill_number"), f"invalid bill row: {e}")
                )
        return bills

    def get_bill(self, bill_id: int) -> Optional[Bill]:
        result = (
            self.supabase.table(self.TABLE)
            .select("*")
            .eq("id", bill_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return Bill.model_validate(result.data[0])

    def get_expired_open_bills(
        self, now: datetime, invalid_rows: Optional[List[BillTransitionFailure]] = None
    ) -> List[Bill]:
        """
        Bills open for participation whose participation_end_date <= now.

        Dates are stored without a time component, so "<= now" is "<= today".
        Rows that cannot be read as a Bill go to ``invalid_rows``.
        """
        result = (
            self.supabase.table(self.TABLE)
            .select("*")
            .eq("status", BillStatus.OPEN_FOR_PARTICIPATION.value)
            .lte("participation_end_date", now.date().isoformat())
            .order("id")
            .execute()
        )
        bills = self._rows_to_bills(result.data, invalid_rows)
        logger.info(f"Found {len(bills)} open bills past their participation end date")
        return bills

    def get_due_gazetted_bills(
        self, now: datetime, invalid_rows: Optional[List[BillTransitionFailure]] = None
    ) -> List[Bill]:
        """Gazetted bills whose participation_start_date <= now."""
        result = (
            self.supabase.table(self.TABLE)
            .select("*")
            .eq("status", BillStatus.GAZETTED.value)
            .lte("participation_start_date", now.date().isoformat())
            .order("id")
            .execute()
        )
        bills = self._rows_to_bills(result.data, invalid_rows)
        logger.info(f"Found {len(bills)} gazetted bills due to open for participation")
        return bills

    def transition_status(
        self,
        bill_id: int,
        from_status: BillStatus,
        to_status: BillStatus,
        now: Optional[datetime] = None,
    ) -> Optional[Bill]:
        """
        Set status to ``to_status`` only if it is still ``from_status``.

        Returns:
            The updated Bill, or None when no row matched (the bill was already
            moved by another worker, or no longer exists)
        """
        updated_at = (now or datetime.now()).isoformat()
        result = (
            self.supabase.table(self.TABLE)
            .update({"status": BillStatus(to_status).value, "updated_at": updated_at})
            .eq("id", bill_id)
            .eq("status", BillStatus(from_status).value)
            .execute()
        )
        rows = getattr(result, "data", []) or []
        if not rows:
            logger.debug(
                f"Conditional update for bill {bill_id} ({from_status} -> {to_status}) matched no rows"
            )
            return None
        return Bill.model_validate(rows[0])
