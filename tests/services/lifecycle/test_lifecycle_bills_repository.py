"""Unit tests for the lifecycle BillsRepository."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from services.lifecycle.src.bills_repository import BillsRepository
from shared.models.bill import BillStatus

NOW = datetime(2025, 3, 10, 0, 0, tzinfo=timezone.utc)


def bill_row(bill_id, status="open_for_participation"):
    return {
        "id": bill_id,
        "bill_number": f"BILL-2025-{bill_id:06d}",
        "title": f"Test Bill {bill_id}",
        "status": status,
        "participation_start_date": "2025-02-01",
        "participation_end_date": "2025-03-09",
    }


@pytest.fixture
def repository(mock_supabase):
    return BillsRepository(mock_supabase)


class TestBillsRepository:
    """Tests for BillsRepository."""

    def test_get_expired_open_bills_filters_on_status_and_end_date(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [bill_row(1), bill_row(2)]
        bills = repository.get_expired_open_bills(NOW)

        assert [b.id for b in bills] == [1, 2]
        mock_supabase.table.assert_called_with("bills")
        mock_supabase.eq.assert_called_with("status", "open_for_participation")
        mock_supabase.lte.assert_called_with("participation_end_date", "2025-03-10")
        mock_supabase.order.assert_called_with("id")

    def test_get_due_gazetted_bills_filters_on_start_date(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [bill_row(5, status="gazetted")]
        bills = repository.get_due_gazetted_bills(NOW)

        assert len(bills) == 1
        assert bills[0].status == BillStatus.GAZETTED
        mock_supabase.eq.assert_called_with("status", "gazetted")
        mock_supabase.lte.assert_called_with("participation_start_date", "2025-03-10")

    def test_null_tags_row_is_selected(self, repository, mock_supabase):
        row = dict(bill_row(1), tags=None, description="d")
        mock_supabase.execute.return_value.data = [row]
        bills = repository.get_expired_open_bills(NOW)

        assert [b.id for b in bills] == [1]
        assert bills[0].tags == set()

    def test_invalid_rows_are_collected(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [
            bill_row(1),
            {"id": 2, "bill_number": "BILL-2025-000002", "status": "not-a-status"},
        ]
        invalid_rows = []
        bills = repository.get_expired_open_bills(NOW, invalid_rows)

        assert [b.id for b in bills] == [1]
        assert [(f.bill_id, f.bill_number) for f in invalid_rows] == [(2, "BILL-2025-000002")]

    def test_invalid_row_raises_without_collector(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [{"id": 2, "status": "not-a-status"}]
        with pytest.raises(ValidationError):
            repository.get_due_gazetted_bills(NOW)

    def test_get_bill_with_null_tags(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [dict(bill_row(7), tags=None)]
        assert repository.get_bill(7).tags == set()

    def test_get_bill_not_found(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = []
        assert repository.get_bill(99) is None

    def test_get_bill(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [bill_row(7)]
        bill = repository.get_bill(7)
        assert bill.id == 7
        mock_supabase.eq.assert_called_with("id", 7)

    def test_transition_status_is_conditional(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = [bill_row(1, status="closed")]
        bill = repository.transition_status(
            1, BillStatus.OPEN_FOR_PARTICIPATION, BillStatus.CLOSED, NOW
        )

        assert bill.status == BillStatus.CLOSED
        update_values = mock_supabase.update.call_args[0][0]
        assert update_values["status"] == "closed"
        assert update_values["updated_at"] == NOW.isoformat()
        eq_calls = [c.args for c in mock_supabase.eq.call_args_list]
        assert ("id", 1) in eq_calls
        assert ("status", "open_for_participation") in eq_calls

    def test_transition_status_no_match_returns_none(self, repository, mock_supabase):
        mock_supabase.execute.return_value.data = []
        result = repository.transition_status(1, BillStatus.GAZETTED, BillStatus.OPEN_FOR_PARTICIPATION)
        assert result is None
