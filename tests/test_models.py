"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, calculations, importer)
2. Integration tests for flows (with in-memory or mocked storage)
3. No real API calls in tests (use mocks)
4. Every time-dependent test passes an explicit "now"
"""

import json
import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import ValidationError

from finance_tracker.models import (
    UNSET_CREDITOR,
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    Debt,
    DebtCategory,
    ExportData,
    FinancialOverview,
    FixedBill,
    FixedBillCategory,
    Income,
    IncomeFrequency,
    Installments,
    NegotiationTerms,
    Project,
    ProjectCost,
    ProjectRevenue,
    ProjectStatus,
    RevenueInstallment,
)


class TestDebtModels:
    """Tests for debt-related Pydantic models."""

    def test_debt_defaults(self):
        """Test a debt needs nothing but gets a fresh id."""
        debt = Debt(name="Card")
        assert debt.category == DebtCategory.OTHER
        assert debt.installments.total == 1
        assert debt.installments.paid == 0
        assert debt.due_date is None
        assert debt.id

    def test_ids_are_unique(self):
        """Test that two new entities never share an id."""
        assert Debt().id != Debt().id

    def test_debt_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        debt = Debt(name="  Visa  ")
        assert debt.name == "Visa"

    def test_debt_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Debt(name="Loan", total_amount=-100)

    def test_installments_remaining(self):
        """Test remaining installments never go negative."""
        assert Installments(total=12, paid=4).remaining == 8
        assert Installments(total=3, paid=5).remaining == 0

    def test_installments_total_must_be_positive(self):
        with pytest.raises(ValueError):
            Installments(total=0)

    def test_negotiation_terms_require_due_date(self):
        """Test negotiated terms always carry a due date."""
        with pytest.raises(ValueError):
            NegotiationTerms(interest_rate=2.5)

    def test_negotiation_terms_default_creditor(self):
        terms = NegotiationTerms(due_date=datetime(2024, 7, 1))
        assert terms.creditor == UNSET_CREDITOR
        assert terms.down_payment == 0.0


class TestSerialization:
    """Tests for camelCase wire format and timestamp normalization."""

    def test_storage_dict_uses_camel_case(self):
        """Test stored records use camelCase keys."""
        bill = FixedBill(name="Water", due_day=10, is_paid=True)
        stored = bill.to_storage_dict()
        assert stored["dueDay"] == 10
        assert stored["isPaid"] is True
        assert "lastPaidDate" in stored
        assert "due_day" not in stored

    def test_models_accept_camel_case_input(self):
        """Test records can be built from stored camelCase dicts."""
        debt = Debt.model_validate({
            "name": "Car",
            "totalAmount": 5000,
            "remainingAmount": 4000,
            "dueDate": "2024-05-10T00:00:00",
        })
        assert debt.total_amount == 5000
        assert debt.remaining_amount == 4000
        assert debt.due_date == datetime(2024, 5, 10)

    def test_aware_datetime_becomes_naive_utc(self):
        """Test timezone-aware values are converted to naive UTC."""
        debt = Debt(due_date="2024-03-10T12:00:00+02:00")
        assert debt.due_date == datetime(2024, 3, 10, 10, 0)
        assert debt.due_date.tzinfo is None

    def test_timestamp_shifted_out_of_calendar_is_rejected(self):
        """Test an offset that moves the UTC value before year 1 fails validation."""
        with pytest.raises(ValidationError, match="out of range"):
            Debt(due_date="0001-01-01T00:00:00+01:00")

    def test_amounts_are_decimals_and_serialize_as_numbers(self):
        """Test money is held exactly but written as plain JSON numbers."""
        bill = FixedBill(amount=19.99)
        assert bill.amount == Decimal("19.99")

        payload = json.loads(bill.model_dump_json(by_alias=True))
        assert payload["amount"] == 19.99

    def test_date_becomes_midnight(self):
        """Test plain dates are read as midnight of that day."""
        income = Income(expected_date=date(2024, 8, 5))
        assert income.expected_date == datetime(2024, 8, 5)

    def test_empty_date_string_is_none(self):
        bill = FixedBill(last_paid_date="   ")
        assert bill.last_paid_date is None

    def test_stored_dict_round_trips(self):
        """Test a stored dict validates back into an equal model."""
        project = Project(
            name="Website",
            status=ProjectStatus.IN_PROGRESS,
            start_date=datetime(2024, 1, 15),
            costs=[ProjectCost(name="Hosting", amount=20, date=datetime(2024, 2, 1))],
            revenues=[ProjectRevenue(
                name="Deposit",
                amount=500,
                date=datetime(2024, 1, 20),
                installment=RevenueInstallment(current=1, total=2),
            )],
        )
        assert Project.model_validate(project.to_storage_dict()) == project


class TestFixedBillAndIncomeModels:
    """Tests for fixed bill and income models."""

    def test_due_day_bounds(self):
        """Test due day must be a day of month."""
        with pytest.raises(ValueError):
            FixedBill(name="Rent", due_day=32)
        with pytest.raises(ValueError):
            FixedBill(name="Rent", due_day=0)

    def test_fixed_bill_is_recurring_by_default(self):
        assert FixedBill(name="Gym").is_recurring is True

    def test_income_defaults_to_monthly(self):
        income = Income(name="Salary", amount=3000)
        assert income.frequency == IncomeFrequency.MONTHLY
        assert income.is_received is False


class TestSummaryModels:
    """Tests for summary projections."""

    def test_commitment_display_when_undefined(self):
        """Test undefined commitment shows as 0%."""
        overview = FinancialOverview(total_monthly_expenses=100)
        assert overview.commitment_percentage is None
        assert overview.commitment_display == 0.0

    def test_commitment_display_when_defined(self):
        overview = FinancialOverview(commitment_percentage=42.5)
        assert overview.commitment_display == 42.5


class TestExportModel:
    """Tests for the export envelope."""

    def test_export_json_envelope(self):
        """Test the export file has the expected top-level fields."""
        export = ExportData(
            debts=[Debt(name="Card")],
            fixed_bills=[FixedBill(name="Power", category=FixedBillCategory.POWER)],
            export_date=datetime(2024, 6, 1, 9, 30),
        )
        document = json.loads(export.to_json())
        assert set(document) == {"debts", "fixedBills", "incomes", "exportDate", "version"}
        assert document["version"] == "1.0.0"
        assert document["exportDate"] == "2024-06-01T09:30:00"
        assert document["fixedBills"][0]["category"] == "power"


class TestActivityModels:
    """Tests for activity-related models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.ENTITY_CREATED,
            description="debt created",
        )
        assert event.event_type == ActivityEventType.ENTITY_CREATED
        assert event.severity == ActivitySeverity.INFO
        assert isinstance(event.event_id, UUID)

    def test_activity_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEventBuilder.data_imported(debts=2, fixed_bills=1, incomes=0)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "data_imported"
        assert log_dict["details"]["debts"] == 2
        assert log_dict["description"] == "Imported 3 records"

    def test_builder_debt_negotiated(self):
        """Test ActivityEventBuilder.debt_negotiated."""
        event = ActivityEventBuilder.debt_negotiated(
            debt_id="debt-1",
            previous_remaining=Decimal("1000"),
            new_remaining=Decimal("800"),
            down_payment=Decimal("200"),
        )
        assert event.event_type == ActivityEventType.DEBT_NEGOTIATED
        assert event.entity_type == "debt"
        assert event.entity_id == "debt-1"
        assert event.details["down_payment"] == "200"
        assert event.details["new_remaining"] == "800"

    def test_builder_failures_are_not_info(self):
        """Test rejected imports and storage failures stand out in the log."""
        rejected = ActivityEventBuilder.import_rejected("expected an object")
        failed = ActivityEventBuilder.storage_error("debts", "write", "disk full")
        assert rejected.severity == ActivitySeverity.WARNING
        assert failed.severity == ActivitySeverity.ERROR
        assert failed.details == {"slot": "debts", "operation": "write"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
