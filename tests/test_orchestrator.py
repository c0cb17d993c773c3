"""
Integration tests for the flows.

Every tracker here runs on in-memory (or temporary JSON) storage with a
fixed clock.
"""

import json
import pytest
from datetime import datetime, timedelta

from finance_tracker.calculations import NEVER
from finance_tracker.config import AppSettings, StorageBackend, get_settings
from finance_tracker.models import (
    UNSET_CREDITOR,
    DebtCategory,
    DebtStatus,
    FixedBill,
    FixedBillCategory,
    FixedBillStatus,
    Income,
    IncomeFrequency,
    IncomeStatus,
    Installments,
    NegotiationTerms,
    Project,
    ProjectCost,
    ProjectRevenue,
    ProjectStatus,
)
from finance_tracker.orchestrator import (
    FinanceTracker,
    create_app_components,
    create_store,
)
from finance_tracker.services.storage import (
    SLOT_DEBTS,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    NotFoundError,
)
from finance_tracker.validation import ImportValidationError


NOW = datetime(2024, 6, 10, 12, 0)


class FakeClock:
    """Clock the test can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def tracker(clock):
    return FinanceTracker(InMemoryKeyValueStore(), clock=clock)


def _terms(**kwargs) -> NegotiationTerms:
    kwargs.setdefault("due_date", NOW + timedelta(days=30))
    return NegotiationTerms(**kwargs)


class TestDebtFlow:
    """Tests for the quick-add -> negotiate -> delete lifecycle."""

    def test_quick_add_defers_terms(self, tracker):
        debt = tracker.debts.quick_add("Store card", DebtCategory.CARD, 1000)

        assert debt.remaining_amount == 1000
        assert debt.installments == Installments(total=1, paid=0)
        assert debt.interest_rate == 0
        assert debt.minimum_payment == 0
        assert debt.creditor == UNSET_CREDITOR
        assert debt.due_date == NOW
        assert tracker.debts.list_all() == [debt]

    def test_quick_added_debt_due_today_is_due_soon(self, tracker):
        tracker.debts.quick_add("Store card", DebtCategory.CARD, 1000)
        [(_, status)] = tracker.debts.list_with_status()
        assert status == DebtStatus.DUE_SOON

    def test_negotiate_with_down_payment(self, tracker):
        debt = tracker.debts.quick_add("Store card", DebtCategory.CARD, 1000)

        negotiated = tracker.debts.negotiate(
            debt.id,
            _terms(remaining_amount=1000, down_payment=200, interest_rate=2.5,
                   installments=Installments(total=8, paid=0),
                   minimum_payment=100, creditor="Retailer"),
        )

        assert negotiated.remaining_amount == 800
        assert negotiated.interest_rate == 2.5
        assert negotiated.creditor == "Retailer"
        assert negotiated.installments.total == 8
        assert tracker.debts.get(debt.id) == negotiated

    def test_negotiate_without_remaining_uses_total(self, tracker):
        debt = tracker.debts.quick_add("Loan", DebtCategory.LOAN, 1500)
        negotiated = tracker.debts.negotiate(debt.id, _terms(down_payment=500))
        assert negotiated.remaining_amount == 1000

    def test_negotiate_never_goes_negative(self, tracker):
        debt = tracker.debts.quick_add("Loan", DebtCategory.LOAN, 300)
        negotiated = tracker.debts.negotiate(debt.id, _terms(down_payment=500))
        assert negotiated.remaining_amount == 0

    def test_negotiate_unknown_debt(self, tracker):
        with pytest.raises(NotFoundError):
            tracker.debts.negotiate("missing", _terms())

    def test_update_unknown_debt(self, tracker):
        debt = tracker.debts.quick_add("Loan", DebtCategory.LOAN, 300)
        tracker.debts.delete(debt.id)
        with pytest.raises(NotFoundError):
            tracker.debts.update(debt)

    def test_delete(self, tracker):
        debt = tracker.debts.quick_add("Loan", DebtCategory.LOAN, 300)
        assert tracker.debts.delete(debt.id) is True
        assert tracker.debts.delete(debt.id) is False
        assert tracker.debts.list_all() == []

    def test_payoff_estimate(self, tracker):
        debt = tracker.debts.quick_add("Card", DebtCategory.CARD, 10000)
        tracker.debts.negotiate(debt.id, _terms(interest_rate=24))

        assert tracker.debts.payoff_estimate(debt.id, 100) == NEVER
        assert tracker.debts.payoff_estimate(debt.id, 1000) < NEVER
        with pytest.raises(NotFoundError):
            tracker.debts.payoff_estimate("missing", 100)


class TestFixedBillFlow:
    """Tests for fixed bills."""

    def test_toggle_paid_stamps_and_clears_date(self, tracker, clock):
        bill = tracker.fixed_bills.add(FixedBill(name="Water", amount=60, due_day=15))

        paid = tracker.fixed_bills.toggle_paid(bill.id)
        assert paid.is_paid is True
        assert paid.last_paid_date == NOW

        clock.now = NOW + timedelta(hours=1)
        unpaid = tracker.fixed_bills.toggle_paid(bill.id)
        assert unpaid.is_paid is False
        assert unpaid.last_paid_date is None

    def test_double_toggle_from_paid_restamps(self, tracker, clock):
        """Test unmarking clears the date, so re-marking records the new time."""
        earlier = NOW - timedelta(days=3)
        bill = tracker.fixed_bills.add(
            FixedBill(name="Gym", amount=40, is_paid=True, last_paid_date=earlier)
        )

        tracker.fixed_bills.toggle_paid(bill.id)
        again = tracker.fixed_bills.toggle_paid(bill.id)

        assert again.is_paid is True
        assert again.last_paid_date == NOW

    def test_toggle_unknown_bill(self, tracker):
        with pytest.raises(NotFoundError):
            tracker.fixed_bills.toggle_paid("missing")

    def test_summary(self, tracker):
        tracker.fixed_bills.add(FixedBill(name="Rent", amount=100, is_paid=True, due_day=1))
        tracker.fixed_bills.add(FixedBill(name="Phone", amount=50, due_day=5))

        summary = tracker.fixed_bills.summary()
        assert summary.total_monthly_amount == 150
        assert summary.paid_amount == 100
        assert summary.pending_amount == 50
        assert summary.overdue_bills == 1

    def test_status_is_derived_per_read(self, tracker):
        bill = tracker.fixed_bills.add(FixedBill(name="Phone", amount=50, due_day=20))

        [(_, before)] = tracker.fixed_bills.list_with_status(NOW)
        [(_, after)] = tracker.fixed_bills.list_with_status(NOW + timedelta(days=15))

        assert before == FixedBillStatus.PENDING
        assert after == FixedBillStatus.OVERDUE
        assert tracker.fixed_bills.get(bill.id) == bill

    def test_apply_rollover(self, tracker):
        last_month = datetime(2024, 5, 20)
        rolled = tracker.fixed_bills.add(
            FixedBill(name="Internet", amount=80, is_paid=True, last_paid_date=last_month)
        )
        kept = tracker.fixed_bills.add(
            FixedBill(name="Power", amount=90, is_paid=True, last_paid_date=NOW)
        )

        assert tracker.fixed_bills.apply_rollover() == [rolled.id]
        assert tracker.fixed_bills.get(rolled.id).is_paid is False
        assert tracker.fixed_bills.get(rolled.id).last_paid_date == last_month
        assert tracker.fixed_bills.get(kept.id).is_paid is True
        assert tracker.fixed_bills.apply_rollover() == []

    def test_category_breakdown(self, tracker):
        tracker.fixed_bills.add(FixedBill(category=FixedBillCategory.STREAMING, amount=12))
        tracker.fixed_bills.add(FixedBill(category=FixedBillCategory.STREAMING, amount=8))
        assert tracker.fixed_bills.category_breakdown() == {FixedBillCategory.STREAMING: 20}


class TestIncomeFlow:
    """Tests for incomes."""

    def test_toggle_received(self, tracker):
        income = tracker.incomes.add(Income(name="Invoice", amount=700,
                                            expected_date=NOW - timedelta(days=2)))

        [(_, status)] = tracker.incomes.list_with_status()
        assert status == IncomeStatus.OVERDUE

        tracker.incomes.toggle_received(income.id)
        [(_, status)] = tracker.incomes.list_with_status()
        assert status == IncomeStatus.RECEIVED

        assert tracker.incomes.toggle_received(income.id).is_received is False

    def test_summary(self, tracker):
        tracker.incomes.add(Income(amount=3000, is_received=True))
        tracker.incomes.add(Income(amount=600, frequency=IncomeFrequency.QUARTERLY))

        summary = tracker.incomes.summary()
        assert summary.total_monthly_income == 3000
        assert summary.received_amount + summary.pending_amount == 3600


class TestProjectFlow:
    """Tests for projects and their line items."""

    @pytest.fixture
    def project(self, tracker):
        return tracker.projects.add(Project(
            name="Website",
            status=ProjectStatus.IN_PROGRESS,
            start_date=NOW - timedelta(days=30),
        ))

    def test_line_item_lifecycle(self, tracker, project):
        cost = tracker.projects.add_cost(
            project.id, ProjectCost(name="Hosting", amount=120, date=NOW)
        )
        revenue = tracker.projects.add_revenue(
            project.id, ProjectRevenue(name="Deposit", amount=1000, date=NOW)
        )

        tracker.projects.toggle_cost_paid(project.id, cost.id)
        tracker.projects.toggle_revenue_received(project.id, revenue.id)

        financials = tracker.projects.financials(project.id)
        assert financials.total_costs == 120
        assert financials.total_revenue == 1000
        assert financials.profit == 880
        assert financials.pending_costs == 0
        assert financials.pending_revenue == 0
        assert financials.progress == 100

    def test_update_cost(self, tracker, project):
        cost = tracker.projects.add_cost(
            project.id, ProjectCost(name="Hosting", amount=120, date=NOW)
        )
        tracker.projects.update_cost(project.id, cost.model_copy(update={"amount": 150}))
        assert tracker.projects.get(project.id).costs[0].amount == 150

    def test_update_unknown_line_item(self, tracker, project):
        with pytest.raises(NotFoundError):
            tracker.projects.update_revenue(
                project.id, ProjectRevenue(name="Ghost", amount=1, date=NOW)
            )
        with pytest.raises(NotFoundError):
            tracker.projects.toggle_cost_paid(project.id, "missing")

    def test_delete_line_items(self, tracker, project):
        cost = tracker.projects.add_cost(
            project.id, ProjectCost(name="Hosting", amount=120, date=NOW)
        )
        revenue = tracker.projects.add_revenue(
            project.id, ProjectRevenue(name="Deposit", amount=1000, date=NOW)
        )

        assert tracker.projects.delete_cost(project.id, cost.id) is True
        assert tracker.projects.delete_cost(project.id, cost.id) is False
        assert tracker.projects.delete_revenue(project.id, revenue.id) is True
        assert tracker.projects.delete_revenue("missing", revenue.id) is False
        assert tracker.projects.get(project.id).costs == []

    def test_update_keeps_line_items(self, tracker, project):
        tracker.projects.add_cost(project.id, ProjectCost(name="Domain", amount=15, date=NOW))

        renamed = tracker.projects.update(
            project.model_copy(update={"name": "Web shop", "status": ProjectStatus.COMPLETED})
        )

        assert renamed.name == "Web shop"
        assert [cost.name for cost in renamed.costs] == ["Domain"]
        assert tracker.projects.summary().completed_projects == 1

    def test_delete_project_removes_line_items(self, tracker, project):
        tracker.projects.add_cost(project.id, ProjectCost(name="Domain", amount=15, date=NOW))

        assert tracker.projects.delete(project.id) is True
        assert tracker.projects.summary().total_costs == 0
        with pytest.raises(NotFoundError):
            tracker.projects.financials(project.id)

    def test_profitability(self, tracker, project):
        tracker.projects.add_revenue(
            project.id, ProjectRevenue(name="Fee", amount=500, date=NOW)
        )
        assert tracker.projects.profitability() == (1, 0)


class TestDataTransfer:
    """Tests for import and export."""

    def test_import_coerces_bad_amounts(self, tracker):
        imported = tracker.transfer.import_data({
            "debts": [{"name": "Mystery", "totalAmount": "abc", "dueDate": "2024-06-30"}],
        })

        assert imported.debts[0].total_amount == 0
        [debt] = tracker.debts.list_all()
        assert debt.total_amount == 0
        assert debt.due_date == datetime(2024, 6, 30)

    def test_import_replaces_collections(self, tracker):
        tracker.debts.quick_add("Old", DebtCategory.OTHER, 10)
        tracker.incomes.add(Income(name="Old income", amount=5))

        tracker.transfer.import_data({"debts": [{"name": "New"}]})

        assert [debt.name for debt in tracker.debts.list_all()] == ["New"]
        assert tracker.incomes.list_all() == []

    def test_rejected_import_changes_nothing(self, tracker):
        debt = tracker.debts.quick_add("Keep me", DebtCategory.OTHER, 10)

        with pytest.raises(ImportValidationError):
            tracker.transfer.import_data([{"name": "Not an object payload"}])
        with pytest.raises(ImportValidationError):
            tracker.transfer.import_json("not json")

        assert tracker.debts.list_all() == [debt]

    def test_export_then_import(self, tracker):
        tracker.debts.quick_add("Card", DebtCategory.CARD, 1000)
        tracker.fixed_bills.add(FixedBill(name="Water", amount=60, due_day=8))
        tracker.incomes.add(Income(name="Salary", amount=3000))
        before = (
            tracker.debts.list_all(),
            tracker.fixed_bills.list_all(),
            tracker.incomes.list_all(),
        )

        exported = tracker.transfer.export_json()
        document = json.loads(exported)
        assert document["version"] == "1.0.0"
        assert document["exportDate"] == "2024-06-10T12:00:00"

        other = FinanceTracker(InMemoryKeyValueStore())
        other.transfer.import_json(exported)

        assert other.debts.list_all() == before[0]
        assert other.fixed_bills.list_all() == before[1]
        assert other.incomes.list_all() == before[2]

    def test_projects_are_not_exported(self, tracker):
        tracker.projects.add(Project(name="Site", start_date=NOW))
        document = json.loads(tracker.transfer.export_json())
        assert "projects" not in document


class TestOverviewAndWiring:
    """Tests for the overview and the component factory."""

    def test_overview(self, tracker):
        debt = tracker.debts.quick_add("Card", DebtCategory.CARD, 2000)
        tracker.debts.negotiate(debt.id, _terms(minimum_payment=200))
        tracker.fixed_bills.add(FixedBill(name="Rent", amount=800))
        tracker.incomes.add(Income(name="Salary", amount=4000))

        overview = tracker.overview()
        assert overview.total_monthly_expenses == 1000
        assert overview.net_monthly_balance == 3000
        assert overview.commitment_percentage == pytest.approx(25.0)

    def test_overview_without_income(self, tracker):
        tracker.fixed_bills.add(FixedBill(name="Rent", amount=800))
        assert tracker.overview().commitment_percentage is None

    def test_json_storage_persists_between_sessions(self, tmp_path, clock):
        first = FinanceTracker(JsonFileKeyValueStore(tmp_path), clock=clock)
        debt = first.debts.quick_add("Card", DebtCategory.CARD, 1000)

        second = FinanceTracker(JsonFileKeyValueStore(tmp_path), clock=clock)
        assert second.debts.get(debt.id) == debt

    def test_corrupt_slot_reads_as_empty(self, clock):
        store = InMemoryKeyValueStore({SLOT_DEBTS: "{corrupt"})
        tracker = FinanceTracker(store, clock=clock)
        assert tracker.debts.list_all() == []
        assert tracker.debts.summary().total_debts == 0

    def test_create_store_for_each_backend(self, tmp_path):
        memory = create_store(AppSettings(storage_backend=StorageBackend.MEMORY))
        files = create_store(AppSettings(storage_backend=StorageBackend.JSON, data_dir=tmp_path))

        assert isinstance(memory, InMemoryKeyValueStore)
        assert isinstance(files, JsonFileKeyValueStore)
        assert files.data_dir == tmp_path

    def test_unconfigured_google_sheets_falls_back_to_memory(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        get_settings.cache_clear()

        store = create_store(AppSettings(storage_backend=StorageBackend.GOOGLE_SHEETS))
        assert isinstance(store, InMemoryKeyValueStore)

    def test_create_app_components(self, clock):
        tracker = create_app_components(
            settings=AppSettings(storage_backend=StorageBackend.MEMORY),
            clock=clock,
        )
        assert isinstance(tracker.store, InMemoryKeyValueStore)
        assert tracker.debts.list_all() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
