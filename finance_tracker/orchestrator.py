"""
Main Orchestrator for Finance Tracker

This module ties the pure calculations to the stored collections and
defines the user-facing operations:
1. Debts (quick-add -> negotiate -> delete)
2. Fixed bills (add, toggle paid, opt-in monthly rollover)
3. Incomes (add, toggle received)
4. Projects and their cost/revenue line items
5. Import / export of debts, fixed bills and incomes

DESIGN DECISION: Every mutation is a whole-collection replace:
read the entire collection, build a new list, write it back. There is
exactly one writer (the user), so no locking is done. A combined import
writes three slots one after the other and is not atomic across them.

Derived status and summaries are computed on read, with "now" taken
from an injectable clock, and never written back.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Generic, Optional, TypeVar

import structlog
from pydantic import ValidationError

from finance_tracker.activity import ActivityLogger, configure_logging
from finance_tracker.calculations import (
    amount_by_category,
    count_profitable_projects,
    debt_status,
    financial_overview,
    fixed_bill_status,
    income_status,
    needs_rollover,
    payoff_months,
    project_financials,
    rollover_fixed_bills,
    summarize_debts,
    summarize_fixed_bills,
    summarize_incomes,
    summarize_projects,
)
from finance_tracker.config import AppSettings, StorageBackend, get_settings
from finance_tracker.models import (
    UNSET_CREDITOR,
    ZERO,
    Debt,
    DebtCategory,
    DebtStatus,
    DebtSummary,
    Entity,
    ExportData,
    FinancialOverview,
    FixedBill,
    FixedBillCategory,
    FixedBillStatus,
    FixedBillSummary,
    ImportedData,
    Income,
    IncomeStatus,
    IncomeSummary,
    Installments,
    NegotiationTerms,
    Project,
    ProjectCost,
    ProjectFinancials,
    ProjectRevenue,
    ProjectSummary,
)
from finance_tracker.services.storage import (
    SLOT_DEBTS,
    SLOT_FIXED_BILLS,
    SLOT_INCOMES,
    SLOT_PROJECTS,
    CollectionSlot,
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.validation import (
    ImportValidationError,
    normalize_import,
    parse_import_json,
    serialize_export,
)


Clock = Callable[[], datetime]
EntityT = TypeVar("EntityT", bound=Entity)

logger = structlog.get_logger(__name__)


def system_clock() -> datetime:
    """Local wall-clock time, naive like every stored timestamp."""
    return datetime.now()


class CollectionFlow(Generic[EntityT]):
    """
    Create/read/update/delete over one collection slot.

    Subclasses add the operations specific to their entity.
    """

    entity_type = "entity"

    def __init__(
        self,
        slot: CollectionSlot[EntityT],
        clock: Clock = system_clock,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._slot = slot
        self._clock = clock
        self._activity_logger = activity_logger or ActivityLogger()

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self._clock()

    def list_all(self) -> list[EntityT]:
        return self._slot.load()

    def get(self, entity_id: str) -> Optional[EntityT]:
        for entity in self._slot.load():
            if entity.id == entity_id:
                return entity
        return None

    def add(self, entity: EntityT) -> EntityT:
        items = self._slot.load()
        items.append(entity)
        self._slot.save(items)
        self._activity_logger.log_created(self.entity_type, entity.id, _name_of(entity))
        return entity

    def update(self, entity: EntityT) -> EntityT:
        """
        Replace the stored entity with the same id.

        Raises:
            NotFoundError: If no entity has that id
        """
        updated = self._replace(entity.id, lambda _current: entity)
        self._activity_logger.log_updated(self.entity_type, entity.id, _name_of(entity))
        return updated

    def delete(self, entity_id: str) -> bool:
        """Delete by id. Irreversible. Returns False if nothing matched."""
        items = self._slot.load()
        remaining = [entity for entity in items if entity.id != entity_id]
        if len(remaining) == len(items):
            return False

        self._slot.save(remaining)
        self._activity_logger.log_deleted(self.entity_type, entity_id)
        return True

    def _replace(
        self,
        entity_id: str,
        change: Callable[[EntityT], EntityT],
    ) -> EntityT:
        """Apply `change` to one entity and write the whole collection back."""
        items = self._slot.load()
        for index, current in enumerate(items):
            if current.id == entity_id:
                updated = change(current)
                items[index] = updated
                self._slot.save(items)
                return updated
        raise NotFoundError(f"{self.entity_type} not found: {entity_id}")


# =============================================================================
# DEBTS
# =============================================================================

class DebtFlow(CollectionFlow[Debt]):
    """
    Debt lifecycle.

    Flow:
    1. Quick-add -> only name, category and amount are captured
    2. Negotiate -> full financial terms, optional down payment
    3. Delete -> irreversible, nothing else references a debt
    """

    entity_type = "debt"

    def quick_add(
        self,
        name: str,
        category: DebtCategory,
        total_amount: Decimal,
        due_date: Optional[datetime] = None,
    ) -> Debt:
        """
        Create a debt with its financial terms deferred.

        remaining = total, installments 1/0, no interest, creditor "unset".
        The due date defaults to now.
        """
        debt = Debt(
            name=name,
            category=category,
            total_amount=total_amount,
            remaining_amount=total_amount,
            interest_rate=ZERO,
            due_date=due_date or self._clock(),
            installments=Installments(total=1, paid=0),
            minimum_payment=ZERO,
            creditor=UNSET_CREDITOR,
        )
        return self.add(debt)

    def negotiate(self, debt_id: str, terms: NegotiationTerms) -> Debt:
        """
        Rewrite a debt's financial terms.

        The new balance is (terms.remaining_amount or the debt's total)
        minus the down payment, never below zero.

        Raises:
            NotFoundError: If the debt doesn't exist
        """
        previous: dict[str, Decimal] = {}

        def apply_terms(debt: Debt) -> Debt:
            previous["remaining"] = debt.remaining_amount
            base = terms.remaining_amount or debt.total_amount
            return debt.model_copy(update={
                "remaining_amount": max(ZERO, base - terms.down_payment),
                "interest_rate": terms.interest_rate,
                "due_date": terms.due_date,
                "installments": terms.installments.model_copy(),
                "minimum_payment": terms.minimum_payment,
                "creditor": terms.creditor,
            })

        negotiated = self._replace(debt_id, apply_terms)
        self._activity_logger.log_debt_negotiated(
            debt_id=debt_id,
            previous_remaining=previous["remaining"],
            new_remaining=negotiated.remaining_amount,
            down_payment=terms.down_payment,
        )
        return negotiated

    def list_with_status(self, now: Optional[datetime] = None) -> list[tuple[Debt, DebtStatus]]:
        moment = self._now(now)
        return [(debt, debt_status(debt, moment)) for debt in self.list_all()]

    def summary(self, now: Optional[datetime] = None) -> DebtSummary:
        return summarize_debts(self.list_all(), self._now(now))

    def payoff_estimate(self, debt_id: str, monthly_payment: Decimal) -> float:
        """
        Months to pay off the debt at `monthly_payment` (math.inf = never).

        Raises:
            NotFoundError: If the debt doesn't exist
        """
        debt = self.get(debt_id)
        if debt is None:
            raise NotFoundError(f"debt not found: {debt_id}")
        return payoff_months(debt, monthly_payment)


# =============================================================================
# FIXED BILLS
# =============================================================================

class FixedBillFlow(CollectionFlow[FixedBill]):
    """Recurring monthly bills."""

    entity_type = "fixed_bill"

    def toggle_paid(self, bill_id: str) -> FixedBill:
        """
        Flip is_paid.

        Becoming paid stamps last_paid_date with now; becoming unpaid
        clears it.
        """
        now = self._clock()

        def flip(bill: FixedBill) -> FixedBill:
            paid = not bill.is_paid
            return bill.model_copy(update={
                "is_paid": paid,
                "last_paid_date": now if paid else None,
            })

        toggled = self._replace(bill_id, flip)
        self._activity_logger.log_payment_toggled(self.entity_type, bill_id, toggled.is_paid)
        return toggled

    def apply_rollover(self, now: Optional[datetime] = None) -> list[str]:
        """
        Reset recurring bills paid in an earlier month. Opt-in only.

        Returns the ids of the bills that were reset.
        """
        moment = self._now(now)
        items = self._slot.load()
        reset_ids = [bill.id for bill in items if needs_rollover(bill, moment)]
        if not reset_ids:
            return []

        self._slot.save(rollover_fixed_bills(items, moment))
        self._activity_logger.log_rollover(reset_ids)
        return reset_ids

    def list_with_status(
        self,
        now: Optional[datetime] = None,
    ) -> list[tuple[FixedBill, FixedBillStatus]]:
        moment = self._now(now)
        return [(bill, fixed_bill_status(bill, moment)) for bill in self.list_all()]

    def summary(self, now: Optional[datetime] = None) -> FixedBillSummary:
        return summarize_fixed_bills(self.list_all(), self._now(now))

    def category_breakdown(self) -> dict[FixedBillCategory, Decimal]:
        return amount_by_category(self.list_all())


# =============================================================================
# INCOMES
# =============================================================================

class IncomeFlow(CollectionFlow[Income]):
    entity_type = "income"

    def toggle_received(self, income_id: str) -> Income:
        def flip(income: Income) -> Income:
            return income.model_copy(update={"is_received": not income.is_received})

        toggled = self._replace(income_id, flip)
        self._activity_logger.log_payment_toggled(self.entity_type, income_id, toggled.is_received)
        return toggled

    def list_with_status(
        self,
        now: Optional[datetime] = None,
    ) -> list[tuple[Income, IncomeStatus]]:
        moment = self._now(now)
        return [(income, income_status(income, moment)) for income in self.list_all()]

    def summary(self, now: Optional[datetime] = None) -> IncomeSummary:
        return summarize_incomes(self.list_all(), self._now(now))


# =============================================================================
# PROJECTS
# =============================================================================

class ProjectFlow(CollectionFlow[Project]):
    """
    Projects and their line items.

    Costs and revenues are only reachable through their project, and
    deleting a project deletes them with it.
    """

    entity_type = "project"

    def update(self, project: Project) -> Project:
        """
        Update a project's own fields.

        Line items are kept as stored; use the cost/revenue operations
        to change them.
        """
        updated = self._replace(
            project.id,
            lambda current: project.model_copy(update={
                "costs": current.costs,
                "revenues": current.revenues,
            }),
        )
        self._activity_logger.log_updated(self.entity_type, project.id, project.name)
        return updated

    # -- costs ---------------------------------------------------------------

    def add_cost(self, project_id: str, cost: ProjectCost) -> ProjectCost:
        self._replace(
            project_id,
            lambda project: project.model_copy(update={"costs": [*project.costs, cost]}),
        )
        self._activity_logger.log_created("project_cost", cost.id, cost.name)
        return cost

    def update_cost(self, project_id: str, cost: ProjectCost) -> ProjectCost:
        self._replace(project_id, lambda project: project.model_copy(update={
            "costs": _replace_line(project.costs, cost, "project_cost"),
        }))
        self._activity_logger.log_updated("project_cost", cost.id, cost.name)
        return cost

    def delete_cost(self, project_id: str, cost_id: str) -> bool:
        project = self.get(project_id)
        if project is None or not any(cost.id == cost_id for cost in project.costs):
            return False
        self._replace(project_id, lambda current: current.model_copy(update={
            "costs": [cost for cost in current.costs if cost.id != cost_id],
        }))
        self._activity_logger.log_deleted("project_cost", cost_id)
        return True

    def toggle_cost_paid(self, project_id: str, cost_id: str) -> ProjectCost:
        cost = self._find_line(project_id, "costs", cost_id)
        toggled = cost.model_copy(update={"is_paid": not cost.is_paid})
        self._replace(project_id, lambda project: project.model_copy(update={
            "costs": _replace_line(project.costs, toggled, "project_cost"),
        }))
        self._activity_logger.log_payment_toggled("project_cost", cost_id, toggled.is_paid)
        return toggled

    # -- revenues ------------------------------------------------------------

    def add_revenue(self, project_id: str, revenue: ProjectRevenue) -> ProjectRevenue:
        self._replace(
            project_id,
            lambda project: project.model_copy(update={"revenues": [*project.revenues, revenue]}),
        )
        self._activity_logger.log_created("project_revenue", revenue.id, revenue.name)
        return revenue

    def update_revenue(self, project_id: str, revenue: ProjectRevenue) -> ProjectRevenue:
        self._replace(project_id, lambda project: project.model_copy(update={
            "revenues": _replace_line(project.revenues, revenue, "project_revenue"),
        }))
        self._activity_logger.log_updated("project_revenue", revenue.id, revenue.name)
        return revenue

    def delete_revenue(self, project_id: str, revenue_id: str) -> bool:
        project = self.get(project_id)
        if project is None or not any(r.id == revenue_id for r in project.revenues):
            return False
        self._replace(project_id, lambda current: current.model_copy(update={
            "revenues": [r for r in current.revenues if r.id != revenue_id],
        }))
        self._activity_logger.log_deleted("project_revenue", revenue_id)
        return True

    def toggle_revenue_received(self, project_id: str, revenue_id: str) -> ProjectRevenue:
        revenue = self._find_line(project_id, "revenues", revenue_id)
        toggled = revenue.model_copy(update={"is_received": not revenue.is_received})
        self._replace(project_id, lambda project: project.model_copy(update={
            "revenues": _replace_line(project.revenues, toggled, "project_revenue"),
        }))
        self._activity_logger.log_payment_toggled("project_revenue", revenue_id, toggled.is_received)
        return toggled

    # -- reads ---------------------------------------------------------------

    def summary(self) -> ProjectSummary:
        return summarize_projects(self.list_all())

    def financials(self, project_id: str) -> ProjectFinancials:
        project = self.get(project_id)
        if project is None:
            raise NotFoundError(f"project not found: {project_id}")
        return project_financials(project)

    def profitability(self) -> tuple[int, int]:
        """(profitable, unprofitable) project counts."""
        return count_profitable_projects(self.list_all())

    def _find_line(self, project_id: str, field: str, line_id: str) -> Any:
        project = self.get(project_id)
        if project is None:
            raise NotFoundError(f"project not found: {project_id}")
        for line in getattr(project, field):
            if line.id == line_id:
                return line
        raise NotFoundError(f"{field[:-1]} not found in project {project_id}: {line_id}")


def _replace_line(lines: list, line: Entity, entity_type: str) -> list:
    if not any(existing.id == line.id for existing in lines):
        raise NotFoundError(f"{entity_type} not found: {line.id}")
    return [line if existing.id == line.id else existing for existing in lines]


def _name_of(entity: Entity) -> str:
    return getattr(entity, "name", "") or ""


# =============================================================================
# IMPORT / EXPORT
# =============================================================================

class DataTransferFlow:
    """
    Import and export of debts, fixed bills and incomes.

    A successful import replaces all three collections. Validation
    happens first: a rejected payload changes nothing.
    """

    def __init__(
        self,
        debts: CollectionSlot[Debt],
        fixed_bills: CollectionSlot[FixedBill],
        incomes: CollectionSlot[Income],
        clock: Clock = system_clock,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._debts = debts
        self._fixed_bills = fixed_bills
        self._incomes = incomes
        self._clock = clock
        self._activity_logger = activity_logger or ActivityLogger()

    def export_data(self, now: Optional[datetime] = None) -> ExportData:
        data = serialize_export(
            self._debts.load(),
            self._fixed_bills.load(),
            self._incomes.load(),
            now if now is not None else self._clock(),
        )
        self._activity_logger.log_exported(
            len(data.debts), len(data.fixed_bills), len(data.incomes)
        )
        return data

    def export_json(self, now: Optional[datetime] = None) -> str:
        return self.export_data(now).to_json()

    def import_data(self, raw: Any) -> ImportedData:
        """
        Normalize `raw` and replace the three collections with it.

        Raises:
            ImportValidationError: If raw is not an object (nothing is changed)
        """
        try:
            imported = normalize_import(raw)
        except ImportValidationError as e:
            self._activity_logger.log_import_rejected(str(e))
            raise
        return self._replace_all(imported)

    def import_json(self, text: str | bytes) -> ImportedData:
        """
        Decode an export file and import it.

        Raises:
            ImportValidationError: If the file is not a JSON object
        """
        try:
            imported = parse_import_json(text)
        except ImportValidationError as e:
            self._activity_logger.log_import_rejected(str(e))
            raise
        return self._replace_all(imported)

    def _replace_all(self, imported: ImportedData) -> ImportedData:
        self._debts.save(imported.debts)
        self._fixed_bills.save(imported.fixed_bills)
        self._incomes.save(imported.incomes)
        self._activity_logger.log_imported(
            len(imported.debts), len(imported.fixed_bills), len(imported.incomes)
        )
        return imported


# =============================================================================
# WIRING
# =============================================================================

class FinanceTracker:
    """All flows over one store, plus the cross-collection overview."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        clock: Clock = system_clock,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self.store = store
        self._clock = clock
        activity_logger = activity_logger or ActivityLogger()

        debt_slot = CollectionSlot(store, SLOT_DEBTS, Debt, activity_logger)
        bill_slot = CollectionSlot(store, SLOT_FIXED_BILLS, FixedBill, activity_logger)
        income_slot = CollectionSlot(store, SLOT_INCOMES, Income, activity_logger)
        project_slot = CollectionSlot(store, SLOT_PROJECTS, Project, activity_logger)

        self.debts = DebtFlow(debt_slot, clock, activity_logger)
        self.fixed_bills = FixedBillFlow(bill_slot, clock, activity_logger)
        self.incomes = IncomeFlow(income_slot, clock, activity_logger)
        self.projects = ProjectFlow(project_slot, clock, activity_logger)
        self.transfer = DataTransferFlow(
            debt_slot, bill_slot, income_slot, clock, activity_logger
        )

    def overview(self, now: Optional[datetime] = None) -> FinancialOverview:
        """Net monthly balance and commitment across debts, bills and incomes."""
        moment = now if now is not None else self._clock()
        return financial_overview(
            self.debts.summary(moment),
            self.fixed_bills.summary(moment),
            self.incomes.summary(moment),
        )


def create_store(settings: AppSettings) -> KeyValueStoreInterface:
    """
    Build the configured storage backend.

    Google Sheets falls back to in-memory storage when it isn't
    configured, so the tracker still starts.
    """
    if settings.storage_backend == StorageBackend.MEMORY:
        return InMemoryKeyValueStore()

    if settings.storage_backend == StorageBackend.GOOGLE_SHEETS:
        try:
            return GoogleSheetsKeyValueStore(GoogleSheetsClient())
        except (ValidationError, StorageError) as e:
            # Storage not configured - continue without it
            logger.warning("google_sheets_not_configured", error=str(e))
            return InMemoryKeyValueStore()

    return JsonFileKeyValueStore(settings.data_dir)


def create_app_components(
    settings: Optional[AppSettings] = None,
    store: Optional[KeyValueStoreInterface] = None,
    clock: Clock = system_clock,
) -> FinanceTracker:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings. Loaded from the environment if None.
        store: Explicit storage backend, overriding the configured one.
        clock: Source of "now" for every derived status and summary.
    """
    settings = settings or get_settings().app
    configure_logging(settings.log_level)

    return FinanceTracker(
        store=store or create_store(settings),
        clock=clock,
        activity_logger=ActivityLogger(),
    )
