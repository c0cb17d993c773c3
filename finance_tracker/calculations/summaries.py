"""
Aggregation Engine

Folds a collection into its Summary projection. Summaries are computed
on every read from the raw records and the caller's "now"; they are
never written back to storage.

GUARANTEES:
- Only sums what is in the collection - nothing estimated
- Empty collections give zeroed summaries (no division by zero)
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from finance_tracker.calculations.status import (
    debt_status,
    fixed_bill_status,
    income_status,
    project_progress,
)
from finance_tracker.models.common import ZERO
from finance_tracker.models.debt import Debt, DebtStatus
from finance_tracker.models.fixed_bill import FixedBill, FixedBillCategory, FixedBillStatus
from finance_tracker.models.income import MONTHLY_FREQUENCIES, Income, IncomeStatus
from finance_tracker.models.project import Project, ProjectStatus
from finance_tracker.models.summary import (
    DebtSummary,
    FinancialOverview,
    FixedBillSummary,
    IncomeSummary,
    ProjectFinancials,
    ProjectSummary,
)


_DEFAULT_STATUSES = frozenset({DebtStatus.OVERDUE, DebtStatus.DUE_SOON})


def _total(amounts: Iterable[Decimal]) -> Decimal:
    # sum() would start from int 0 and return it for an empty collection
    return sum(amounts, ZERO)


def summarize_debts(debts: Sequence[Debt], now: datetime) -> DebtSummary:
    """
    Totals across all debts.

    average_interest_rate is an unweighted mean over debts, 0 when empty.
    """
    if not debts:
        return DebtSummary()

    return DebtSummary(
        total_debts=_total(debt.total_amount for debt in debts),
        total_remaining=_total(debt.remaining_amount for debt in debts),
        monthly_payments=_total(debt.minimum_payment for debt in debts),
        average_interest_rate=_total(debt.interest_rate for debt in debts) / len(debts),
        debts_in_default=sum(
            1 for debt in debts if debt_status(debt, now) in _DEFAULT_STATUSES
        ),
    )


def summarize_fixed_bills(bills: Sequence[FixedBill], now: datetime) -> FixedBillSummary:
    total = _total(bill.amount for bill in bills)
    paid = _total(bill.amount for bill in bills if bill.is_paid)

    return FixedBillSummary(
        total_monthly_amount=total,
        paid_amount=paid,
        pending_amount=total - paid,
        total_bills=len(bills),
        paid_bills=sum(1 for bill in bills if bill.is_paid),
        overdue_bills=sum(
            1 for bill in bills
            if fixed_bill_status(bill, now) == FixedBillStatus.OVERDUE
        ),
    )


def summarize_incomes(incomes: Sequence[Income], now: datetime) -> IncomeSummary:
    """
    Income totals.

    Only monthly and one-off incomes count towards the monthly total;
    received and pending amounts cover every income.
    """
    return IncomeSummary(
        total_monthly_income=_total(
            income.amount for income in incomes
            if income.frequency in MONTHLY_FREQUENCIES
        ),
        received_amount=_total(income.amount for income in incomes if income.is_received),
        pending_amount=_total(income.amount for income in incomes if not income.is_received),
        total_incomes=len(incomes),
        received_incomes=sum(1 for income in incomes if income.is_received),
        overdue_incomes=sum(
            1 for income in incomes
            if income_status(income, now) == IncomeStatus.OVERDUE
        ),
    )


def project_financials(project: Project) -> ProjectFinancials:
    """Per-project totals and progress."""
    total_costs = _total(cost.amount for cost in project.costs)
    total_revenue = _total(revenue.amount for revenue in project.revenues)

    return ProjectFinancials(
        project_id=project.id,
        total_costs=total_costs,
        total_revenue=total_revenue,
        profit=total_revenue - total_costs,
        pending_revenue=_total(r.amount for r in project.revenues if not r.is_received),
        pending_costs=_total(c.amount for c in project.costs if not c.is_paid),
        progress=project_progress(project),
    )


def summarize_projects(projects: Sequence[Project]) -> ProjectSummary:
    """
    Totals across all projects and their line items.

    Project status is user-set, so no "now" is needed here.
    """
    per_project = [project_financials(project) for project in projects]
    total_revenue = _total(item.total_revenue for item in per_project)
    total_costs = _total(item.total_costs for item in per_project)

    return ProjectSummary(
        total_projects=len(projects),
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.IN_PROGRESS),
        completed_projects=sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
        total_revenue=total_revenue,
        total_costs=total_costs,
        total_profit=total_revenue - total_costs,
        pending_revenue=_total(item.pending_revenue for item in per_project),
        pending_costs=_total(item.pending_costs for item in per_project),
    )


def count_profitable_projects(projects: Iterable[Project]) -> tuple[int, int]:
    """
    (profitable, unprofitable) project counts.

    Break-even projects are in neither bucket.
    """
    profitable = 0
    unprofitable = 0
    for project in projects:
        profit = project_financials(project).profit
        if profit > 0:
            profitable += 1
        elif profit < 0:
            unprofitable += 1
    return profitable, unprofitable


def amount_by_category(bills: Iterable[FixedBill]) -> dict[FixedBillCategory, Decimal]:
    """Monthly amount per bill category. Categories without bills are absent."""
    totals: dict[FixedBillCategory, Decimal] = {}
    for bill in bills:
        if bill.category not in totals:
            totals[bill.category] = ZERO
        totals[bill.category] += bill.amount
    return totals


def income_completion_percentage(summary: IncomeSummary) -> float:
    if summary.total_incomes == 0:
        return 0.0
    return summary.received_incomes / summary.total_incomes * 100


def project_completion_percentage(summary: ProjectSummary) -> float:
    if summary.total_projects == 0:
        return 0.0
    return summary.completed_projects / summary.total_projects * 100


def financial_overview(
    debt_summary: DebtSummary,
    bill_summary: FixedBillSummary,
    income_summary: IncomeSummary,
) -> FinancialOverview:
    """
    Monthly balance across debts, bills and incomes.

    Commitment is (bills + debt payments) / income, in percent, and is
    left undefined (None) when there is no monthly income.
    """
    income = income_summary.total_monthly_income
    expenses = bill_summary.total_monthly_amount + debt_summary.monthly_payments

    return FinancialOverview(
        total_monthly_income=income,
        total_monthly_expenses=expenses,
        net_monthly_balance=income - expenses,
        commitment_percentage=float(expenses / income * 100) if income > ZERO else None,
    )
