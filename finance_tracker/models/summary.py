"""
Summary Projections

Pure folds over the collections. Recomputed on every read, never persisted.
Totals are exact decimals so that partial sums (received + pending, paid +
pending) always add back up to the whole.
"""

from typing import Optional

from pydantic import BaseModel, Field

from finance_tracker.models.common import ZERO, Money


class DebtSummary(BaseModel):
    total_debts: Money = ZERO
    total_remaining: Money = ZERO
    monthly_payments: Money = ZERO
    average_interest_rate: Money = Field(
        default=ZERO,
        description="Unweighted mean of the debts' annual rates"
    )
    debts_in_default: int = Field(
        default=0,
        description="Debts whose derived status is overdue or due-soon"
    )


class FixedBillSummary(BaseModel):
    total_monthly_amount: Money = ZERO
    paid_amount: Money = ZERO
    pending_amount: Money = ZERO
    total_bills: int = 0
    paid_bills: int = 0
    overdue_bills: int = 0


class IncomeSummary(BaseModel):
    total_monthly_income: Money = Field(
        default=ZERO,
        description="Sum over monthly and one-off incomes"
    )
    received_amount: Money = ZERO
    pending_amount: Money = ZERO
    total_incomes: int = 0
    received_incomes: int = 0
    overdue_incomes: int = 0


class ProjectSummary(BaseModel):
    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    total_revenue: Money = ZERO
    total_costs: Money = ZERO
    total_profit: Money = ZERO
    pending_revenue: Money = ZERO
    pending_costs: Money = ZERO


class ProjectFinancials(BaseModel):
    """Per-project totals shown next to each project."""

    project_id: str
    total_costs: Money = ZERO
    total_revenue: Money = ZERO
    profit: Money = ZERO
    pending_revenue: Money = ZERO
    pending_costs: Money = ZERO
    progress: int = Field(default=0, ge=0, le=100)


class FinancialOverview(BaseModel):
    """
    Cross-collection monthly picture.

    commitment_percentage is None when there is no monthly income.
    """

    total_monthly_income: Money = ZERO
    total_monthly_expenses: Money = ZERO
    net_monthly_balance: Money = ZERO
    commitment_percentage: Optional[float] = None

    @property
    def commitment_display(self) -> float:
        """Commitment for display; 0% when it is undefined."""
        return self.commitment_percentage if self.commitment_percentage is not None else 0.0
