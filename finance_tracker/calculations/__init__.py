"""
Calculations Package

Pure derivations over the domain models: status, summaries, interest
and the opt-in monthly rollover rule.
"""

from finance_tracker.calculations.interest import (
    NEVER,
    monthly_interest,
    payoff_months,
    payoff_progress,
)
from finance_tracker.calculations.schedule import (
    needs_rollover,
    rollover_fixed_bill,
    rollover_fixed_bills,
)
from finance_tracker.calculations.status import (
    DUE_SOON_DAYS,
    add_months,
    days_until,
    days_until_due,
    days_until_expected,
    debt_status,
    fixed_bill_status,
    income_status,
    month_occurrence,
    next_due_date,
    next_expected_date,
    project_progress,
)
from finance_tracker.calculations.summaries import (
    amount_by_category,
    count_profitable_projects,
    financial_overview,
    income_completion_percentage,
    project_completion_percentage,
    project_financials,
    summarize_debts,
    summarize_fixed_bills,
    summarize_incomes,
    summarize_projects,
)

__all__ = [
    # Interest
    "NEVER",
    "monthly_interest",
    "payoff_months",
    "payoff_progress",
    # Rollover
    "needs_rollover",
    "rollover_fixed_bill",
    "rollover_fixed_bills",
    # Status
    "DUE_SOON_DAYS",
    "add_months",
    "days_until",
    "days_until_due",
    "days_until_expected",
    "debt_status",
    "fixed_bill_status",
    "income_status",
    "month_occurrence",
    "next_due_date",
    "next_expected_date",
    "project_progress",
    # Summaries
    "amount_by_category",
    "count_profitable_projects",
    "financial_overview",
    "income_completion_percentage",
    "project_completion_percentage",
    "project_financials",
    "summarize_debts",
    "summarize_fixed_bills",
    "summarize_incomes",
    "summarize_projects",
]
