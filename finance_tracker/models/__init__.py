"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
Persisted data and export files conform to these schemas.
"""

from finance_tracker.models.common import (
    ZERO,
    Entity,
    FinanceModel,
    Money,
    NaiveDatetime,
    OptionalNaiveDatetime,
    new_entity_id,
    to_naive_datetime,
)
from finance_tracker.models.debt import (
    UNSET_CREDITOR,
    Debt,
    DebtCategory,
    DebtStatus,
    Installments,
    NegotiationTerms,
)
from finance_tracker.models.fixed_bill import (
    FixedBill,
    FixedBillCategory,
    FixedBillStatus,
)
from finance_tracker.models.income import (
    FREQUENCY_MONTHS,
    MONTHLY_FREQUENCIES,
    Income,
    IncomeCategory,
    IncomeFrequency,
    IncomeStatus,
)
from finance_tracker.models.project import (
    CostCategory,
    Project,
    ProjectCategory,
    ProjectCost,
    ProjectRevenue,
    ProjectStatus,
    RevenueInstallment,
)
from finance_tracker.models.summary import (
    DebtSummary,
    FinancialOverview,
    FixedBillSummary,
    IncomeSummary,
    ProjectFinancials,
    ProjectSummary,
)
from finance_tracker.models.transfer import (
    EXPORT_VERSION,
    ExportData,
    ImportedData,
)
from finance_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Base
    "ZERO",
    "Entity",
    "FinanceModel",
    "Money",
    "NaiveDatetime",
    "OptionalNaiveDatetime",
    "new_entity_id",
    "to_naive_datetime",
    # Debts
    "UNSET_CREDITOR",
    "Debt",
    "DebtCategory",
    "DebtStatus",
    "Installments",
    "NegotiationTerms",
    # Fixed bills
    "FixedBill",
    "FixedBillCategory",
    "FixedBillStatus",
    # Incomes
    "FREQUENCY_MONTHS",
    "MONTHLY_FREQUENCIES",
    "Income",
    "IncomeCategory",
    "IncomeFrequency",
    "IncomeStatus",
    # Projects
    "CostCategory",
    "Project",
    "ProjectCategory",
    "ProjectCost",
    "ProjectRevenue",
    "ProjectStatus",
    "RevenueInstallment",
    # Summaries
    "DebtSummary",
    "FinancialOverview",
    "FixedBillSummary",
    "IncomeSummary",
    "ProjectFinancials",
    "ProjectSummary",
    # Import/export
    "EXPORT_VERSION",
    "ExportData",
    "ImportedData",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
