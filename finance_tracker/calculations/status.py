"""
Status Derivation

Pure functions computing a time-relative status for each entity.

GUARANTEES:
- "now" is always an argument; nothing here reads the clock
- Inputs are never mutated
- Every function is total (no failure mode for well-typed input)

Day differences are taken from the full timestamp difference and rounded
up, so time-of-day matters: a debt due in 7 days and 1 minute is still
"current", one due in exactly 7 days is "due-soon".
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from finance_tracker.models.debt import Debt, DebtStatus
from finance_tracker.models.fixed_bill import FixedBill, FixedBillStatus
from finance_tracker.models.income import (
    FREQUENCY_MONTHS,
    Income,
    IncomeFrequency,
    IncomeStatus,
)
from finance_tracker.models.project import Project, ProjectStatus


DUE_SOON_DAYS = 7

_SECONDS_PER_DAY = 24 * 60 * 60


def days_until(target: datetime, now: datetime) -> int:
    """Whole days from now to target, rounded up. Negative once target has passed."""
    return math.ceil((target - now).total_seconds() / _SECONDS_PER_DAY)


def month_occurrence(year: int, month: int, day: int) -> datetime:
    """
    Midnight of the given day, normalizing overflow like a calendar does.

    month may run past 12 (rolls into the next year) and day may run past
    the end of the month (rolls into the next month): day 31 of a 30-day
    month is the 1st of the following month.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1) + timedelta(days=day - 1)


def add_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month and time, `months` later, with overflow normalization."""
    day = month_occurrence(moment.year, moment.month + months, moment.day)
    return datetime.combine(day.date(), moment.time())


# =============================================================================
# DEBTS
# =============================================================================

def debt_status(debt: Debt, now: datetime) -> DebtStatus:
    """
    current / due-soon / overdue from the due date.

    A debt without a due date (unparsable import) is treated as current.
    """
    if debt.due_date is None:
        return DebtStatus.CURRENT

    days_diff = days_until(debt.due_date, now)
    if days_diff < 0:
        return DebtStatus.OVERDUE
    if days_diff <= DUE_SOON_DAYS:
        return DebtStatus.DUE_SOON
    return DebtStatus.CURRENT


# =============================================================================
# FIXED BILLS
# =============================================================================

def fixed_bill_status(bill: FixedBill, now: datetime) -> FixedBillStatus:
    """
    paid / pending / overdue for the current month.

    The due-day occurrence is midnight of that day, so from the first
    moment of the due day onwards an unpaid bill counts as overdue.
    Nothing rolls over to the next month here; see calculations.schedule.
    """
    if bill.is_paid:
        return FixedBillStatus.PAID

    occurrence = month_occurrence(now.year, now.month, bill.due_day)
    if now > occurrence:
        return FixedBillStatus.OVERDUE
    return FixedBillStatus.PENDING


def next_due_date(due_day: int, now: datetime) -> datetime:
    """This month's occurrence if the day hasn't passed yet, otherwise next month's."""
    if now.day <= due_day:
        return month_occurrence(now.year, now.month, due_day)
    return month_occurrence(now.year, now.month + 1, due_day)


def days_until_due(due_day: int, now: datetime) -> int:
    return days_until(next_due_date(due_day, now), now)


# =============================================================================
# INCOMES
# =============================================================================

def income_status(income: Income, now: datetime) -> IncomeStatus:
    if income.is_received:
        return IncomeStatus.RECEIVED
    if income.expected_date is None:
        return IncomeStatus.PENDING
    if now > income.expected_date:
        return IncomeStatus.OVERDUE
    return IncomeStatus.PENDING


def next_expected_date(income: Income) -> Optional[datetime]:
    """
    When a recurring income should arrive next.

    Counts from the expected date, or the received date when there is no
    expected date. None for one-off or non-recurring incomes.
    """
    if not income.is_recurring or income.frequency == IncomeFrequency.ONCE:
        return None

    last_date = income.expected_date or income.received_date
    if last_date is None:
        return None
    return add_months(last_date, FREQUENCY_MONTHS[income.frequency])


def days_until_expected(expected_date: datetime, now: datetime) -> int:
    return days_until(expected_date, now)


# =============================================================================
# PROJECTS
# =============================================================================

def project_progress(project: Project) -> int:
    """
    Percent complete, 0-100.

    Completed is 100, cancelled and planning are 0. Otherwise the share of
    revenue lines already received (0 when there are none).
    """
    if project.status == ProjectStatus.COMPLETED:
        return 100
    if project.status in (ProjectStatus.CANCELLED, ProjectStatus.PLANNING):
        return 0

    total = len(project.revenues)
    if total == 0:
        return 0
    received = sum(1 for revenue in project.revenues if revenue.is_received)
    return _round_half_up(received / total * 100)


def _round_half_up(value: float) -> int:
    # round() would send 12.5 to 12
    return math.floor(value + 0.5)
