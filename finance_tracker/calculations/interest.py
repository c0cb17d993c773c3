"""
Financial Math for Debts

Interest and payoff-time estimates. Rates are annual percentages.
"""

import math
from decimal import Decimal
from typing import Union

from finance_tracker.models.common import ZERO
from finance_tracker.models.debt import Debt
from finance_tracker.models.summary import DebtSummary


# Returned by payoff_months when the payment never catches up with interest
NEVER = math.inf

_MONTHS_PER_YEAR = Decimal(12)
_PERCENT = Decimal(100)


def monthly_interest(principal: Decimal, annual_rate_percent: Decimal) -> Decimal:
    """Interest accrued in one month on `principal`."""
    return Decimal(principal) * Decimal(annual_rate_percent) / _MONTHS_PER_YEAR / _PERCENT


def payoff_months(debt: Debt, monthly_payment: Union[Decimal, int, float]) -> float:
    """
    Months needed to pay off the remaining balance.

    Returns NEVER when the payment does not exceed the interest accruing
    each month. This is a sentinel, not an error.

    Uses months = ceil(ln(1 + remaining * r / payment) / ln(1 + r))
    with r the monthly rate. A zero rate degenerates to remaining / payment.
    """
    remaining = debt.remaining_amount
    if remaining <= ZERO:
        return 0

    payment = Decimal(str(monthly_payment))
    if payment <= monthly_interest(remaining, debt.interest_rate):
        return NEVER

    monthly_rate = debt.interest_rate / _MONTHS_PER_YEAR / _PERCENT
    if monthly_rate == ZERO:
        return math.ceil(remaining / payment)

    # Logarithms are taken in floating point; only the month count is kept
    growth = float(1 + remaining * monthly_rate / payment)
    months = math.log(growth) / math.log(float(1 + monthly_rate))
    return math.ceil(months)


def payoff_progress(summary: DebtSummary) -> float:
    """Share of the original debt already paid off, in percent."""
    if summary.total_debts <= ZERO:
        return 0.0
    return float((summary.total_debts - summary.total_remaining) / summary.total_debts * _PERCENT)
