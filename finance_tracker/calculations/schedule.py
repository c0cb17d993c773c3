"""
Monthly Rollover Rule for Fixed Bills

Nothing resets a bill's paid flag automatically: a bill paid in January
still reads "paid" in February. This module holds the reset as an
explicit rule that callers opt into (FixedBillFlow.apply_rollover).

Rule: a recurring bill that is paid, and whose last payment falls in an
earlier calendar month than "now", becomes unpaid again. last_paid_date
is kept so the previous payment stays visible.
"""

from datetime import datetime
from typing import Sequence

from finance_tracker.models.fixed_bill import FixedBill


def needs_rollover(bill: FixedBill, now: datetime) -> bool:
    if not (bill.is_recurring and bill.is_paid):
        return False
    if bill.last_paid_date is None:
        return False
    paid = bill.last_paid_date
    return (paid.year, paid.month) < (now.year, now.month)


def rollover_fixed_bill(bill: FixedBill, now: datetime) -> FixedBill:
    """Copy of the bill with the rollover applied, or the bill itself if it doesn't apply."""
    if not needs_rollover(bill, now):
        return bill
    return bill.model_copy(update={"is_paid": False})


def rollover_fixed_bills(bills: Sequence[FixedBill], now: datetime) -> list[FixedBill]:
    return [rollover_fixed_bill(bill, now) for bill in bills]
