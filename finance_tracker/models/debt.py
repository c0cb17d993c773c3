"""
Debt Models

A debt is something the user owes: a card balance, a financing contract,
a loan. Its status (current / due-soon / overdue) is NOT a field here -
it is derived from the due date and "now" on every read.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from finance_tracker.models.common import (
    ZERO,
    Entity,
    FinanceModel,
    Money,
    NaiveDatetime,
    OptionalNaiveDatetime,
)


class DebtCategory(str, Enum):
    """Kinds of debt the user can record."""
    CARD = "card"
    FINANCING = "financing"
    LOAN = "loan"
    BILL = "bill"
    OTHER = "other"


class DebtStatus(str, Enum):
    """
    Time-relative debt status.

    Derived only - see calculations.status.debt_status.
    """
    CURRENT = "current"
    DUE_SOON = "due-soon"
    OVERDUE = "overdue"


# Creditor recorded by the quick-add flow until terms are negotiated
UNSET_CREDITOR = "unset"


class Installments(FinanceModel):
    """Installment plan of a debt."""

    total: int = Field(
        default=1,
        ge=1,
        description="Number of installments in the plan"
    )
    paid: int = Field(
        default=0,
        ge=0,
        description="Installments already paid"
    )

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.paid)


class Debt(Entity):
    """
    A debt record.

    remaining_amount is expected to stay within 0..total_amount but this
    is not enforced - negotiated balances can legitimately exceed the
    original amount once interest is rolled in.
    """

    name: str = Field(
        default="",
        max_length=200,
        description="Display name"
    )
    category: DebtCategory = Field(
        default=DebtCategory.OTHER,
        description="Debt category"
    )
    total_amount: Money = Field(
        default=ZERO,
        ge=0,
        description="Original amount owed"
    )
    remaining_amount: Money = Field(
        default=ZERO,
        ge=0,
        description="Amount still owed"
    )
    interest_rate: Money = Field(
        default=ZERO,
        ge=0,
        description="Annual interest rate, in percent"
    )
    # Optional only so that an unparsable imported date has a representation
    due_date: OptionalNaiveDatetime = Field(
        default=None,
        description="Next due date"
    )
    installments: Installments = Field(default_factory=Installments)
    minimum_payment: Money = Field(
        default=ZERO,
        ge=0,
        description="Minimum monthly payment"
    )
    creditor: str = Field(
        default="",
        max_length=200,
        description="Who the money is owed to"
    )


class NegotiationTerms(FinanceModel):
    """
    New financial terms for a debt.

    If remaining_amount is None (or zero) the debt's total amount is used
    as the base before the down payment is subtracted.
    """

    remaining_amount: Optional[Money] = Field(default=None, ge=0)
    interest_rate: Money = Field(default=ZERO, ge=0)
    due_date: NaiveDatetime
    installments: Installments = Field(default_factory=Installments)
    minimum_payment: Money = Field(default=ZERO, ge=0)
    creditor: str = Field(default=UNSET_CREDITOR, max_length=200)
    down_payment: Money = Field(
        default=ZERO,
        ge=0,
        description="One-time payment applied to the negotiated balance"
    )
