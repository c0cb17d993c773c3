"""Income models."""

from enum import Enum
from typing import Optional

from pydantic import Field

from finance_tracker.models.common import ZERO, Entity, Money, OptionalNaiveDatetime


class IncomeCategory(str, Enum):
    """Sources of income."""
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    RENT = "rent"
    SALES = "sales"
    BONUS = "bonus"
    OTHER = "other"


class IncomeFrequency(str, Enum):
    """How often an income repeats."""
    ONCE = "once"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"


# Months between occurrences for recurring frequencies
FREQUENCY_MONTHS = {
    IncomeFrequency.MONTHLY: 1,
    IncomeFrequency.QUARTERLY: 3,
    IncomeFrequency.SEMIANNUAL: 6,
    IncomeFrequency.ANNUAL: 12,
}

# Frequencies counted towards the monthly income total
MONTHLY_FREQUENCIES = frozenset({IncomeFrequency.MONTHLY, IncomeFrequency.ONCE})


class IncomeStatus(str, Enum):
    """Derived income status."""
    RECEIVED = "received"
    PENDING = "pending"
    OVERDUE = "overdue"


class Income(Entity):
    """
    An expected or received income.

    received_date may be None only for imported records whose date
    could not be parsed.
    """

    name: str = Field(default="", max_length=200)
    category: IncomeCategory = IncomeCategory.OTHER
    amount: Money = Field(default=ZERO, ge=0)
    frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    received_date: OptionalNaiveDatetime = None
    expected_date: OptionalNaiveDatetime = Field(
        default=None,
        description="When the money is expected; drives the overdue status"
    )
    is_received: bool = False
    source: str = Field(default="", max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_recurring: bool = False
