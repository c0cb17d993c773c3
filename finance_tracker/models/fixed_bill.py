"""Fixed (recurring) bill models."""

from enum import Enum
from typing import Optional

from pydantic import Field

from finance_tracker.models.common import ZERO, Entity, Money, OptionalNaiveDatetime


class FixedBillCategory(str, Enum):
    """Supported fixed bill categories."""
    WATER = "water"
    POWER = "power"
    GAS = "gas"
    INTERNET = "internet"
    PHONE = "phone"
    STREAMING = "streaming"
    GYM = "gym"
    INSURANCE = "insurance"
    CONDO = "condo"
    OTHER = "other"


class FixedBillStatus(str, Enum):
    """Derived status of a fixed bill for the current month."""
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"


class FixedBill(Entity):
    """
    A bill that comes back every month on the same day.

    Only the day of month is stored. is_paid is NOT reset when the month
    turns over - see calculations.schedule for the explicit rollover rule.
    """

    name: str = Field(default="", max_length=200)
    category: FixedBillCategory = FixedBillCategory.OTHER
    amount: Money = Field(default=ZERO, ge=0)
    due_day: int = Field(
        default=1,
        ge=1,
        le=31,
        description="Day of month the bill is due"
    )
    is_paid: bool = False
    last_paid_date: OptionalNaiveDatetime = Field(
        default=None,
        description="Set when the bill is marked paid, cleared when unmarked"
    )
    provider: str = Field(default="", max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_recurring: bool = True
