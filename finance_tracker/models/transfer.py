"""
Import/Export Envelope

The export file is a JSON document:
    {debts, fixedBills, incomes, exportDate, version}

DESIGN DECISION: version is a static literal. There is no compatibility
negotiation - an import accepts any object with the same field names.
"""

from typing import Optional

from pydantic import Field

from finance_tracker.models.common import FinanceModel, NaiveDatetime, OptionalNaiveDatetime
from finance_tracker.models.debt import Debt
from finance_tracker.models.fixed_bill import FixedBill
from finance_tracker.models.income import Income


EXPORT_VERSION = "1.0.0"


class ExportData(FinanceModel):
    """Snapshot written to an export file."""

    debts: list[Debt] = Field(default_factory=list)
    fixed_bills: list[FixedBill] = Field(default_factory=list)
    incomes: list[Income] = Field(default_factory=list)
    export_date: NaiveDatetime
    version: str = EXPORT_VERSION

    def to_json(self, indent: int = 2) -> str:
        """Render the export file."""
        return self.model_dump_json(by_alias=True, indent=indent)


class ImportedData(FinanceModel):
    """Result of normalizing an import payload."""

    debts: list[Debt] = Field(default_factory=list)
    fixed_bills: list[FixedBill] = Field(default_factory=list)
    incomes: list[Income] = Field(default_factory=list)

    # Carried over from the file when present, informational only
    export_date: OptionalNaiveDatetime = None
    version: Optional[str] = None

    @property
    def record_count(self) -> int:
        return len(self.debts) + len(self.fixed_bills) + len(self.incomes)
