"""
Import Normalization and Export Serialization

DESIGN DECISION: Import is lenient, not strict-schema.

STAGE 1 - SHAPE CHECK:
- The payload must be an object (mapping). Anything else is rejected
  with ImportValidationError before any store mutation.

STAGE 2 - LENIENT COERCION (per record):
- Numbers: parsed to exact decimals; non-numeric, NaN or infinite -> 0;
  negative amounts -> 0
- Booleans: truthiness, the way a JSON-producing UI would read them
- Dates: parsed into naive datetimes, unparsable -> None
- Enums: unknown values -> the enum's "other" member
- Missing or malformed collections -> empty lists

WHY LENIENT:
One bad field must never block the rest of an import. A record that
cannot be built even after coercion is skipped and logged; the others
still go through.

Export is the inverse: a plain snapshot of already well-typed data.
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Optional, Sequence, TypeVar

import structlog
from pydantic import ValidationError

from finance_tracker.models.common import ZERO, new_entity_id, to_naive_datetime
from finance_tracker.models.debt import Debt, DebtCategory, Installments
from finance_tracker.models.fixed_bill import FixedBill, FixedBillCategory
from finance_tracker.models.income import Income, IncomeCategory, IncomeFrequency
from finance_tracker.models.transfer import EXPORT_VERSION, ExportData, ImportedData


logger = structlog.get_logger(__name__)

EnumT = TypeVar("EnumT", bound=Enum)
RecordT = TypeVar("RecordT")

_NAME_LIMIT = 200
_DESCRIPTION_LIMIT = 1000


class ImportValidationError(ValueError):
    """The import payload is unusable as a whole (not an object, not JSON)."""
    pass


class LenientCoercion:
    """
    Coercion strategy for imported fields.

    Every method is total: it returns a safe value instead of raising.
    """

    @staticmethod
    def number(value: Any, default: Decimal = ZERO) -> Decimal:
        """
        Exact decimal value, or `default` for anything non-numeric, zero or
        non-finite.

        Floats go through their shortest repr, so 0.1 becomes Decimal("0.1").
        """
        if value is None:
            return default
        if isinstance(value, bool):
            result = Decimal(int(value))
        elif isinstance(value, int):
            result = Decimal(value)
        elif isinstance(value, (float, str)):
            text = str(value).strip()
            if not text:
                return default
            try:
                result = Decimal(text)
            except InvalidOperation:
                return default
        else:
            return default

        # Magnitudes a JSON number cannot carry count as non-finite too
        if not result.is_finite() or not math.isfinite(float(result)) or result == 0:
            return default
        return result

    @classmethod
    def amount(cls, value: Any) -> Decimal:
        """Non-negative money amount."""
        return max(ZERO, cls.number(value))

    @classmethod
    def integer(cls, value: Any, default: int = 0) -> int:
        return int(cls.number(value, Decimal(default)))

    @classmethod
    def due_day(cls, value: Any) -> int:
        """Day of month, defaulting to 1 and clamped to 1..31."""
        return min(31, max(1, cls.integer(value, 1)))

    @staticmethod
    def boolean(value: Any) -> bool:
        """
        Truthiness of a JSON value.

        Empty containers count as true and NaN as false, as in the
        browser app that produced the export files.
        """
        if isinstance(value, (list, dict)):
            return True
        if isinstance(value, float) and math.isnan(value):
            return False
        return bool(value)

    @staticmethod
    def timestamp(value: Any) -> Optional[datetime]:
        """
        Naive datetime from an ISO-8601 string, a date, or epoch milliseconds.

        Unparsable values give None.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            try:
                moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                return None
            return moment.replace(tzinfo=None)
        try:
            result = to_naive_datetime(value)
        except (TypeError, ValueError):
            return None
        return result if isinstance(result, datetime) else None

    @staticmethod
    def enum(value: Any, enum_type: type[EnumT], default: EnumT) -> EnumT:
        if isinstance(value, str):
            try:
                return enum_type(value.strip())
            except ValueError:
                return default
        return default

    @staticmethod
    def text(value: Any, limit: int = _NAME_LIMIT) -> str:
        if value is None or isinstance(value, (dict, list)):
            return ""
        return str(value).strip()[:limit]

    @classmethod
    def optional_text(cls, value: Any, limit: int = _DESCRIPTION_LIMIT) -> Optional[str]:
        text = cls.text(value, limit)
        return text or None


# =============================================================================
# PER-RECORD COERCION
# =============================================================================

def _record_id(record: Mapping) -> str:
    return LenientCoercion.text(record.get("id")) or new_entity_id()


def coerce_debt(record: Mapping) -> Debt:
    c = LenientCoercion
    installments = record.get("installments")
    if not isinstance(installments, Mapping):
        installments = {}

    return Debt(
        id=_record_id(record),
        name=c.text(record.get("name")),
        category=c.enum(record.get("category"), DebtCategory, DebtCategory.OTHER),
        total_amount=c.amount(record.get("totalAmount")),
        remaining_amount=c.amount(record.get("remainingAmount")),
        interest_rate=c.amount(record.get("interestRate")),
        due_date=c.timestamp(record.get("dueDate")),
        installments=Installments(
            total=max(1, c.integer(installments.get("total"), 1)),
            paid=max(0, c.integer(installments.get("paid"), 0)),
        ),
        minimum_payment=c.amount(record.get("minimumPayment")),
        creditor=c.text(record.get("creditor")),
    )


def coerce_fixed_bill(record: Mapping) -> FixedBill:
    c = LenientCoercion
    return FixedBill(
        id=_record_id(record),
        name=c.text(record.get("name")),
        category=c.enum(record.get("category"), FixedBillCategory, FixedBillCategory.OTHER),
        amount=c.amount(record.get("amount")),
        due_day=c.due_day(record.get("dueDay")),
        is_paid=c.boolean(record.get("isPaid")),
        last_paid_date=c.timestamp(record.get("lastPaidDate")),
        provider=c.text(record.get("provider")),
        description=c.optional_text(record.get("description")),
        is_recurring=c.boolean(record.get("isRecurring")),
    )


def coerce_income(record: Mapping) -> Income:
    c = LenientCoercion
    return Income(
        id=_record_id(record),
        name=c.text(record.get("name")),
        category=c.enum(record.get("category"), IncomeCategory, IncomeCategory.OTHER),
        amount=c.amount(record.get("amount")),
        frequency=c.enum(record.get("frequency"), IncomeFrequency, IncomeFrequency.ONCE),
        received_date=c.timestamp(record.get("receivedDate")),
        expected_date=c.timestamp(record.get("expectedDate")),
        is_received=c.boolean(record.get("isReceived")),
        source=c.text(record.get("source")),
        description=c.optional_text(record.get("description")),
        is_recurring=c.boolean(record.get("isRecurring")),
    )


def _coerce_collection(
    raw: Mapping,
    field: str,
    coerce: Callable[[Mapping], RecordT],
) -> list[RecordT]:
    """Coerce every usable record of raw[field]; skip (and log) the rest."""
    entries = raw.get(field)
    if not isinstance(entries, list):
        return []

    records = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            logger.warning("import_record_skipped", collection=field, index=index,
                           reason="not an object")
            continue
        try:
            records.append(coerce(entry))
        except ValidationError as e:
            logger.warning("import_record_skipped", collection=field, index=index,
                           reason="invalid after coercion", error_count=e.error_count())
    return records


# =============================================================================
# PUBLIC API
# =============================================================================

def normalize_import(raw: Any) -> ImportedData:
    """
    Validate and coerce an import payload into typed collections.

    Raises:
        ImportValidationError: If raw is not an object
    """
    if not isinstance(raw, Mapping):
        raise ImportValidationError(
            f"Invalid import file: expected an object, got {type(raw).__name__}"
        )

    version = raw.get("version")

    return ImportedData(
        debts=_coerce_collection(raw, "debts", coerce_debt),
        fixed_bills=_coerce_collection(raw, "fixedBills", coerce_fixed_bill),
        incomes=_coerce_collection(raw, "incomes", coerce_income),
        export_date=LenientCoercion.timestamp(raw.get("exportDate")),
        version=version if isinstance(version, str) else None,
    )


def parse_import_json(text: str | bytes) -> ImportedData:
    """
    Decode an export file and normalize it.

    Raises:
        ImportValidationError: If the text is not JSON or not an object
    """
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportValidationError(f"Invalid import file: not valid JSON ({e})")
    return normalize_import(raw)


def serialize_export(
    debts: Sequence[Debt],
    fixed_bills: Sequence[FixedBill],
    incomes: Sequence[Income],
    now: datetime,
) -> ExportData:
    """Snapshot of the three collections. No normalization."""
    return ExportData(
        debts=list(debts),
        fixed_bills=list(fixed_bills),
        incomes=list(incomes),
        export_date=now,
        version=EXPORT_VERSION,
    )
