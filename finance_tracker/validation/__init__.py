"""Import/export validation package."""

from finance_tracker.validation.importer import (
    ImportValidationError,
    LenientCoercion,
    coerce_debt,
    coerce_fixed_bill,
    coerce_income,
    normalize_import,
    parse_import_json,
    serialize_export,
)

__all__ = [
    "ImportValidationError",
    "LenientCoercion",
    "coerce_debt",
    "coerce_fixed_bill",
    "coerce_income",
    "normalize_import",
    "parse_import_json",
    "serialize_export",
]
