"""
Shared Model Plumbing

Every domain model derives from FinanceModel so that:
1. Python code uses snake_case attributes
2. Persisted slots and export files use camelCase keys
3. Timestamps are always naive datetimes, comparable with an injected "now"

DESIGN DECISION: Timestamps are naive. Aware values are converted to UTC
and stripped, plain dates become midnight. Mixing aware and naive values
would make every status comparison a potential TypeError.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def new_entity_id() -> str:
    """Opaque identifier for a new entity. Never reused."""
    return str(uuid4())


def to_naive_datetime(value: Any) -> Any:
    """
    Normalize a timestamp-ish value to a naive datetime.

    Anything that is not a date, datetime or string is passed through
    untouched so pydantic can report it.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            try:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            except OverflowError:
                # Shifting to UTC would leave year 1..9999
                raise ValueError(f"Timestamp out of range: {value.isoformat()}")
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value


NaiveDatetime = Annotated[datetime, BeforeValidator(to_naive_datetime)]
OptionalNaiveDatetime = Annotated[Optional[datetime], BeforeValidator(to_naive_datetime)]

# Money and rates are exact decimals in Python and plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

ZERO = Decimal("0")


class FinanceModel(BaseModel):
    """Base for all persisted entities."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Entity(FinanceModel):
    """A record in one of the top-level collections (or a project line item)."""

    id: str = Field(
        default_factory=new_entity_id,
        description="Opaque identifier, stable for the entity's lifetime"
    )

    def to_storage_dict(self) -> dict:
        """JSON-ready dict with camelCase keys and ISO-8601 dates."""
        return self.model_dump(mode="json", by_alias=True)
