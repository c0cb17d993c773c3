"""
Activity Logger

DESIGN DECISION: Every mutation of a collection is logged.
This provides:
1. Traceability of imports, exports and edits
2. Debugging capability when a summary looks wrong

The activity logger:
- Writes to the local structured log only (no stored history)
"""

import logging
import sys
from decimal import Decimal
from typing import Optional

import structlog

from finance_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Safe to call again - later calls only change the level.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    # basicConfig is a no-op once handlers exist, so set the level explicitly too
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class ActivityLogger:
    """Central activity logging service."""

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("finance_tracker.activity")

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_created(self, entity_type: str, entity_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.entity_created(entity_type, entity_id, name))

    def log_updated(self, entity_type: str, entity_id: str, name: str) -> None:
        self.log(ActivityEventBuilder.entity_updated(entity_type, entity_id, name))

    def log_deleted(self, entity_type: str, entity_id: str) -> None:
        self.log(ActivityEventBuilder.entity_deleted(entity_type, entity_id))

    def log_debt_negotiated(
        self,
        debt_id: str,
        previous_remaining: Decimal,
        new_remaining: Decimal,
        down_payment: Decimal,
    ) -> None:
        self.log(ActivityEventBuilder.debt_negotiated(
            debt_id=debt_id,
            previous_remaining=previous_remaining,
            new_remaining=new_remaining,
            down_payment=down_payment,
        ))

    def log_payment_toggled(self, entity_type: str, entity_id: str, settled: bool) -> None:
        self.log(ActivityEventBuilder.payment_toggled(entity_type, entity_id, settled))

    def log_rollover(self, reset_ids: list[str]) -> None:
        self.log(ActivityEventBuilder.rollover_applied(reset_ids))

    def log_imported(self, debts: int, fixed_bills: int, incomes: int) -> None:
        self.log(ActivityEventBuilder.data_imported(debts, fixed_bills, incomes))

    def log_import_rejected(self, error_message: str) -> None:
        self.log(ActivityEventBuilder.import_rejected(error_message))

    def log_exported(self, debts: int, fixed_bills: int, incomes: int) -> None:
        self.log(ActivityEventBuilder.data_exported(debts, fixed_bills, incomes))

    def log_storage_error(self, slot: str, operation: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.storage_error(slot, operation, error_message))
