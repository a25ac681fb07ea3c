"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Complete traceability of adds, deletes, budget changes and resets
2. Debugging capability when stored state turns out to be corrupt
3. A recent-activity feed the user can look at

The audit logger:
- Writes structured logs through structlog
- Keeps a bounded in-memory history for the UI
"""

import logging
from collections import deque
from decimal import Decimal
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finance_tracker.models.transaction import Transaction


def configure_logging(
    level: str = "INFO",
    json_logs: bool = True,
    configure_stdlib: bool = True,
) -> None:
    """
    Configure structlog and, optionally, the stdlib root logger it writes through.

    Safe to call more than once; the last call wins.
    """
    if configure_stdlib:
        logging.basicConfig(format="%(message)s", level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


# Configure structlog for local logging. The stdlib root logger is left
# alone until the application configures it from settings.
configure_logging(configure_stdlib=False)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for the activity panel)
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("finance_tracker.audit")

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event.

        Returns the event so callers can inspect it.
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)
        return event

    def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events[:limit]

    def log_transaction_added(self, transaction: Transaction) -> None:
        """Log a new transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction.id,
            title=transaction.title,
            amount=transaction.amount,
            transaction_type=transaction.type.value,
        ))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_transaction_not_found(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_not_found(transaction_id))

    def log_budget_set(
        self,
        category: str,
        limit: Decimal,
        previous: Optional[Decimal],
    ) -> None:
        """Log a budget being created or overwritten."""
        self.log(AuditEventBuilder.budget_set(category, limit, previous))

    def log_ledger_reset(self, transaction_count: int, budget_count: int) -> None:
        self.log(AuditEventBuilder.ledger_reset(transaction_count, budget_count))

    def log_validation_failed(self, operation: str, issues: list[dict]) -> None:
        """Log rejected user input."""
        self.log(AuditEventBuilder.validation_failed(operation, issues))

    def log_state_loaded(self, transaction_count: int, budget_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(transaction_count, budget_count))

    def log_state_persisted(self, transaction_count: int, budget_count: int) -> None:
        self.log(AuditEventBuilder.state_persisted(transaction_count, budget_count))

    def log_state_corrupt(self, key: Optional[str], error_message: str) -> None:
        """Log unreadable stored state (the ledger falls back to empty)."""
        self.log(AuditEventBuilder.state_corrupt(key, error_message))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_error(operation, error_message))

    def log_export_completed(self, filename: str, row_count: int) -> None:
        self.log(AuditEventBuilder.export_completed(filename, row_count))
