"""
Audit Models for the Expense Tracker

Every change to the ledger is recorded as an audit event.
This provides:
1. Traceability of every add, delete, budget change and reset
2. Debugging information when stored state turns out to be corrupt
3. A recent-activity feed for the user interface

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every ledger mutation and persistence step has its own event type.
    """
    # Ledger mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    BUDGET_SET = "budget_set"
    LEDGER_RESET = "ledger_reset"

    # Input validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_PERSISTED = "state_persisted"
    STATE_CORRUPT = "state_corrupt"
    STORAGE_ERROR = "storage_error"

    # Export
    EXPORT_COMPLETED = "export_completed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'ledger')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, title, amount, kind)
        event = AuditEventBuilder.state_corrupt(key, error_message)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        title: str,
        amount: Decimal,
        transaction_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {title}",
            details={
                "amount": str(amount),
                "type": transaction_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction deleted: {transaction_id}",
            is_user_action=True,
        )

    @staticmethod
    def transaction_not_found(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Delete ignored, no transaction {transaction_id}",
        )

    @staticmethod
    def budget_set(category: str, limit: Decimal, previous: Optional[Decimal]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=category,
            description=f"Budget set for {category}",
            details={
                "limit": str(limit),
                "previous_limit": str(previous) if previous is not None else None,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_reset(transaction_count: int, budget_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            description="All transactions and budgets were cleared",
            details={
                "transactions_removed": transaction_count,
                "budgets_removed": budget_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(operation: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Validation failed for {operation} with {len(issues)} issues",
            details={
                "operation": operation,
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(transaction_count: int, budget_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="ledger",
            description=(
                f"Loaded {transaction_count} transactions and {budget_count} budgets"
            ),
            details={
                "transactions": transaction_count,
                "budgets": budget_count,
            },
        )

    @staticmethod
    def state_persisted(transaction_count: int, budget_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_PERSISTED,
            severity=AuditSeverity.DEBUG,
            entity_type="ledger",
            description="Ledger state persisted",
            details={
                "transactions": transaction_count,
                "budgets": budget_count,
            },
        )

    @staticmethod
    def state_corrupt(key: Optional[str], error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_CORRUPT,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            entity_id=key,
            description="Stored state is unreadable, starting from an empty ledger",
            error_message=error_message,
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            description=f"Storage {operation} failed",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def export_completed(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            entity_id=filename,
            description=f"Exported {row_count} transactions to {filename}",
            details={
                "filename": filename,
                "rows": row_count,
            },
            is_user_action=True,
        )
