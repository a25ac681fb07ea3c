"""
Data Models Package

This package contains all Pydantic models used by the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    ALL,
    Budget,
    FilterCriteria,
    Transaction,
    TransactionType,
    ValidationIssue,
)
from finance_tracker.models.reports import (
    BudgetAlert,
    BudgetEvaluation,
    BudgetStatus,
    DashboardView,
    MonthlyTotals,
    ProgressLevel,
    Summary,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "ALL",
    "Budget",
    "FilterCriteria",
    "Transaction",
    "TransactionType",
    "ValidationIssue",
    # Report models
    "BudgetAlert",
    "BudgetEvaluation",
    "BudgetStatus",
    "DashboardView",
    "MonthlyTotals",
    "ProgressLevel",
    "Summary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
