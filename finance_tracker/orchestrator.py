"""
Main Orchestrator for the Expense Tracker

This module ties together all the components behind one facade used by
the UI:
1. Mutations (add / delete transaction, set budget, reset) go to the
   LedgerStore
2. The dashboard view is computed from the store's current state by the
   filter engine, the aggregator and the budget evaluator
3. Exports render the full ledger as CSV

DESIGN DECISION: There is no global tracker instance.
create_app_components() builds an explicit LedgerStore from settings and
hands it to the ExpenseTracker, so tests can wire in an in-memory store.
"""

import datetime as dt
from typing import Any, Optional

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import Settings, get_settings
from finance_tracker.export import (
    NothingToExportError,
    export_filename,
    export_transactions_csv,
)
from finance_tracker.ledger import LedgerStore
from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.reports import DashboardView
from finance_tracker.models.transaction import Budget, FilterCriteria, Transaction
from finance_tracker.queries import (
    BudgetEvaluator,
    available_categories,
    available_months,
    expenses_by_category,
    filter_transactions,
    monthly_series,
    summary,
)
from finance_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from finance_tracker.validation import TransactionValidator


class ExpenseTracker:
    """
    Facade over the ledger and its derived views.

    Every read recomputes from the full ledger. Nothing is cached, so a
    view can never be stale after a mutation.
    """

    def __init__(
        self,
        store: LedgerStore,
        evaluator: Optional[BudgetEvaluator] = None,
        audit_logger: Optional[AuditLogger] = None,
        export_prefix: str = "transactions",
        csv_escape_titles: bool = False,
    ):
        self._store = store
        self._evaluator = evaluator or BudgetEvaluator()
        self._audit_logger = audit_logger or AuditLogger()
        self._export_prefix = export_prefix
        self._csv_escape_titles = csv_escape_titles
        self._state_was_reset = False

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def state_was_reset(self) -> bool:
        """True if the last load found corrupt data and started empty."""
        return self._state_was_reset

    def load(self) -> bool:
        """
        Load persisted state, falling back to empty state if it is corrupt.

        Returns:
            True if state loaded cleanly
        """
        loaded = self._store.load_or_reset()
        self._state_was_reset = not loaded
        return loaded

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        title: Any,
        amount: Any,
        transaction_type: Any,
        category: Any,
        date: Any,
    ) -> Transaction:
        return self._store.add_transaction(title, amount, transaction_type, category, date)

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._store.delete_transaction(transaction_id)

    def set_budget(self, category: Any, amount: Any) -> Budget:
        return self._store.set_budget(category, amount)

    def reset_all(self) -> None:
        """Clear the ledger. The caller must have confirmed with the user."""
        self._store.reset_all()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def dashboard(self, criteria: Optional[FilterCriteria] = None) -> DashboardView:
        """
        Build everything the UI renders.

        The criteria only narrow the transaction list. Summary, charts and
        budgets always cover the full ledger.
        """
        criteria = criteria or FilterCriteria()
        transactions = self._store.transactions
        budgets = self._store.budgets

        return DashboardView(
            criteria=criteria,
            summary=summary(transactions),
            transactions=filter_transactions(transactions, criteria).to_list(),
            total_count=len(transactions),
            expenses_by_category=expenses_by_category(transactions),
            monthly_series=monthly_series(transactions),
            budgets=self._evaluator.evaluate(budgets, transactions),
            alerts=self._evaluator.alerts(budgets, transactions),
            month_options=available_months(transactions),
            category_options=available_categories(transactions),
        )

    def export_csv_content(self, today: Optional[dt.date] = None) -> tuple[str, str]:
        """
        Render the full ledger as CSV without recording an export.

        Returns:
            (filename, csv_content)

        Raises:
            NothingToExportError: If the ledger is empty
        """
        transactions = self._store.transactions
        if not transactions:
            raise NothingToExportError("No transactions to export")

        filename = export_filename(self._export_prefix, today)
        content = export_transactions_csv(transactions, escape_titles=self._csv_escape_titles)
        return filename, content

    def export_csv(self, today: Optional[dt.date] = None) -> tuple[str, str]:
        """Render the full ledger as CSV and record the export."""
        filename, content = self.export_csv_content(today)
        self.record_export(filename, len(self._store.transactions))
        return filename, content

    def record_export(self, filename: str, row_count: int) -> None:
        """Audit an export the user actually downloaded."""
        self._audit_logger.log_export_completed(filename, row_count)

    def recent_activity(self, limit: int = 20) -> list[AuditEvent]:
        """Most recent audit events, newest first."""
        return self._audit_logger.recent_events(limit)


def create_storage_backend(settings: Settings) -> KeyValueStore:
    """Build the key-value backend named in the storage settings."""
    storage_settings = settings.storage
    if storage_settings.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage_settings.data_dir)


def create_app_components(settings: Optional[Settings] = None) -> ExpenseTracker:
    """
    Factory function to create a ready-to-use tracker.

    Configures logging, builds the storage backend and the ledger store
    from settings, and loads persisted state (corrupt state is replaced
    by an empty ledger; check ExpenseTracker.state_was_reset).
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage
    budget_settings = settings.budgets

    configure_logging(level=app_settings.log_level, json_logs=app_settings.log_json)

    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)
    store = LedgerStore(
        create_storage_backend(settings),
        transactions_key=storage_settings.transactions_key,
        budgets_key=storage_settings.budgets_key,
        validator=TransactionValidator(max_amount=app_settings.max_amount),
        audit_logger=audit_logger,
    )
    evaluator = BudgetEvaluator(
        warning_threshold_pct=budget_settings.warning_threshold_pct,
        danger_threshold_pct=budget_settings.danger_threshold_pct,
        currency_symbol=app_settings.currency_symbol,
    )

    tracker = ExpenseTracker(
        store,
        evaluator=evaluator,
        audit_logger=audit_logger,
        export_prefix=app_settings.export_filename_prefix,
        csv_escape_titles=app_settings.csv_escape_titles,
    )
    tracker.load()
    return tracker
