"""
Ledger Store

The single source of truth for transactions and budgets.

DESIGN DECISION: The store exclusively owns both collections.
Everything else (filters, aggregation, budget evaluation, the UI) only
ever receives tuples or copies, so nothing outside this module can
mutate the ledger behind its back.

Every mutation follows the same sequence:
1. Validate input (raises ValidationError, state untouched)
2. Apply the change in memory
3. Persist both entries to the key-value store
4. If persisting fails, restore the previous state and re-raise

Canonical order is newest-inserted-first: new transactions go to the head.
"""

import json
import time
from decimal import Decimal
from typing import Any, Callable, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from finance_tracker.audit import AuditLogger
from finance_tracker.models.transaction import Budget, Transaction
from finance_tracker.services.storage import (
    CorruptStateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.validation import TransactionValidator, ValidationError


_TRANSACTION_LIST = TypeAdapter(list[Transaction])


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class LedgerStore:
    """
    Owns the transaction list and the budget map.

    Constructing a store never touches the backend; call load() or
    load_or_reset() to read persisted state.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        transactions_key: str = "transactions",
        budgets_key: str = "budgets",
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the store.

        Args:
            storage: Key-value backend for persistence
            transactions_key: Entry name for the transaction list
            budgets_key: Entry name for the budget mapping
            validator: Input validator (a default one is created if None)
            audit_logger: Audit logger (a local-only one is created if None)
            clock: Returns epoch milliseconds; used to derive transaction ids
        """
        self._storage = storage
        self._transactions_key = transactions_key
        self._budgets_key = budgets_key
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock or _epoch_millis

        self._transactions: list[Transaction] = []
        self._budgets: dict[str, Decimal] = {}

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions, newest-inserted first."""
        return tuple(self._transactions)

    @property
    def budgets(self) -> dict[str, Decimal]:
        """Copy of the budget map (category -> limit) in insertion order."""
        return dict(self._budgets)

    @property
    def is_empty(self) -> bool:
        return not self._transactions

    def get_transaction(self, transaction_id: str) -> Transaction:
        """
        Look up a transaction by id.

        Raises:
            NotFoundError: If no transaction has this id
        """
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        raise NotFoundError(f"Transaction not found: {transaction_id}")

    def get_budget(self, category: str) -> Optional[Budget]:
        limit = self._budgets.get(category)
        if limit is None:
            return None
        return Budget(category=category, limit=limit)

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
        """
        Validate and record a new transaction at the head of the ledger.

        Returns:
            The created Transaction

        Raises:
            ValidationError: If title, amount, type or date are invalid
            StorageError: If persisting fails (the ledger is left unchanged)
        """
        try:
            transaction = self._validator.validate_transaction(
                transaction_id=self._next_id(),
                title=title,
                amount=amount,
                transaction_type=transaction_type,
                category=category,
                date=date,
            )
        except ValidationError as e:
            self._audit_logger.log_validation_failed("add_transaction", e.to_dicts())
            raise

        self._commit([transaction, *self._transactions], self._budgets)
        self._audit_logger.log_transaction_added(transaction)
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """
        Remove a transaction.

        Idempotent: deleting an unknown id is a no-op.

        Returns:
            True if a transaction was removed, False if the id was not found
        """
        remaining = [t for t in self._transactions if t.id != transaction_id]
        if len(remaining) == len(self._transactions):
            self._audit_logger.log_transaction_not_found(transaction_id)
            return False

        self._commit(remaining, self._budgets)
        self._audit_logger.log_transaction_deleted(transaction_id)
        return True

    def set_budget(self, category: Any, amount: Any) -> Budget:
        """
        Create or overwrite the budget for a category.

        Overwriting keeps the category's position in the budget map.

        Raises:
            ValidationError: If the amount is not a positive number
            StorageError: If persisting fails (the ledger is left unchanged)
        """
        try:
            budget = self._validator.validate_budget(category, amount)
        except ValidationError as e:
            self._audit_logger.log_validation_failed("set_budget", e.to_dicts())
            raise

        previous = self._budgets.get(budget.category)
        budgets = dict(self._budgets)
        budgets[budget.category] = budget.limit

        self._commit(self._transactions, budgets)
        self._audit_logger.log_budget_set(budget.category, budget.limit, previous)
        return budget

    def reset_all(self) -> None:
        """
        Clear every transaction and budget, and persist the empty state.

        CRITICAL: Destructive and irreversible. Callers must get explicit
        confirmation from the user before calling this.
        """
        transaction_count = len(self._transactions)
        budget_count = len(self._budgets)

        self._commit([], {})
        self._audit_logger.log_ledger_reset(transaction_count, budget_count)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """
        Replace in-memory state with what the key-value store holds.

        Missing or empty entries are treated as empty collections.
        Nothing is replaced unless both entries parse.

        Raises:
            CorruptStateError: If an entry is present but malformed
            StorageError: If the backend cannot be read
        """
        transactions = self._parse_transactions(self._storage.get(self._transactions_key))
        budgets = self._parse_budgets(self._storage.get(self._budgets_key))

        self._transactions = transactions
        self._budgets = budgets
        self._audit_logger.log_state_loaded(len(transactions), len(budgets))

    def load_or_reset(self) -> bool:
        """
        Load persisted state, falling back to an empty ledger if it is corrupt.

        The corrupt entries are left on disk untouched until the next
        successful mutation overwrites them.

        Returns:
            True if state loaded cleanly, False if the ledger was reset
        """
        try:
            self.load()
            return True
        except CorruptStateError as e:
            self._audit_logger.log_state_corrupt(e.key, str(e))
            self._transactions = []
            self._budgets = {}
            return False

    def persist(self) -> None:
        """
        Write both entries to the key-value store.

        Raises:
            StorageError: If the write fails
        """
        payload = [t.model_dump(mode="json") for t in self._transactions]
        budgets = {category: str(limit) for category, limit in self._budgets.items()}

        self._storage.set_many({
            self._transactions_key: json.dumps(payload),
            self._budgets_key: json.dumps(budgets),
        })
        self._audit_logger.log_state_persisted(len(self._transactions), len(self._budgets))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _commit(
        self,
        transactions: list[Transaction],
        budgets: dict[str, Decimal],
    ) -> None:
        """
        Swap in new state and persist it.

        If the write fails, memory and the stored entries are both put
        back as they were, so a half-finished write never survives a reload.
        """
        previous_transactions = self._transactions
        previous_budgets = self._budgets
        previous_entries = self._read_entries()

        self._transactions = list(transactions)
        self._budgets = dict(budgets)
        try:
            self.persist()
        except StorageError as e:
            self._transactions = previous_transactions
            self._budgets = previous_budgets
            self._audit_logger.log_storage_error("persist", str(e))
            self._restore_entries(previous_entries)
            raise

    def _read_entries(self) -> dict[str, Optional[str]]:
        """Raw stored entries; unreadable ones are left out and never restored."""
        entries: dict[str, Optional[str]] = {}
        for key in (self._transactions_key, self._budgets_key):
            try:
                entries[key] = self._storage.get(key)
            except StorageError as e:
                self._audit_logger.log_storage_error("read", str(e))
        return entries

    def _restore_entries(self, entries: dict[str, Optional[str]]) -> None:
        """Best-effort write-back of entries captured before a failed persist."""
        for key, raw in entries.items():
            try:
                if raw is None:
                    self._storage.delete(key)
                else:
                    self._storage.set(key, raw)
            except StorageError as e:
                self._audit_logger.log_storage_error("restore", str(e))

    def _next_id(self) -> str:
        """Time-derived id, bumped past any id already in use."""
        existing = {t.id for t in self._transactions}
        candidate = self._clock()
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    def _decode(self, raw: Optional[str], key: str) -> Any:
        """Parse JSON with exact decimals; None means "nothing stored"."""
        if raw is None or not raw.strip():
            return None
        try:
            return json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"Entry {key!r} is not valid JSON: {e}", key=key) from e

    def _parse_transactions(self, raw: Optional[str]) -> list[Transaction]:
        key = self._transactions_key
        data = self._decode(raw, key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise CorruptStateError(
                f"Entry {key!r} should hold a list, found {type(data).__name__}",
                key=key,
            )

        try:
            transactions = _TRANSACTION_LIST.validate_python(data)
        except SchemaError as e:
            raise CorruptStateError(f"Entry {key!r} holds invalid transactions: {e}", key=key) from e

        ids = [t.id for t in transactions]
        if len(ids) != len(set(ids)):
            raise CorruptStateError(f"Entry {key!r} holds duplicate transaction ids", key=key)
        return transactions

    def _parse_budgets(self, raw: Optional[str]) -> dict[str, Decimal]:
        key = self._budgets_key
        data = self._decode(raw, key)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise CorruptStateError(
                f"Entry {key!r} should hold an object, found {type(data).__name__}",
                key=key,
            )

        budgets: dict[str, Decimal] = {}
        for category, limit in data.items():
            try:
                budget = Budget(category=category, limit=limit)
            except SchemaError as e:
                raise CorruptStateError(
                    f"Entry {key!r} holds an invalid budget for {category!r}: {e}",
                    key=key,
                ) from e
            budgets[budget.category] = budget.limit
        return budgets
