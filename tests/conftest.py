"""
Shared fixtures for the Expense Tracker tests.

No test touches the real data directory: the ledger runs on the
in-memory backend, and file-backend tests use tmp_path.
"""

import datetime as dt
import itertools

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.ledger import LedgerStore
from finance_tracker.models import Transaction, TransactionType
from finance_tracker.services.storage import InMemoryKeyValueStore


FIXED_MILLIS = 1704067200000  # 2024-01-01T00:00:00Z


def make_transaction(
    id: str,
    title: str,
    amount: str,
    type: str,
    category: str,
    date: str,
) -> Transaction:
    return Transaction(
        id=id,
        title=title,
        amount=amount,
        type=TransactionType(type),
        category=category,
        date=dt.date.fromisoformat(date),
    )


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return AuditLogger(history_size=50)


@pytest.fixture
def clock():
    """Clock that advances one millisecond per call."""
    ticks = itertools.count(FIXED_MILLIS)
    return lambda: next(ticks)


@pytest.fixture
def frozen_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_MILLIS


@pytest.fixture
def store(kv_store, audit_logger, clock):
    return LedgerStore(kv_store, audit_logger=audit_logger, clock=clock)


@pytest.fixture
def salary_rent():
    """Ledger order: newest inserted first (Rent was added after Salary)."""
    return [
        make_transaction("2", "Rent", "500", "expense", "Housing", "2024-01-01"),
        make_transaction("1", "Salary", "1000", "income", "Work", "2024-01-05"),
    ]


@pytest.fixture
def sample_ledger():
    """A few months of mixed transactions, newest inserted first."""
    return [
        make_transaction("6", "Concert tickets", "80.00", "expense", "Entertainment", "2024-03-02"),
        make_transaction("5", "Freelance gig", "450.50", "income", "Work", "2024-02-20"),
        make_transaction("4", "Groceries", "120.25", "expense", "Food", "2024-02-10"),
        make_transaction("3", "Bus pass", "45.00", "expense", "Transportation", "2024-02-01"),
        make_transaction("2", "Rent", "500", "expense", "Housing", "2024-01-01"),
        make_transaction("1", "Salary", "1000", "income", "Work", "2024-01-05"),
    ]


@pytest.fixture
def make_tx():
    """Factory for building transactions inline in a test."""
    return make_transaction


@pytest.fixture
def fixed_millis():
    return FIXED_MILLIS
