"""Ledger storage package."""

from finance_tracker.ledger.store import LedgerStore

__all__ = ["LedgerStore"]
