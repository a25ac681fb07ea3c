"""
Filter Engine

DESIGN DECISION: Filtering is a pure view over the ledger.
The input sequence is captured, never copied or mutated, and the
predicate is re-run on every iteration. Filtering the same ledger
twice with the same criteria always yields the same transactions in
the same order.
"""

from typing import Iterable, Iterator, Sequence

from finance_tracker.models.transaction import ALL, FilterCriteria, Transaction


def matches(transaction: Transaction, criteria: FilterCriteria) -> bool:
    """
    Check one transaction against all four criteria.

    A criterion set to "all" (or an empty search text) always passes.
    """
    if criteria.month != ALL and transaction.month != criteria.month:
        return False
    if criteria.category != ALL and transaction.category != criteria.category:
        return False
    if criteria.type != ALL and transaction.type.value != criteria.type:
        return False
    if criteria.search_text:
        needle = criteria.search_text.lower()
        if needle not in transaction.title.lower():
            return False
    return True


class FilteredTransactions:
    """
    Lazy, restartable subset of a transaction sequence.

    Each iter() walks the captured sequence again, so the result can be
    consumed any number of times.
    """

    def __init__(self, transactions: Sequence[Transaction], criteria: FilterCriteria):
        self._transactions = transactions
        self._criteria = criteria

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def __iter__(self) -> Iterator[Transaction]:
        criteria = self._criteria
        return (t for t in self._transactions if matches(t, criteria))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def to_list(self) -> list[Transaction]:
        return list(self)


def filter_transactions(
    transactions: Sequence[Transaction],
    criteria: FilterCriteria,
) -> FilteredTransactions:
    """Select the transactions matching every criterion, in ledger order."""
    return FilteredTransactions(transactions, criteria)


def available_months(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct yyyy-mm keys present in the ledger, newest first."""
    return sorted({t.month for t in transactions}, reverse=True)


def available_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct category names present in the ledger, sorted."""
    return sorted({t.category for t in transactions})
