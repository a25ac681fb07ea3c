"""
Aggregator

Totals and chart series computed over a transaction sequence.

All sums are exact Decimal arithmetic. Nothing here rounds; rounding
belongs to finance_tracker.formatting.
"""

from decimal import Decimal
from typing import Iterable

from finance_tracker.models.reports import ZERO, MonthlyTotals, Summary
from finance_tracker.models.transaction import Transaction


def summary(transactions: Iterable[Transaction]) -> Summary:
    """Total income, total expense and balance. Empty input gives zeros."""
    total_income = ZERO
    total_expense = ZERO
    for transaction in transactions:
        if transaction.is_income:
            total_income += transaction.amount
        else:
            total_expense += transaction.amount
    return Summary.from_totals(total_income, total_expense)


def expenses_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Expense totals per category.

    Only categories with at least one expense appear, in the order they
    are first seen in the ledger.
    """
    totals: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.is_expense:
            totals[transaction.category] = totals.get(transaction.category, ZERO) + transaction.amount
    return totals


def monthly_series(transactions: Iterable[Transaction]) -> list[MonthlyTotals]:
    """
    Income and expense per month, ascending by month key.

    Months with no transactions are not filled in.
    """
    income: dict[str, Decimal] = {}
    expense: dict[str, Decimal] = {}
    for transaction in transactions:
        bucket = income if transaction.is_income else expense
        bucket[transaction.month] = bucket.get(transaction.month, ZERO) + transaction.amount

    months = sorted(set(income) | set(expense))
    return [
        MonthlyTotals(
            month=month,
            income=income.get(month, ZERO),
            expense=expense.get(month, ZERO),
        )
        for month in months
    ]


def category_spent(transactions: Iterable[Transaction], category: str) -> Decimal:
    """Total expense for one category (zero if it has none)."""
    return sum(
        (t.amount for t in transactions if t.is_expense and t.category == category),
        ZERO,
    )
