"""Ledger query package: filtering, aggregation and budget evaluation."""

from finance_tracker.queries.aggregator import (
    category_spent,
    expenses_by_category,
    monthly_series,
    summary,
)
from finance_tracker.queries.budgets import BudgetEvaluator
from finance_tracker.queries.filters import (
    FilteredTransactions,
    available_categories,
    available_months,
    filter_transactions,
    matches,
)

__all__ = [
    "BudgetEvaluator",
    "FilteredTransactions",
    "available_categories",
    "available_months",
    "category_spent",
    "expenses_by_category",
    "filter_transactions",
    "matches",
    "monthly_series",
    "summary",
]
