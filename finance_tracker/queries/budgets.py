"""
Budget Evaluator

Compares expense spend per category against the budget map.

Two independent judgements are made for each budget:
- status: ok < warning < danger < exceeded (exceeded wins whenever
  spend is over the limit)
- progress_level: the colour of the progress bar, from the percentage
  alone

Thresholds are strict: exactly 70% is still ok, exactly 100% of the
limit is not exceeded.
"""

from decimal import Decimal
from typing import Mapping, Sequence

from finance_tracker.formatting import format_currency
from finance_tracker.models.reports import (
    HUNDRED,
    ZERO,
    BudgetAlert,
    BudgetEvaluation,
    BudgetStatus,
    ProgressLevel,
)
from finance_tracker.models.transaction import Transaction
from finance_tracker.queries.aggregator import expenses_by_category


class BudgetEvaluator:
    """Evaluates every budget against the full ledger."""

    def __init__(
        self,
        warning_threshold_pct: float = 70.0,
        danger_threshold_pct: float = 90.0,
        currency_symbol: str = "$",
    ):
        self._warning = Decimal(str(warning_threshold_pct))
        self._danger = Decimal(str(danger_threshold_pct))
        if self._danger < self._warning:
            raise ValueError("danger threshold must not be below warning threshold")
        self._currency_symbol = currency_symbol

    def evaluate(
        self,
        budgets: Mapping[str, Decimal],
        transactions: Sequence[Transaction],
    ) -> list[BudgetEvaluation]:
        """
        One evaluation per budget, in budget-map order.

        Categories with a budget but no expenses report zero spend.
        """
        spent_by_category = expenses_by_category(transactions)
        return [
            self._evaluate_one(category, limit, spent_by_category.get(category, ZERO))
            for category, limit in budgets.items()
        ]

    def alerts(
        self,
        budgets: Mapping[str, Decimal],
        transactions: Sequence[Transaction],
    ) -> list[BudgetAlert]:
        """Alerts for categories whose spend is over the limit."""
        return [
            BudgetAlert(
                category=evaluation.category,
                limit=evaluation.limit,
                spent=evaluation.spent,
                overage=evaluation.overage,
                message=(
                    f"{evaluation.category}: Exceeded budget by "
                    f"{format_currency(evaluation.overage, self._currency_symbol, grouping=False)}"
                ),
            )
            for evaluation in self.evaluate(budgets, transactions)
            if evaluation.is_exceeded
        ]

    def _evaluate_one(self, category: str, limit: Decimal, spent: Decimal) -> BudgetEvaluation:
        percentage = spent / limit * HUNDRED
        progress_level = self._progress_level(percentage)

        if spent > limit:
            status = BudgetStatus.EXCEEDED
        else:
            status = BudgetStatus(progress_level.value)

        return BudgetEvaluation(
            category=category,
            limit=limit,
            spent=spent,
            percentage=percentage,
            status=status,
            progress_level=progress_level,
        )

    def _progress_level(self, percentage: Decimal) -> ProgressLevel:
        if percentage > self._danger:
            return ProgressLevel.DANGER
        if percentage > self._warning:
            return ProgressLevel.WARNING
        return ProgressLevel.OK
