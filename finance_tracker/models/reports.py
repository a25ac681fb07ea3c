"""
Report Models for the Expense Tracker

These are the computed, read-only results handed to the presentation
layer: summary totals, chart series and budget evaluations.

DESIGN DECISION: Every report is recomputed from the full ledger on
each change. Nothing here is stored, so these models never need to be
kept in sync with the ledger.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from finance_tracker.models.transaction import FilterCriteria, Transaction


ZERO = Decimal("0")
HUNDRED = Decimal("100")


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class Summary(BaseModel):
    """Income, expense and balance totals for a set of transactions."""
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO

    @classmethod
    def from_totals(cls, total_income: Decimal, total_expense: Decimal) -> "Summary":
        return cls(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
        )

    def combine(self, other: "Summary") -> "Summary":
        """
        Merge two summaries computed over disjoint sets of transactions.

        summary(a + b) == summary(a).combine(summary(b))
        """
        return Summary.from_totals(
            self.total_income + other.total_income,
            self.total_expense + other.total_expense,
        )

    def __add__(self, other: "Summary") -> "Summary":
        if not isinstance(other, Summary):
            return NotImplemented
        return self.combine(other)


class MonthlyTotals(BaseModel):
    """Income and expense totals for one yyyy-mm month."""
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}$",
        description="Year-month key"
    )
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


# =============================================================================
# BUDGET MODELS
# =============================================================================

class BudgetStatus(str, Enum):
    """
    Overall budget severity.

    Ordered: ok < warning < danger < exceeded.
    """
    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"
    EXCEEDED = "exceeded"

    @property
    def severity(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [
    BudgetStatus.OK,
    BudgetStatus.WARNING,
    BudgetStatus.DANGER,
    BudgetStatus.EXCEEDED,
]


class ProgressLevel(str, Enum):
    """
    Colour of the progress bar, based on percentage alone.

    Independent of BudgetStatus.EXCEEDED: a budget that is exceeded is
    also at the danger level whenever its thresholds allow it.
    """
    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


class BudgetEvaluation(BaseModel):
    """Spend compared against the limit for one budgeted category."""
    model_config = ConfigDict(frozen=True)

    category: str
    limit: Decimal = Field(..., gt=0)
    spent: Decimal = Field(..., ge=0)
    percentage: Decimal = Field(
        ...,
        ge=0,
        description="spent / limit * 100, unrounded"
    )
    status: BudgetStatus
    progress_level: ProgressLevel

    @property
    def is_exceeded(self) -> bool:
        return self.status == BudgetStatus.EXCEEDED

    @property
    def overage(self) -> Decimal:
        """How far spend is over the limit (zero when within budget)."""
        return max(self.spent - self.limit, ZERO)

    @property
    def remaining(self) -> Decimal:
        return max(self.limit - self.spent, ZERO)

    @property
    def progress_width(self) -> Decimal:
        """Progress bar fill, capped at 100."""
        return min(self.percentage, HUNDRED)


class BudgetAlert(BaseModel):
    """Alert raised for a category whose spend exceeds its limit."""
    model_config = ConfigDict(frozen=True)

    category: str
    limit: Decimal
    spent: Decimal
    overage: Decimal = Field(..., gt=0)
    message: str = Field(
        ...,
        description='e.g. "Housing: Exceeded budget by $100.00"'
    )


# =============================================================================
# DASHBOARD VIEW MODEL
# =============================================================================

class DashboardView(BaseModel):
    """
    Everything the presentation layer renders for one ledger state.

    The transaction list is filtered; every aggregate is computed over
    the full ledger.
    """
    model_config = ConfigDict(frozen=True)

    criteria: FilterCriteria
    summary: Summary
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Filtered transactions in ledger order"
    )
    total_count: int = Field(
        ...,
        ge=0,
        description="Number of transactions in the whole ledger"
    )
    expenses_by_category: dict[str, Decimal] = Field(default_factory=dict)
    monthly_series: list[MonthlyTotals] = Field(default_factory=list)
    budgets: list[BudgetEvaluation] = Field(default_factory=list)
    alerts: list[BudgetAlert] = Field(default_factory=list)
    month_options: list[str] = Field(default_factory=list)
    category_options: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the ledger itself holds no transactions."""
        return self.total_count == 0
