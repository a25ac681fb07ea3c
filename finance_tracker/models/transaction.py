"""
Core Data Models for the Expense Tracker

These models define the strict schemas for the ledger:
1. Transactions (income and expense records)
2. Budgets (per-category spending limits)
3. Filter criteria used to select the visible transactions

DESIGN DECISION: All money is held as Decimal.
Floats are never used for amounts, so sums stay exact no matter how
many transactions are accumulated. Rounding only happens when a value
is formatted for display (see finance_tracker.formatting).
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


ALL = "all"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    CRITICAL: Transactions are immutable once created.
    The only way to change one is to delete it and add a new one.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique, time-derived identifier (epoch milliseconds)"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the money was for"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Positive amount; the sign comes from the type"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    category: str = Field(
        ...,
        description="Free-form category name"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )

    @property
    def month(self) -> str:
        """Year-month key (yyyy-mm) used for grouping and filtering."""
        return self.date.strftime("%Y-%m")

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class Budget(BaseModel):
    """
    A spending limit for one category.

    One budget per category. Setting a budget again overwrites the limit.
    A budget may exist for a category that has no transactions yet.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    category: str = Field(
        ...,
        min_length=1,
        description="Category the limit applies to"
    )
    limit: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Maximum planned spend for the category"
    )


# =============================================================================
# FILTER MODELS
# =============================================================================

class FilterCriteria(BaseModel):
    """
    Criteria selecting the visible subset of the ledger.

    Every criterion defaults to "match everything": "all" for the
    month, category and type, and an empty search text.
    """
    model_config = ConfigDict(frozen=True)

    month: str = Field(
        default=ALL,
        pattern=r"^(all|\d{4}-\d{2})$",
        description='"all" or a yyyy-mm month key'
    )
    category: str = Field(
        default=ALL,
        description='"all" or an exact category name'
    )
    type: str = Field(
        default=ALL,
        pattern="^(all|income|expense)$",
        description='"all", "income" or "expense"'
    )
    search_text: str = Field(
        default="",
        description="Case-insensitive substring to look for in titles"
    )

    @property
    def is_unfiltered(self) -> bool:
        """True when no criterion restricts the ledger."""
        return (
            self.month == ALL
            and self.category == ALL
            and self.type == ALL
            and not self.search_text
        )

    @classmethod
    def build(
        cls,
        month: Optional[str] = None,
        category: Optional[str] = None,
        type: Optional[str] = None,
        search_text: Optional[str] = None,
    ) -> "FilterCriteria":
        """Build criteria treating None as "match everything"."""
        return cls(
            month=month or ALL,
            category=category or ALL,
            type=type or ALL,
            search_text=search_text or "",
        )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user input."""
    model_config = ConfigDict(frozen=True)

    field: str = Field(
        ...,
        description="Input field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
