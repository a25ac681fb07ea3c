"""Tests for ledger aggregation."""

from decimal import Decimal

from finance_tracker.models import MonthlyTotals, Summary
from finance_tracker.queries import (
    category_spent,
    expenses_by_category,
    monthly_series,
    summary,
)


class TestSummary:

    def test_salary_and_rent(self, salary_rent):
        """Test salary and rent."""
        result = summary(salary_rent)
        assert result == Summary(
            total_income=Decimal("1000"),
            total_expense=Decimal("500"),
            balance=Decimal("500"),
        )

    def test_empty_ledger_is_all_zero(self):
        """Test empty ledger is all zero."""
        result = summary([])
        assert (result.total_income, result.total_expense, result.balance) == (0, 0, 0)

    def test_additive_over_a_partition(self, sample_ledger):
        """Test additive over a partition."""
        for split in range(len(sample_ledger) + 1):
            a, b = sample_ledger[:split], sample_ledger[split:]
            assert summary(a + b) == summary(a).combine(summary(b))
            assert summary(a + b) == summary(a) + summary(b)

    def test_no_float_drift(self, make_tx):
        """Test no float drift."""
        ledger = [
            make_tx(str(i), "Coffee", "0.1", "expense", "Food", "2024-01-01")
            for i in range(10)
        ]
        assert summary(ledger).total_expense == Decimal("1.0")

    def test_negative_balance(self, make_tx):
        """Test negative balance."""
        ledger = [make_tx("1", "Rent", "500", "expense", "Housing", "2024-01-01")]
        assert summary(ledger).balance == Decimal("-500")


class TestExpensesByCategory:

    def test_first_seen_order_and_expenses_only(self, sample_ledger):
        """Test first seen order and expenses only."""
        assert expenses_by_category(sample_ledger) == {
            "Entertainment": Decimal("80.00"),
            "Food": Decimal("120.25"),
            "Transportation": Decimal("45.00"),
            "Housing": Decimal("500"),
        }
        assert list(expenses_by_category(sample_ledger)) == [
            "Entertainment", "Food", "Transportation", "Housing",
        ]

    def test_sums_within_category(self, make_tx):
        """Test sums within category."""
        ledger = [
            make_tx("1", "Lunch", "12.40", "expense", "Food", "2024-01-02"),
            make_tx("2", "Refund", "50", "income", "Food", "2024-01-03"),
            make_tx("3", "Dinner", "30.10", "expense", "Food", "2024-01-04"),
        ]
        assert expenses_by_category(ledger) == {"Food": Decimal("42.50")}

    def test_empty(self):
        """Test empty input."""
        assert expenses_by_category([]) == {}


class TestMonthlySeries:

    def test_ascending_without_gap_filling(self, make_tx):
        """Test ascending without gap filling."""
        ledger = [
            make_tx("3", "Bonus", "200", "income", "Work", "2024-04-15"),
            make_tx("2", "Rent", "500", "expense", "Housing", "2024-01-01"),
            make_tx("1", "Salary", "1000", "income", "Work", "2024-01-05"),
        ]
        assert monthly_series(ledger) == [
            MonthlyTotals(month="2024-01", income=Decimal("1000"), expense=Decimal("500")),
            MonthlyTotals(month="2024-04", income=Decimal("200"), expense=Decimal("0")),
        ]

    def test_year_boundary_sorts_by_key(self, make_tx):
        """Test year boundary sorts by key."""
        ledger = [
            make_tx("1", "A", "1", "expense", "X", "2024-01-01"),
            make_tx("2", "B", "1", "expense", "X", "2023-12-31"),
        ]
        assert [m.month for m in monthly_series(ledger)] == ["2023-12", "2024-01"]

    def test_empty(self):
        """Test empty input."""
        assert monthly_series([]) == []


class TestCategorySpent:

    def test_spent_for_category(self, salary_rent):
        """Test spent for category."""
        assert category_spent(salary_rent, "Housing") == Decimal("500")

    def test_income_does_not_count(self, salary_rent):
        """Test income does not count."""
        assert category_spent(salary_rent, "Work") == Decimal("0")

    def test_unknown_category_is_zero(self, salary_rent):
        """Test unknown category is zero."""
        assert category_spent(salary_rent, "Travel") == Decimal("0")
