"""Tests for the ExpenseTracker facade and its factory."""

import datetime as dt
import json
from decimal import Decimal

import pytest

from finance_tracker.config import get_settings
from finance_tracker.export import NothingToExportError
from finance_tracker.models import AuditEventType, BudgetStatus, FilterCriteria
from finance_tracker.orchestrator import ExpenseTracker, create_app_components
from finance_tracker.queries import BudgetEvaluator
from finance_tracker.validation import ValidationError


@pytest.fixture
def tracker(store, audit_logger):
    return ExpenseTracker(store, audit_logger=audit_logger)


@pytest.fixture
def populated(tracker):
    tracker.add_transaction("Salary", "1000", "income", "Work", "2024-01-05")
    tracker.add_transaction("Rent", "500", "expense", "Housing", "2024-01-01")
    tracker.add_transaction("Groceries", "80", "expense", "Food", "2024-02-03")
    tracker.set_budget("Housing", "400")
    return tracker


class TestDashboard:

    def test_empty_ledger(self, tracker):
        """Test empty ledger."""
        view = tracker.dashboard()

        assert view.is_empty
        assert view.summary.balance == Decimal("0")
        assert view.transactions == []
        assert view.expenses_by_category == {}
        assert view.monthly_series == []
        assert view.budgets == []
        assert view.alerts == []

    def test_aggregates_cover_the_full_ledger(self, populated):
        """Test aggregates cover the full ledger."""
        view = populated.dashboard(FilterCriteria(month="2024-01", type="expense"))

        assert [t.title for t in view.transactions] == ["Rent"]
        assert view.total_count == 3
        assert view.summary.total_expense == Decimal("580")
        assert view.expenses_by_category == {"Food": Decimal("80"), "Housing": Decimal("500")}
        assert [m.month for m in view.monthly_series] == ["2024-01", "2024-02"]
        assert view.month_options == ["2024-02", "2024-01"]
        assert view.category_options == ["Food", "Housing", "Work"]

    def test_budgets_and_alerts(self, populated):
        """Test budgets and alerts."""
        view = populated.dashboard()

        [housing] = view.budgets
        assert housing.status == BudgetStatus.EXCEEDED
        assert [a.message for a in view.alerts] == ["Housing: Exceeded budget by $100.00"]

    def test_view_reflects_mutations(self, populated):
        """Test view reflects mutations."""
        rent = next(t for t in populated.store.transactions if t.title == "Rent")
        populated.delete_transaction(rent.id)

        view = populated.dashboard()
        assert view.alerts == []
        assert view.total_count == 2

    def test_reset_all(self, populated):
        """Test reset all."""
        populated.reset_all()
        assert populated.dashboard().is_empty


class TestExport:

    def test_export_csv(self, populated, audit_logger):
        """Test CSV export of the populated ledger."""
        filename, content = populated.export_csv(today=dt.date(2024, 3, 1))

        assert filename == "transactions_2024-03-01.csv"
        lines = content.split("\n")
        assert lines[0] == "ID,Title,Amount,Type,Category,Date"
        assert len(lines) == 4
        assert '"Groceries"' in lines[1]
        assert audit_logger.recent_events(1)[0].event_type == AuditEventType.EXPORT_COMPLETED

    def test_export_empty_ledger_raises(self, tracker):
        """Test export empty ledger raises."""
        with pytest.raises(NothingToExportError):
            tracker.export_csv()

    def test_export_content_is_not_audited(self, populated, audit_logger):
        """Test that rendering the CSV records no export until the download happens."""
        filename, content = populated.export_csv_content(today=dt.date(2024, 3, 1))

        assert filename == "transactions_2024-03-01.csv"
        assert content.startswith("ID,Title,Amount,Type,Category,Date\n")
        event_types = [e.event_type for e in audit_logger.recent_events(limit=100)]
        assert AuditEventType.EXPORT_COMPLETED not in event_types

        populated.record_export(filename, 3)
        latest = audit_logger.recent_events(1)[0]
        assert latest.event_type == AuditEventType.EXPORT_COMPLETED

    def test_export_content_empty_ledger_raises(self, tracker):
        """Test that rendering an empty ledger raises NothingToExportError."""
        with pytest.raises(NothingToExportError):
            tracker.export_csv_content()

    def test_escaped_export(self, store):
        """Test escaped export."""
        tracker = ExpenseTracker(store, export_prefix="ledger", csv_escape_titles=True)
        tracker.add_transaction('Say "hi"', "1", "expense", "Other", "2024-01-01")

        filename, content = tracker.export_csv(today=dt.date(2024, 1, 2))
        assert filename == "ledger_2024-01-02.csv"
        assert '"Say ""hi"""' in content


class TestRecentActivity:

    def test_newest_first(self, populated):
        """Test activity is newest first."""
        events = populated.recent_activity(limit=100)
        user_events = [e.event_type for e in events if e.is_user_action]
        assert user_events[:2] == [AuditEventType.BUDGET_SET, AuditEventType.TRANSACTION_ADDED]

    def test_limit(self, populated):
        """Test activity limit."""
        assert len(populated.recent_activity(limit=2)) == 2


class TestLoad:

    def test_corrupt_state_starts_empty(self, kv_store, store, audit_logger):
        """Test corrupt state starts empty."""
        kv_store.set("transactions", "[{broken")
        tracker = ExpenseTracker(store, audit_logger=audit_logger)

        assert tracker.load() is False
        assert tracker.state_was_reset is True
        assert tracker.dashboard().is_empty

    def test_clean_load(self, kv_store, store):
        """Test clean load."""
        kv_store.set("budgets", '{"Food": "100"}')
        tracker = ExpenseTracker(store, evaluator=BudgetEvaluator())

        assert tracker.load() is True
        assert tracker.state_was_reset is False
        assert [b.category for b in tracker.dashboard().budgets] == ["Food"]

    def test_dashboard_renders_oversized_stored_amounts(self, kv_store, store):
        """Test that stored amounts beyond the decimal context still render alerts."""
        kv_store.set("transactions", json.dumps([{
            "id": "1", "title": "Big", "amount": "1e30",
            "type": "expense", "category": "Housing", "date": "2024-01-01",
        }]))
        kv_store.set("budgets", '{"Housing": "1"}')
        tracker = ExpenseTracker(store)

        assert tracker.load() is True
        [alert] = tracker.dashboard().alerts
        assert alert.message == "Housing: Exceeded budget by $1" + "0" * 30 + ".00"


class TestCreateAppComponents:

    @pytest.fixture(autouse=True)
    def isolated_settings(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("LOG_JSON", "false")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_builds_file_backed_tracker(self, tmp_path):
        """Test builds file backed tracker."""
        tracker = create_app_components()
        tracker.add_transaction("Salary", "1000", "income", "Work", "2024-01-05")

        stored = json.loads((tmp_path / "data" / "transactions.json").read_text(encoding="utf-8"))
        assert stored[0]["title"] == "Salary"

        reopened = create_app_components()
        assert [t.title for t in reopened.store.transactions] == ["Salary"]

    def test_memory_backend(self, monkeypatch, tmp_path):
        """Test memory backend."""
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        tracker = create_app_components()
        tracker.set_budget("Food", "10")
        assert not (tmp_path / "data").exists()

    def test_thresholds_and_symbol_from_settings(self, monkeypatch):
        """Test thresholds and symbol from settings."""
        monkeypatch.setenv("BUDGET_WARNING_THRESHOLD_PCT", "10")
        monkeypatch.setenv("BUDGET_DANGER_THRESHOLD_PCT", "20")
        monkeypatch.setenv("CURRENCY_SYMBOL", "£")
        tracker = create_app_components()
        tracker.set_budget("Food", "100")
        tracker.add_transaction("Lunch", "15", "expense", "Food", "2024-01-01")
        tracker.add_transaction("Dinner", "90", "expense", "Food", "2024-01-02")

        view = tracker.dashboard()
        assert view.budgets[0].status == BudgetStatus.EXCEEDED
        assert view.alerts[0].message == "Food: Exceeded budget by £5.00"

    def test_amount_ceiling_from_settings(self, monkeypatch):
        """Test that MAX_AMOUNT rejects oversized amounts before they reach the ledger."""
        monkeypatch.setenv("MAX_AMOUNT", "1000")
        tracker = create_app_components()

        with pytest.raises(ValidationError):
            tracker.add_transaction("Car", "1000.01", "expense", "Transport", "2024-01-01")
        assert tracker.store.transactions == ()

    def test_default_ceiling_rejects_huge_amounts(self):
        """Test that an absurd amount is rejected and the dashboard keeps rendering."""
        tracker = create_app_components()
        with pytest.raises(ValidationError):
            tracker.add_transaction("Big", "1e30", "expense", "Housing", "2024-01-01")

        tracker.set_budget("Housing", "1")
        assert tracker.dashboard().alerts == []

    def test_corrupt_file_is_reported(self, tmp_path):
        """Test corrupt file is reported."""
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "budgets.json").write_text("not json", encoding="utf-8")

        tracker = create_app_components()
        assert tracker.state_was_reset is True
        assert (data_dir / "budgets.json").read_text(encoding="utf-8") == "not json"
