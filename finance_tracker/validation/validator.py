"""
Input Validation

DESIGN DECISION: Raw user input is checked here before it reaches the ledger.
The presentation layer hands over whatever the user typed (strings, floats,
dates); this module turns it into typed values or reports every problem
at once.

Checks:
- Title must be non-empty after trimming whitespace
- Amount must parse as a finite number greater than zero
- Date must be present and a valid ISO calendar date (yyyy-mm-dd)
- Type must be "income" or "expense"

IMPORTANT: Validation NEVER silently fixes issues beyond trimming
whitespace. Anything else is reported for the user to correct.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError as SchemaError

from finance_tracker.errors import TrackerError
from finance_tracker.models.transaction import (
    Budget,
    Transaction,
    TransactionType,
    ValidationIssue,
)


class ValidationError(TrackerError):
    """
    User input was rejected.

    Carries every issue found so the UI can show them together.
    Never retried automatically.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        message = "; ".join(f"{issue.field}: {issue.message}" for issue in self.issues)
        super().__init__(message or "Invalid input")

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]

    def to_dicts(self) -> list[dict]:
        return [issue.model_dump() for issue in self.issues]


def _issue(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(field=field, issue_type=issue_type, message=message)


def _issues_from_schema_error(error: SchemaError) -> list[ValidationIssue]:
    """Convert pydantic's error list into our issue format."""
    issues = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail.get("loc", ())) or "input"
        issues.append(_issue(location, detail.get("type", "invalid_value"), detail.get("msg", "")))
    return issues


class TransactionValidator:
    """
    Validates raw transaction and budget input.

    Each parse_* method returns the typed value or appends to the
    issue list it is given; the validate_* methods raise
    ValidationError when anything was found.
    """

    def __init__(self, max_amount: float = 1_000_000_000.0):
        """
        Args:
            max_amount: Largest amount accepted for a transaction or budget
        """
        self._max_amount = Decimal(str(max_amount))

    def parse_title(self, value: Any, issues: list[ValidationIssue]) -> Optional[str]:
        title = "" if value is None else str(value).strip()
        if not title:
            issues.append(_issue("title", "missing", "Title is required"))
            return None
        return title

    def parse_amount(
        self,
        value: Any,
        issues: list[ValidationIssue],
        field: str = "amount",
    ) -> Optional[Decimal]:
        """
        Parse a positive, finite decimal amount.

        Floats go through str() so 0.1 becomes Decimal("0.1"), not its
        binary approximation.
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(_issue(field, "missing", "Amount is required"))
            return None
        if isinstance(value, bool):
            issues.append(_issue(field, "invalid_format", "Amount must be a number"))
            return None

        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            issues.append(_issue(field, "invalid_format", f"Amount must be a number, got {value!r}"))
            return None

        if not amount.is_finite():
            issues.append(_issue(field, "invalid_value", "Amount must be a finite number"))
            return None
        if amount <= 0:
            issues.append(_issue(field, "invalid_value", "Amount must be greater than zero"))
            return None
        if amount > self._max_amount:
            issues.append(_issue(
                field,
                "suspicious_value",
                f"Amount must not exceed {self._max_amount:,.2f}",
            ))
            return None
        # plain notation, so "1e2" is stored and exported as "100"
        return Decimal(format(amount, "f"))

    def parse_date(self, value: Any, issues: list[ValidationIssue]) -> Optional[dt.date]:
        """Accept date/datetime objects or ISO yyyy-mm-dd strings."""
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(_issue("date", "missing", "Date is required"))
            return None
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        if isinstance(value, str):
            try:
                return dt.date.fromisoformat(value.strip())
            except ValueError:
                pass
        issues.append(_issue("date", "invalid_format", f"Date must be yyyy-mm-dd, got {value!r}"))
        return None

    def parse_type(self, value: Any, issues: list[ValidationIssue]) -> Optional[TransactionType]:
        if isinstance(value, TransactionType):
            return value
        try:
            return TransactionType(str(value).strip().lower())
        except ValueError:
            issues.append(_issue(
                "type",
                "invalid_value",
                f"Type must be 'income' or 'expense', got {value!r}",
            ))
            return None

    def validate_transaction(
        self,
        transaction_id: str,
        title: Any,
        amount: Any,
        transaction_type: Any,
        category: Any,
        date: Any,
    ) -> Transaction:
        """
        Build a Transaction from raw input.

        Raises:
            ValidationError: listing every problem found
        """
        issues: list[ValidationIssue] = []

        parsed_title = self.parse_title(title, issues)
        parsed_amount = self.parse_amount(amount, issues)
        parsed_type = self.parse_type(transaction_type, issues)
        parsed_date = self.parse_date(date, issues)

        if issues:
            raise ValidationError(issues)

        try:
            return Transaction(
                id=transaction_id,
                title=parsed_title,
                amount=parsed_amount,
                type=parsed_type,
                category="" if category is None else str(category),
                date=parsed_date,
            )
        except SchemaError as e:
            raise ValidationError(_issues_from_schema_error(e)) from e

    def validate_budget(self, category: Any, amount: Any) -> Budget:
        """
        Build a Budget from raw input.

        Raises:
            ValidationError: if the category is empty or the amount is not positive
        """
        issues: list[ValidationIssue] = []

        name = "" if category is None else str(category).strip()
        if not name:
            issues.append(_issue("category", "missing", "Budget category is required"))
        limit = self.parse_amount(amount, issues)

        if issues:
            raise ValidationError(issues)

        try:
            return Budget(category=name, limit=limit)
        except SchemaError as e:
            raise ValidationError(_issues_from_schema_error(e)) from e

    def get_user_friendly_summary(self, error: ValidationError) -> str:
        """
        Generate a user-friendly summary of a validation failure.

        This is what the UI shows next to the form.
        """
        lines = ["Please fill all fields with valid values:"]
        for issue in error.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)
