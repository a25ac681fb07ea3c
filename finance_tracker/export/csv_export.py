"""
CSV export of the ledger.

Two quoting modes:
- legacy (default): the title is wrapped in double quotes as-is. A title
  containing a double quote produces a malformed row; this matches files
  already produced by earlier versions of the tracker.
- escaped: every field follows RFC 4180 quoting rules via the csv module.
"""

import csv
import datetime as dt
import io
from typing import Iterable

from finance_tracker.errors import TrackerError
from finance_tracker.models.transaction import Transaction


CSV_HEADER = ("ID", "Title", "Amount", "Type", "Category", "Date")


class ExportError(TrackerError):
    """Export could not be produced."""
    pass


class NothingToExportError(ExportError):
    """The ledger holds no transactions."""
    pass


def _row(transaction: Transaction) -> list[str]:
    return [
        transaction.id,
        transaction.title,
        format(transaction.amount, "f"),
        transaction.type.value,
        transaction.category,
        transaction.date.isoformat(),
    ]


def export_transactions_csv(
    transactions: Iterable[Transaction],
    escape_titles: bool = False,
) -> str:
    """
    Render transactions as CSV text, one row per transaction in the given order.

    Rows are separated by "\\n" with no trailing newline. An empty input
    yields the header line only.
    """
    if escape_titles:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerows(_row(t) for t in transactions)
        return buffer.getvalue().rstrip("\n")

    lines = [",".join(CSV_HEADER)]
    for transaction in transactions:
        fields = _row(transaction)
        fields[1] = f'"{fields[1]}"'
        lines.append(",".join(fields))
    return "\n".join(lines)


def export_filename(prefix: str = "transactions", today: dt.date | None = None) -> str:
    """e.g. transactions_2024-01-31.csv"""
    today = today or dt.date.today()
    return f"{prefix}_{today.isoformat()}.csv"
