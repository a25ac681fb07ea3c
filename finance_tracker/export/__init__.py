"""Ledger export package."""

from finance_tracker.export.csv_export import (
    CSV_HEADER,
    ExportError,
    NothingToExportError,
    export_filename,
    export_transactions_csv,
)

__all__ = [
    "CSV_HEADER",
    "ExportError",
    "NothingToExportError",
    "export_filename",
    "export_transactions_csv",
]
