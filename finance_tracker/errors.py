"""
Base exception for the Expense Tracker.

Concrete errors live next to the code that raises them:
- ValidationError: finance_tracker.validation
- StorageError, CorruptStateError, NotFoundError: finance_tracker.services.storage
- ExportError, NothingToExportError: finance_tracker.export

None of them is fatal. The ledger stays usable after any of them.
"""


class TrackerError(Exception):
    """Base exception for all Expense Tracker errors."""
    pass
