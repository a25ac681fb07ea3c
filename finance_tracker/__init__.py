"""
Expense Tracker - Core Package

A personal income and expense tracker with per-category budgets.

DESIGN PRINCIPLES:
1. The ledger store is the single source of truth
2. Every view is recomputed from the full ledger
3. Money is Decimal end to end; rounding only for display
4. Fail visibly: bad input and unreadable state are reported, never guessed at
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
