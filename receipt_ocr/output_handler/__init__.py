"""
Output Handler Module for the Receipt OCR System.

Persists confirmed extraction drafts as expense records (SQLite).

Author: ML Engineering Team
"""

from .expense_store import ExpenseStore

__all__ = ['ExpenseStore']
