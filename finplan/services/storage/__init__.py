"""
Storage Services Package

Read-only access to the user's financial data. The in-memory store is the
only bundled backend; real backends implement FinanceDataReader.
"""

from finplan.services.storage.interface import (
    FinanceDataReader,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from finplan.services.storage.memory import InMemoryFinanceStore

__all__ = [
    # Interface
    "FinanceDataReader",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryFinanceStore",
]
