"""
Finance Data Reader Interface

DESIGN DECISION: The calculation engine only ever reads user data, so the
storage boundary is a read-only abstract interface. This allows:
1. Swapping the backend (database, API, spreadsheet) without touching the
   calculators
2. Testing the orchestration layer against an in-memory reader
3. A clear contract for what data the engine needs

Writes (recording transactions, editing goals, ...) live in the owning
system, which must call CalculationService.invalidate_user afterwards.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from finplan.models.finance import (
    Category,
    FinancialGoal,
    FinancialProfile,
    Transaction,
)


class FinanceDataReader(ABC):
    """
    Abstract interface for reading a user's financial data.

    All methods are async so network-backed implementations can be used
    without blocking the event loop.
    """

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[FinancialProfile]:
        """
        Retrieve the user's financial profile.

        Args:
            user_id: The user's identifier

        Returns:
            The profile, or None if the user has none
        """
        pass

    @abstractmethod
    async def list_categories(self, user_id: str) -> list[Category]:
        """
        List the user's budget categories.

        Args:
            user_id: The user's identifier

        Returns:
            Categories in storage order
        """
        pass

    @abstractmethod
    async def list_transactions(
        self,
        user_id: str,
        since: Optional[date] = None,
    ) -> list[Transaction]:
        """
        List the user's transactions.

        Args:
            user_id: The user's identifier
            since: Only return transactions dated on or after this day

        Returns:
            Transactions, newest first
        """
        pass

    @abstractmethod
    async def list_goals(self, user_id: str) -> list[FinancialGoal]:
        """
        List the user's goals.

        Args:
            user_id: The user's identifier

        Returns:
            Goals in storage order
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageConnectionError(StorageError):
    """Could not reach the storage backend. Safe to retry."""
    pass
