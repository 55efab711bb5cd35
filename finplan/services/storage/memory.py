"""
In-Memory Finance Store

Dictionary-backed FinanceDataReader. Used by the test suite and by
callers that already hold a snapshot of the user's data.
"""

from datetime import date
from typing import Optional

from finplan.models.finance import (
    Category,
    FinancialGoal,
    FinancialProfile,
    Transaction,
)
from finplan.services.storage.interface import FinanceDataReader


class InMemoryFinanceStore(FinanceDataReader):
    """Keeps each user's records in plain dictionaries keyed by user id."""

    def __init__(self):
        self._profiles: dict[str, FinancialProfile] = {}
        self._categories: dict[str, list[Category]] = {}
        self._transactions: dict[str, list[Transaction]] = {}
        self._goals: dict[str, list[FinancialGoal]] = {}

    # Loading helpers

    def put_profile(self, user_id: str, profile: FinancialProfile) -> None:
        self._profiles[user_id] = profile

    def add_category(self, user_id: str, category: Category) -> None:
        self._categories.setdefault(user_id, []).append(category)

    def add_transaction(self, user_id: str, transaction: Transaction) -> None:
        self._transactions.setdefault(user_id, []).append(transaction)

    def add_goal(self, user_id: str, goal: FinancialGoal) -> None:
        self._goals.setdefault(user_id, []).append(goal)

    # FinanceDataReader

    async def get_profile(self, user_id: str) -> Optional[FinancialProfile]:
        return self._profiles.get(user_id)

    async def list_categories(self, user_id: str) -> list[Category]:
        return list(self._categories.get(user_id, []))

    async def list_transactions(
        self,
        user_id: str,
        since: Optional[date] = None,
    ) -> list[Transaction]:
        transactions = self._transactions.get(user_id, [])
        if since is not None:
            transactions = [txn for txn in transactions if txn.date >= since]
        return sorted(transactions, key=lambda txn: txn.date, reverse=True)

    async def list_goals(self, user_id: str) -> list[FinancialGoal]:
        return list(self._goals.get(user_id, []))
