"""Read-only persistence contract and an in-memory implementation.

The engine never builds queries itself. It depends on the
:class:`FinanceStore` protocol, which any document store, SQL layer or test
fake can satisfy structurally - no inheritance required.

Example Usage:
    ```python
    store = InMemoryFinanceStore.from_json_file("fixtures/demo.json")
    engine = IntelligenceEngine(store)
    engine.categorize("user-1", "Starbucks coffee", Decimal("4.50"))
    ```
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

import structlog

from .models.records import Budget, Category, Transaction, TransactionType
from .models.results import DateWindow

logger = structlog.get_logger()


@runtime_checkable
class FinanceStore(Protocol):
    """Read-only view of one deployment's transactions, categories and budgets.

    Implementations must only return data owned by (or, for categories,
    visible to) the requested user, and must preserve a stable enumeration
    order for categories since tie-breaking depends on it.
    """

    def list_categories(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
    ) -> list[Category]:
        """Categories visible to the user (global and own), optionally by type."""
        ...

    def get_category(self, category_id: str) -> Optional[Category]:
        """Look up one category by id."""
        ...

    def list_transactions(
        self,
        user_id: str,
        *,
        type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
        window: Optional[DateWindow] = None,
    ) -> list[Transaction]:
        """The user's transactions matching every given filter."""
        ...

    def list_active_budgets(self, user_id: str) -> list[Budget]:
        """The user's budgets flagged active, with ``category`` populated."""
        ...


class InMemoryFinanceStore:
    """List-backed :class:`FinanceStore` for tests, demos and embedding.

    Records are kept in insertion order. The write helpers exist only to
    seed the store; the engine itself never calls them.
    """

    def __init__(
        self,
        categories: Optional[Iterable[Category]] = None,
        transactions: Optional[Iterable[Transaction]] = None,
        budgets: Optional[Iterable[Budget]] = None,
    ):
        self._categories: dict[str, Category] = {}
        self._transactions: list[Transaction] = []
        self._budgets: list[Budget] = []

        for category in categories or []:
            self.add_category(category)
        for transaction in transactions or []:
            self.add_transaction(transaction)
        for budget in budgets or []:
            self.add_budget(budget)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_category(self, category: Category) -> Category:
        self._categories[category.id] = category
        return category

    def add_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.category_id not in self._categories:
            raise ValueError(f"Unknown category: {transaction.category_id}")
        self._transactions.append(transaction)
        return transaction

    def add_budget(self, budget: Budget) -> Budget:
        category = self._categories.get(budget.category_id)
        if category is None:
            raise ValueError(f"Unknown category: {budget.category_id}")
        if category.type != TransactionType.EXPENSE:
            raise ValueError("Budgets must reference an expense category")
        self._budgets.append(budget)
        return budget

    @classmethod
    def from_records(cls, data: dict[str, Any]) -> InMemoryFinanceStore:
        """Build a store from plain dicts keyed by ``categories``,
        ``transactions`` and ``budgets``."""
        store = cls(
            categories=[Category.model_validate(c) for c in data.get("categories", [])],
            transactions=[Transaction.model_validate(t) for t in data.get("transactions", [])],
            budgets=[Budget.model_validate(b) for b in data.get("budgets", [])],
        )
        logger.info(
            "store_loaded",
            categories=len(store._categories),
            transactions=len(store._transactions),
            budgets=len(store._budgets),
        )
        return store

    @classmethod
    def from_json_file(cls, path: str | Path) -> InMemoryFinanceStore:
        """Load a store from a JSON fixture file."""
        with open(path, encoding="utf-8") as f:
            return cls.from_records(json.load(f))

    # ------------------------------------------------------------------
    # FinanceStore protocol
    # ------------------------------------------------------------------

    def list_categories(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
    ) -> list[Category]:
        return [
            c
            for c in self._categories.values()
            if c.is_visible_to(user_id) and (type is None or c.type == type)
        ]

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def list_transactions(
        self,
        user_id: str,
        *,
        type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
        window: Optional[DateWindow] = None,
    ) -> list[Transaction]:
        return [
            t
            for t in self._transactions
            if t.user_id == user_id
            and (type is None or t.type == type)
            and (category_id is None or t.category_id == category_id)
            and (window is None or window.contains(t.day))
        ]

    def list_active_budgets(self, user_id: str) -> list[Budget]:
        return [
            b.model_copy(update={"category": self._categories.get(b.category_id)})
            for b in self._budgets
            if b.user_id == user_id and b.is_active
        ]
