"""Shared fixtures for fintrack-core tests."""

from datetime import date, datetime
from decimal import Decimal
from itertools import count
from typing import Callable, Optional

import pytest

from fintrack_core import IntelligenceEngine, InMemoryFinanceStore, StoreAggregator
from fintrack_core.models import (
    Budget,
    BudgetPeriod,
    Category,
    Transaction,
    TransactionType,
)

USER = "user-1"
OTHER_USER = "user-2"

# Mid-April so that "this month" is April 2025 and "last month" is March.
AS_OF = date(2025, 4, 15)


FOOD = Category(id="cat-food", name="Food & Dining", type=TransactionType.EXPENSE, icon="🍔")
SHOPPING = Category(id="cat-shopping", name="Shopping", type=TransactionType.EXPENSE, icon="🛍️")
TRANSPORTATION = Category(
    id="cat-transportation", name="Transportation", type=TransactionType.EXPENSE, icon="🚗"
)
BILLS = Category(id="cat-bills", name="Bills & Utilities", type=TransactionType.EXPENSE)
ENTERTAINMENT = Category(id="cat-entertainment", name="Entertainment", type=TransactionType.EXPENSE)
SALARY = Category(id="cat-salary", name="Salary", type=TransactionType.INCOME, icon="💼")


class FailingStore:
    """FinanceStore whose every read fails, for degradation paths."""

    def list_categories(self, user_id, type=None):
        raise RuntimeError("database unavailable")

    def get_category(self, category_id):
        raise RuntimeError("database unavailable")

    def list_transactions(self, user_id, *, type=None, category_id=None, window=None):
        raise RuntimeError("database unavailable")

    def list_active_budgets(self, user_id):
        raise RuntimeError("database unavailable")


@pytest.fixture
def as_of() -> date:
    """Fixed evaluation day."""
    return AS_OF


@pytest.fixture
def default_categories() -> list[Category]:
    """Global categories most tests start from."""
    return [FOOD, SHOPPING, TRANSPORTATION, BILLS, ENTERTAINMENT, SALARY]


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Factory for transactions with sequential ids."""
    ids = count(1)

    def _make(
        amount,
        category: Category,
        day: date,
        *,
        description: Optional[str] = None,
        user_id: str = USER,
    ) -> Transaction:
        return Transaction(
            id=f"txn-{next(ids)}",
            user_id=user_id,
            type=category.type,
            amount=Decimal(str(amount)),
            category_id=category.id,
            description=description,
            date=datetime(day.year, day.month, day.day, 12, 0),
        )

    return _make


@pytest.fixture
def make_budget() -> Callable[..., Budget]:
    """Factory for monthly budgets with sequential ids."""
    ids = count(1)

    def _make(
        amount,
        category: Category,
        start: date = date(2025, 4, 1),
        *,
        period: BudgetPeriod = BudgetPeriod.MONTHLY,
        end: Optional[date] = None,
        is_active: bool = True,
        user_id: str = USER,
    ) -> Budget:
        return Budget(
            id=f"budget-{next(ids)}",
            user_id=user_id,
            category_id=category.id,
            amount=Decimal(str(amount)),
            period=period,
            start_date=start,
            end_date=end,
            is_active=is_active,
        )

    return _make


@pytest.fixture
def store(default_categories: list[Category]) -> InMemoryFinanceStore:
    """Store seeded with the default categories and no activity."""
    return InMemoryFinanceStore(categories=default_categories)


@pytest.fixture
def aggregator(store: InMemoryFinanceStore) -> StoreAggregator:
    return StoreAggregator(store)


@pytest.fixture
def engine(store: InMemoryFinanceStore, as_of: date) -> IntelligenceEngine:
    """Engine over ``store`` with the clock pinned to ``as_of``."""
    return IntelligenceEngine(store, clock=lambda: as_of)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()
