"""Spend-to-date tracking of active budgets.

Shared by the insight generator, the advice engine and the budget
tracking report so that all three agree on which budgets are active and
which days they cover.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from .aggregator import Aggregator
from .exceptions import DataAccessError
from .models.records import Budget, TransactionType
from .models.results import BudgetHealth, BudgetStatus, CategoryRef, DateWindow
from .money import round_money
from .periods import is_budget_active, resolve_budget_window
from .store import FinanceStore

logger = structlog.get_logger()

WARNING_PCT = 80.0
EXCEEDED_PCT = 100.0


def read_active_budgets(store: FinanceStore, user_id: str, as_of: date) -> list[Budget]:
    """Budgets flagged active whose window covers ``as_of``."""
    try:
        budgets = store.list_active_budgets(user_id)
    except Exception as e:
        raise DataAccessError(
            f"Failed to read budgets: {e}",
            operation="list_active_budgets",
            user_id=user_id,
        ) from e
    active = [b for b in budgets if is_budget_active(b, as_of)]
    if len(active) != len(budgets):
        logger.debug(
            "budgets_outside_window_skipped",
            user_id=user_id,
            skipped=len(budgets) - len(active),
        )
    return active


def health_for(percentage: float) -> BudgetHealth:
    if percentage >= EXCEEDED_PCT:
        return BudgetHealth.EXCEEDED
    if percentage >= WARNING_PCT:
        return BudgetHealth.WARNING
    return BudgetHealth.GOOD


def budget_status(
    aggregator: Aggregator,
    user_id: str,
    budget: Budget,
    as_of: date,
    *,
    until: Optional[date] = None,
) -> BudgetStatus:
    """Spent, remaining and usage percentage of one budget.

    ``until`` caps the days summed; the reported window stays the budget's
    full window.
    """
    window = resolve_budget_window(budget, as_of)
    counted = window
    if until is not None and until < window.end:
        counted = DateWindow(start=window.start, end=until)
    spent = aggregator.total(
        user_id,
        counted,
        type=TransactionType.EXPENSE,
        category_id=budget.category_id,
    ).total_amount
    percentage = float(spent / budget.amount * 100)
    category = (
        CategoryRef.from_category(budget.category)
        if budget.category
        else CategoryRef(id=budget.category_id, name=budget.category_id)
    )
    return BudgetStatus(
        budget_id=budget.id,
        category=category,
        amount=budget.amount,
        period=budget.period,
        window=window,
        spent=spent,
        remaining=round_money(budget.amount - spent),
        percentage=round(percentage, 2),
        health=health_for(percentage),
    )


def track_budgets(
    store: FinanceStore,
    aggregator: Aggregator,
    user_id: str,
    as_of: date,
    *,
    to_date: bool = False,
) -> list[BudgetStatus]:
    """Status of every active budget, in store order.

    With ``to_date`` set, budgets without an explicit end date only count
    spending up to ``as_of``.
    """
    return [
        budget_status(
            aggregator,
            user_id,
            b,
            as_of,
            until=as_of if to_date and b.end_date is None else None,
        )
        for b in read_active_budgets(store, user_id, as_of)
    ]


def usage_ratio(status: BudgetStatus) -> Decimal:
    """Exact spent/amount ratio, for threshold checks that must not round."""
    return status.spent / status.amount
