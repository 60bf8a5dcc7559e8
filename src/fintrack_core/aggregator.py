"""Period aggregation over a user's transactions.

Every analytics component reads through the :class:`Aggregator` protocol
rather than building store queries itself, so the whole engine can run
against an in-memory fake. :class:`StoreAggregator` is the one
implementation backed by a :class:`~fintrack_core.store.FinanceStore`.

Sums are accumulated in integer cents and converted to two-place
Decimals only when a :class:`PeriodAggregate` is built.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Optional, Protocol, runtime_checkable

import structlog

from .exceptions import DataAccessError
from .models.records import Transaction, TransactionType
from .models.results import (
    DateWindow,
    OverviewReport,
    PeriodAggregate,
    PeriodComparison,
    PeriodComparisonReport,
    PeriodSummary,
    ReportPeriod,
)
from .money import balance_change, from_cents, percent_change, to_cents
from .periods import month_key, period_window, previous_period_window
from .store import FinanceStore

logger = structlog.get_logger()


@runtime_checkable
class Aggregator(Protocol):
    """Typed aggregation queries shared by all analytics components."""

    def total(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
    ) -> PeriodAggregate:
        """Sum and count of every matching transaction."""
        ...

    def sum_by_type(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
    ) -> dict[TransactionType, PeriodAggregate]:
        """One aggregate per transaction type; both types always present."""
        ...

    def sum_by_category(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        """Aggregates keyed by category id, largest total first."""
        ...

    def sum_by_day(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        """Aggregates keyed by ISO day, oldest first."""
        ...

    def sum_by_month(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        """Aggregates keyed by ``YYYY-MM``, oldest first."""
        ...

    def category_usage(
        self,
        user_id: str,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        """Aggregates keyed by category id over all history, most used first."""
        ...

    def summarize(self, user_id: str, window: DateWindow) -> PeriodSummary:
        """Income, expenses and balance over a window."""
        ...

    def compare_periods(
        self,
        user_id: str,
        period: ReportPeriod,
        as_of: date,
    ) -> OverviewReport:
        """Current calendar period against the previous equivalent one."""
        ...


def _build_aggregate(key: str, cents: list[int]) -> PeriodAggregate:
    if not cents:
        return PeriodAggregate(key=key)
    return PeriodAggregate(
        key=key,
        total_amount=from_cents(sum(cents)),
        count=len(cents),
        min_amount=from_cents(min(cents)),
        max_amount=from_cents(max(cents)),
    )


def group_transactions(
    transactions: Iterable[Transaction],
    key_fn: Callable[[Transaction], str],
) -> list[PeriodAggregate]:
    """Group transactions by ``key_fn`` in order of first appearance."""
    groups: dict[str, list[int]] = {}
    for txn in transactions:
        groups.setdefault(key_fn(txn), []).append(to_cents(txn.amount))
    return [_build_aggregate(key, cents) for key, cents in groups.items()]


def compare_summaries(current: PeriodSummary, previous: PeriodSummary) -> PeriodComparison:
    """Percent changes from ``previous`` to ``current``."""
    return PeriodComparison(
        income_change=percent_change(current.income, previous.income),
        expense_change=percent_change(current.expenses, previous.expenses),
        balance_change=balance_change(current.balance, previous.balance),
    )


class StoreAggregator:
    """:class:`Aggregator` backed by a :class:`FinanceStore`.

    Store failures surface as :class:`DataAccessError`; callers decide
    whether to degrade.
    """

    def __init__(self, store: FinanceStore):
        self.store = store

    def _transactions(
        self,
        user_id: str,
        *,
        type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
        window: Optional[DateWindow] = None,
    ) -> list[Transaction]:
        try:
            return self.store.list_transactions(
                user_id, type=type, category_id=category_id, window=window
            )
        except DataAccessError:
            raise
        except Exception as e:
            logger.error("transaction_read_failed", user_id=user_id, error=str(e))
            raise DataAccessError(
                f"Failed to read transactions: {e}",
                operation="list_transactions",
                user_id=user_id,
            ) from e

    def total(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
    ) -> PeriodAggregate:
        txns = self._transactions(user_id, type=type, category_id=category_id, window=window)
        key = type.value if type else "all"
        return _build_aggregate(key, [to_cents(t.amount) for t in txns])

    def sum_by_type(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
    ) -> dict[TransactionType, PeriodAggregate]:
        grouped = {
            agg.key: agg
            for agg in group_transactions(
                self._transactions(user_id, window=window), lambda t: t.type.value
            )
        }
        return {
            t: grouped.get(t.value, PeriodAggregate(key=t.value))
            for t in TransactionType
        }

    def sum_by_category(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        groups = group_transactions(
            self._transactions(user_id, type=type, window=window), lambda t: t.category_id
        )
        # sorted() is stable, so equal totals keep first-appearance order
        return sorted(groups, key=lambda a: a.total_amount, reverse=True)

    def sum_by_day(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        groups = group_transactions(
            self._transactions(user_id, type=type, window=window), lambda t: t.day.isoformat()
        )
        return sorted(groups, key=lambda a: a.key)

    def sum_by_month(
        self,
        user_id: str,
        window: Optional[DateWindow] = None,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        groups = group_transactions(
            self._transactions(user_id, type=type, window=window), lambda t: month_key(t.day)
        )
        return sorted(groups, key=lambda a: a.key)

    def category_usage(
        self,
        user_id: str,
        *,
        type: TransactionType = TransactionType.EXPENSE,
    ) -> list[PeriodAggregate]:
        groups = group_transactions(
            self._transactions(user_id, type=type), lambda t: t.category_id
        )
        return sorted(groups, key=lambda a: a.count, reverse=True)

    def summarize(self, user_id: str, window: DateWindow) -> PeriodSummary:
        by_type = self.sum_by_type(user_id, window)
        income = by_type[TransactionType.INCOME]
        expenses = by_type[TransactionType.EXPENSE]
        return PeriodSummary(
            start=window.start,
            end=window.end,
            income=income.total_amount,
            expenses=expenses.total_amount,
            income_count=income.count,
            expense_count=expenses.count,
        )

    def compare_periods(
        self,
        user_id: str,
        period: ReportPeriod,
        as_of: date,
    ) -> OverviewReport:
        current = self.summarize(user_id, period_window(period, as_of))
        previous = self.summarize(user_id, previous_period_window(period, as_of))
        return OverviewReport(
            period=period,
            current=current,
            previous=previous,
            change=compare_summaries(current, previous),
        )

    def compare_windows(
        self,
        user_id: str,
        first: DateWindow,
        second: DateWindow,
    ) -> PeriodComparisonReport:
        """Two arbitrary windows; percent changes are relative to ``first``."""
        base = self.summarize(user_id, first)
        other = self.summarize(user_id, second)
        return PeriodComparisonReport(
            first=base,
            second=other,
            change=compare_summaries(other, base),
        )
