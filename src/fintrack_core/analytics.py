"""Reporting queries behind the dashboard and analytics pages.

Unlike the advisory operations these are plain reads: store failures
propagate as :class:`~fintrack_core.exceptions.DataAccessError` and the
caller decides how to present them.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from .aggregator import StoreAggregator
from .models.records import TransactionType
from .models.results import (
    BudgetStatus,
    CategoryRef,
    CategorySpending,
    DailySpending,
    DateWindow,
    OverviewReport,
    PeriodComparisonReport,
    ReportPeriod,
    TrendPoint,
)
from .periods import month_key, period_window, shift_months
from .store import FinanceStore
from .tracking import track_budgets

logger = structlog.get_logger()


class AnalyticsService:
    """Read-only financial reports for one user at a time."""

    def __init__(self, store: FinanceStore, aggregator: Optional[StoreAggregator] = None):
        self.store = store
        self.aggregator = aggregator or StoreAggregator(store)

    def overview(self, user_id: str, period: ReportPeriod, *, as_of: date) -> OverviewReport:
        """Current month or year against the previous one."""
        return self.aggregator.compare_periods(user_id, ReportPeriod(period), as_of)

    def spending_by_category(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[CategorySpending]:
        """
        Expense totals per category, largest first.

        Either bound may be omitted; with neither, all history is used.
        Categories that no longer exist are left out.
        """
        window = None
        if start is not None or end is not None:
            window = DateWindow(start=start or date.min, end=end or date.max)

        groups = self.aggregator.sum_by_category(user_id, window, type=TransactionType.EXPENSE)
        grand_total = sum((g.total_amount for g in groups), Decimal("0"))
        result = []
        for agg in groups:
            category = self.store.get_category(agg.key)
            if category is None:
                continue
            result.append(
                CategorySpending(
                    category=CategoryRef.from_category(category),
                    amount=agg.total_amount,
                    count=agg.count,
                    percentage=float(agg.total_amount / grand_total * 100) if grand_total else 0.0,
                )
            )
        return result

    def trends(
        self,
        user_id: str,
        type: TransactionType = TransactionType.EXPENSE,
        period: ReportPeriod = ReportPeriod.MONTH,
        count: int = 6,
        *,
        as_of: date,
    ) -> list[TrendPoint]:
        """One total per calendar period, oldest first, ending with the current one.

        Periods without transactions are reported with a zero total.
        """
        period = ReportPeriod(period)
        type = TransactionType(type)
        points = []
        for back in range(count - 1, -1, -1):
            if period == ReportPeriod.MONTH:
                anchor = shift_months(as_of.replace(day=1), -back)
            else:
                anchor = as_of.replace(year=as_of.year - back, month=1, day=1)
            window = period_window(period, anchor)
            agg = self.aggregator.total(user_id, window, type=type)
            label = (
                month_key(window.start) if period == ReportPeriod.MONTH else str(window.start.year)
            )
            points.append(
                TrendPoint(
                    period=label,
                    start=window.start,
                    end=window.end,
                    type=type,
                    total=agg.total_amount,
                    count=agg.count,
                )
            )
        return points

    def daily_spending(self, user_id: str, days: int = 30, *, as_of: date) -> list[DailySpending]:
        """Expense totals for each day with spending in the last ``days`` days."""
        window = DateWindow(start=as_of - timedelta(days=days), end=as_of)
        return [
            DailySpending(day=date.fromisoformat(agg.key), total=agg.total_amount, count=agg.count)
            for agg in self.aggregator.sum_by_day(user_id, window, type=TransactionType.EXPENSE)
        ]

    def compare_periods(
        self,
        user_id: str,
        first: DateWindow,
        second: DateWindow,
    ) -> PeriodComparisonReport:
        """Two arbitrary windows side by side; changes are relative to ``first``."""
        return self.aggregator.compare_windows(user_id, first, second)

    def budget_tracking(self, user_id: str, *, as_of: date) -> list[BudgetStatus]:
        """Spent, remaining and health of every active budget."""
        statuses = track_budgets(self.store, self.aggregator, user_id, as_of)
        logger.debug("budget_tracking_built", user_id=user_id, count=len(statuses))
        return statuses

