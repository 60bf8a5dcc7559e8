"""Tests for the reporting service."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import AS_OF, FOOD, SALARY, SHOPPING, USER, FailingStore
from fintrack_core import AnalyticsService, DataAccessError
from fintrack_core.models import (
    BudgetHealth,
    BudgetPeriod,
    DateWindow,
    ReportPeriod,
    TransactionType,
)


@pytest.fixture
def analytics(store, make_txn) -> AnalyticsService:
    for amount, category, day in [
        (3000, SALARY, date(2025, 4, 1)),
        (120, FOOD, date(2025, 4, 2)),
        (80, FOOD, date(2025, 4, 2)),
        (300, SHOPPING, date(2025, 4, 9)),
        (2500, SALARY, date(2025, 3, 1)),
        (400, FOOD, date(2025, 3, 12)),
        (900, SHOPPING, date(2024, 12, 20)),
    ]:
        store.add_transaction(make_txn(amount, category, day))
    return AnalyticsService(store)


class TestAnalyticsService:
    """Overview, breakdowns, trends and budget tracking."""

    def test_overview(self, analytics):
        report = analytics.overview(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert report.current.income == Decimal("3000.00")
        assert report.current.expenses == Decimal("500.00")
        assert report.previous.balance == Decimal("2100.00")
        assert report.change.income_change == pytest.approx(20.0)
        assert report.change.expense_change == pytest.approx(25.0)

    def test_spending_by_category_all_time(self, analytics):
        rows = analytics.spending_by_category(USER)
        assert [r.category.id for r in rows] == [SHOPPING.id, FOOD.id]
        assert rows[0].amount == Decimal("1200.00")
        assert rows[0].percentage == pytest.approx(1200 / 1800 * 100)

    def test_spending_by_category_open_ended(self, analytics):
        rows = analytics.spending_by_category(USER, start=date(2025, 3, 1))
        assert [(r.category.id, r.amount) for r in rows] == [
            (FOOD.id, Decimal("600.00")),
            (SHOPPING.id, Decimal("300.00")),
        ]

    def test_monthly_trends_zero_filled(self, analytics):
        points = analytics.trends(USER, TransactionType.EXPENSE, ReportPeriod.MONTH, 6, as_of=AS_OF)
        assert [p.period for p in points] == [
            "2024-11", "2024-12", "2025-01", "2025-02", "2025-03", "2025-04",
        ]
        assert [p.total for p in points] == [
            Decimal("0.00"), Decimal("900.00"), Decimal("0.00"),
            Decimal("0.00"), Decimal("400.00"), Decimal("500.00"),
        ]
        assert points[-1].end == date(2025, 4, 30)

    def test_yearly_income_trends(self, analytics):
        points = analytics.trends(USER, "income", "year", 2, as_of=AS_OF)
        assert [p.period for p in points] == ["2024", "2025"]
        assert points[1].total == Decimal("5500.00")
        assert points[1].type == TransactionType.INCOME

    def test_daily_spending(self, analytics):
        days = analytics.daily_spending(USER, 30, as_of=AS_OF)
        assert [(d.day, d.total, d.count) for d in days] == [
            (date(2025, 4, 2), Decimal("200.00"), 2),
            (date(2025, 4, 9), Decimal("300.00"), 1),
        ]

    def test_compare_periods(self, analytics):
        march = DateWindow(start=date(2025, 3, 1), end=date(2025, 3, 31))
        april = DateWindow(start=date(2025, 4, 1), end=date(2025, 4, 30))
        report = analytics.compare_periods(USER, march, april)
        assert report.first.expenses == Decimal("400.00")
        assert report.change.expense_change == pytest.approx(25.0)

    def test_budget_tracking(self, analytics, store, make_budget):
        store.add_budget(make_budget(1000, FOOD))
        store.add_budget(make_budget(350, SHOPPING))
        store.add_budget(make_budget(200, SHOPPING, start=date(2025, 1, 1),
                                     period=BudgetPeriod.YEARLY))
        store.add_budget(make_budget(10, FOOD, start=date(2025, 3, 1)))

        statuses = analytics.budget_tracking(USER, as_of=AS_OF)

        assert [s.health for s in statuses] == [
            BudgetHealth.GOOD,
            BudgetHealth.WARNING,
            BudgetHealth.EXCEEDED,
        ]
        food = statuses[0]
        assert food.spent == Decimal("200.00")
        assert food.remaining == Decimal("800.00")
        assert food.percentage == 20.0
        # The yearly budget counts every 2025 purchase so far
        assert statuses[2].spent == Decimal("300.00")
        assert statuses[2].window.end == date(2025, 12, 31)

    def test_read_failures_propagate(self):
        with pytest.raises(DataAccessError):
            AnalyticsService(FailingStore()).overview(USER, ReportPeriod.MONTH, as_of=AS_OF)
        with pytest.raises(DataAccessError):
            AnalyticsService(FailingStore()).budget_tracking(USER, as_of=AS_OF)
