"""Tests for the insight rule set and generator."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import AS_OF, FOOD, SALARY, SHOPPING, USER, FailingStore
from fintrack_core import InsightGenerator, StoreAggregator
from fintrack_core.config import InsightConfig
from fintrack_core.insights import (
    InsightContext,
    balance_rule,
    budget_compliance_rule,
    evaluate_rules,
    savings_rate_rule,
)
from fintrack_core.models import (
    Category,
    InsightType,
    PeriodComparison,
    PeriodSummary,
    Priority,
    ReportPeriod,
    TransactionType,
)

APRIL_START = date(2025, 4, 1)
APRIL_END = date(2025, 4, 30)


def _summary(income="0", expenses="0") -> PeriodSummary:
    return PeriodSummary(
        start=APRIL_START,
        end=APRIL_END,
        income=Decimal(income),
        expenses=Decimal(expenses),
    )


def _context(**kwargs) -> InsightContext:
    kwargs.setdefault("period", ReportPeriod.MONTH)
    kwargs.setdefault("current", _summary())
    kwargs.setdefault("comparison", PeriodComparison())
    return InsightContext(**kwargs)


def _titles(report) -> list[str]:
    return [i.title for i in report.insights]


@pytest.fixture
def generator(store) -> InsightGenerator:
    return InsightGenerator(store, StoreAggregator(store))


class TestRules:
    """Each rule in isolation."""

    def test_negative_cash_flow(self):
        insight = balance_rule(_context(current=_summary(income="100", expenses="250.5")))
        assert insight.title == "Negative Cash Flow"
        assert insight.type == InsightType.WARNING
        assert insight.priority == Priority.HIGH
        assert "$150.50" in insight.description

    def test_zero_balance_is_silent(self):
        assert balance_rule(_context()) is None

    def test_savings_rate_needs_income(self):
        assert savings_rate_rule(_context(current=_summary(expenses="10"))) is None

    def test_negative_savings_rate(self):
        insight = savings_rate_rule(_context(current=_summary(income="100", expenses="150")))
        assert insight.title == "Negative Savings Rate"
        assert insight.priority == Priority.HIGH

    def test_no_budgets_is_silent(self):
        assert budget_compliance_rule(_context()) is None

    def test_cap_applies_after_rules(self):
        ctx = _context(
            current=_summary(income="3000", expenses="1000"),
            comparison=PeriodComparison(expense_change=50.0),
            config=InsightConfig(max_insights=2),
        )
        insights = evaluate_rules(ctx)
        assert [i.title for i in insights] == ["Positive Cash Flow", "Spending Increase Detected"]

    def test_floor_adds_summary(self):
        insights = evaluate_rules(_context())
        assert len(insights) == 1
        assert insights[0].title == "Financial Summary"
        assert insights[0].description == (
            "This month, you earned $0.00 and spent $0.00, resulting in a surplus of $0.00."
        )


class TestInsightGenerator:
    """End-to-end generation against the in-memory store."""

    def test_empty_history_gives_single_summary(self, generator):
        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert _titles(report) == ["Financial Summary"]
        assert report.degraded is False

    def test_transport_budget_exceeded(self, store, make_txn, make_budget):
        """$250 spent against a $200 Transport budget."""
        transport = Category(id="cat-transport", name="Transport", type=TransactionType.EXPENSE)
        store.add_category(transport)
        store.add_budget(make_budget(200, transport))
        store.add_transaction(make_txn(150, transport, date(2025, 4, 3)))
        store.add_transaction(make_txn(100, transport, date(2025, 4, 10)))

        report = InsightGenerator(store, StoreAggregator(store)).generate(
            USER, ReportPeriod.MONTH, as_of=AS_OF
        )
        [exceeded] = [i for i in report.insights if i.title == "Budget Exceeded"]
        assert exceeded.type == InsightType.WARNING
        assert exceeded.priority == Priority.HIGH
        assert exceeded.description == (
            "You've exceeded 1 budget. Review your spending in these categories."
        )

    def test_approaching_budget_limit(self, store, make_txn, make_budget, generator):
        store.add_budget(make_budget(200, FOOD))
        store.add_transaction(make_txn(170, FOOD, date(2025, 4, 3)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        [approaching] = [i for i in report.insights if i.title == "Approaching Budget Limit"]
        assert approaching.description == "1 budget is at 85% capacity. Monitor closely."

    def test_budget_outside_window_ignored(self, store, make_txn, make_budget, generator):
        store.add_budget(make_budget(10, FOOD, start=date(2025, 3, 1)))
        store.add_transaction(make_txn(50, FOOD, date(2025, 3, 3)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert "Budget Exceeded" not in _titles(report)

    def test_healthy_month_in_rule_order(self, store, make_txn, generator):
        store.add_transaction(make_txn(3000, SALARY, date(2025, 4, 1)))
        store.add_transaction(make_txn(2000, FOOD, date(2025, 4, 2)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert _titles(report) == [
            "Positive Cash Flow",
            "High Concentration in One Category",
            "Excellent Savings Rate",
        ]
        assert report.insights[0].description == (
            "Great job! You have a positive balance of $1000.00 this month. "
            "Consider saving or investing the surplus."
        )
        assert "33.3%" in report.insights[2].description

    def test_spending_increase(self, store, make_txn, generator):
        store.add_transaction(make_txn(1000, FOOD, date(2025, 3, 5)))
        store.add_transaction(make_txn(1000, FOOD, date(2025, 4, 5)))
        store.add_transaction(make_txn(500, SHOPPING, date(2025, 4, 6)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        [increase] = [i for i in report.insights if i.title == "Spending Increase Detected"]
        assert "50.0%" in increase.description
        assert report.comparison.expense_change == pytest.approx(50.0)

    def test_spending_reduction(self, store, make_txn, generator):
        store.add_transaction(make_txn(1000, FOOD, date(2025, 3, 5)))
        store.add_transaction(make_txn(800, FOOD, date(2025, 4, 5)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert "Spending Reduction" in _titles(report)

    def test_all_rules_fire_within_cap(self, store, make_txn, make_budget, generator):
        store.add_budget(make_budget(1000, FOOD))
        store.add_transaction(make_txn(3000, SALARY, date(2025, 4, 1)))
        store.add_transaction(make_txn(1500, FOOD, date(2025, 4, 2)))
        store.add_transaction(make_txn(1000, FOOD, date(2025, 3, 2)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert _titles(report) == [
            "Positive Cash Flow",
            "Spending Increase Detected",
            "High Concentration in One Category",
            "Budget Exceeded",
            "Excellent Savings Rate",
        ]

    def test_top_categories(self, store, make_txn, generator):
        store.add_transaction(make_txn(300, FOOD, date(2025, 4, 2)))
        store.add_transaction(make_txn(100, SHOPPING, date(2025, 4, 3)))

        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert [c.category.id for c in report.top_categories] == [FOOD.id, SHOPPING.id]
        assert report.top_categories[0].percentage == pytest.approx(75.0)

    def test_year_period_wording(self, store, make_txn, generator):
        store.add_transaction(make_txn(100, SALARY, date(2025, 1, 10)))

        report = generator.generate(USER, "year", as_of=AS_OF)
        assert report.period == ReportPeriod.YEAR
        assert "this year" in report.insights[0].description

    def test_count_always_between_one_and_five(self, store, make_txn, generator):
        for day in range(1, 20):
            store.add_transaction(make_txn(day * 10, FOOD, date(2025, 4, day)))
        report = generator.generate(USER, ReportPeriod.MONTH, as_of=AS_OF)
        assert 1 <= len(report.insights) <= 5

    def test_store_failure_degrades(self):
        store = FailingStore()
        report = InsightGenerator(store, StoreAggregator(store)).generate(
            USER, ReportPeriod.MONTH, as_of=AS_OF
        )
        assert report.degraded is True
        assert _titles(report) == ["Insights Unavailable"]
        assert report.summary.start == APRIL_START
