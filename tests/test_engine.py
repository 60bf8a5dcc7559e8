"""Tests for the IntelligenceEngine facade."""

from datetime import date
from decimal import Decimal

import pytest

from conftest import FOOD, SALARY, SHOPPING, USER, FailingStore
from fintrack_core import IntelligenceEngine, __version__
from fintrack_core.config import FintrackConfig, ForecastConfig
from fintrack_core.models import (
    AdviceType,
    Confidence,
    ReportPeriod,
)


@pytest.fixture
def busy_engine(engine, store, make_txn):
    """Six months of steady spending plus an April salary."""
    for month in range(10, 13):
        store.add_transaction(make_txn(400, FOOD, date(2024, month, 8)))
    for month in range(1, 5):
        store.add_transaction(make_txn(400, FOOD, date(2025, month, 8)))
    store.add_transaction(make_txn(3000, SALARY, date(2025, 4, 1)))
    store.add_transaction(make_txn(100, SHOPPING, date(2025, 4, 2)))
    return engine


class TestIntelligenceEngine:
    """The five advisory operations through one object."""

    def test_version(self):
        assert __version__ == "0.1.0"

    def test_categorize(self, engine):
        result = engine.categorize(USER, "Starbucks coffee", "4.50")
        assert result.suggested_category.id == FOOD.id
        assert result.confidence == Confidence.HIGH

    def test_insights_accepts_period_string(self, busy_engine):
        report = busy_engine.insights(USER, "year")
        assert report.period == ReportPeriod.YEAR
        assert 1 <= len(report.insights) <= 5

    def test_insights_use_clock(self, busy_engine):
        report = busy_engine.insights(USER)
        assert report.summary.start == date(2025, 4, 1)
        assert report.summary.income == Decimal("3000.00")

    def test_budget_suggestions(self, busy_engine):
        report = busy_engine.budget_suggestions(USER)
        assert report.suggestions[0].category.id == FOOD.id

    def test_predict_spending(self, busy_engine):
        forecast = busy_engine.predict_spending(USER)
        assert len(forecast.predictions) == 3
        assert forecast.months_of_data == 7

    def test_forecast_config_is_honoured(self, store, make_txn):
        store.add_transaction(make_txn(400, FOOD, date(2025, 4, 8)))
        config = FintrackConfig(forecast=ForecastConfig(default_horizon=5))
        engine = IntelligenceEngine(store, config=config, clock=lambda: date(2025, 4, 15))
        assert len(engine.predict_spending(USER).predictions) == 5

    def test_advice(self, busy_engine):
        reply = busy_engine.advice(USER, "What should I save?")
        assert reply.type == AdviceType.POSITIVE

    def test_analytics_shares_store(self, busy_engine):
        rows = busy_engine.analytics().spending_by_category(USER)
        assert rows[0].category.id == FOOD.id

    def test_every_operation_degrades_instead_of_raising(self):
        engine = IntelligenceEngine(FailingStore(), clock=lambda: date(2025, 4, 15))

        assert engine.categorize(USER, "coffee", 3).degraded
        assert engine.insights(USER).degraded
        assert engine.budget_suggestions(USER).degraded
        assert engine.predict_spending(USER, 3).degraded
        assert engine.advice(USER, "How am I doing?").type == AdviceType.ERROR
