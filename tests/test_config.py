"""Tests for the configuration system."""

from decimal import Decimal

import pytest

from conftest import AS_OF
from fintrack_core import ConfigurationError, InMemoryFinanceStore, IntelligenceEngine
from fintrack_core.config import (
    BudgetAdvisorConfig,
    CategorizationConfig,
    FintrackConfig,
    ForecastConfig,
    InsightConfig,
    load_config,
)


class TestCategorizationConfig:
    """Test suite for CategorizationConfig."""

    def test_default_values(self):
        """Defaults reproduce the documented scoring rules."""
        config = CategorizationConfig()

        assert config.keyword_weight == 10
        assert config.name_word_weight == 5
        assert config.name_word_min_length == 3
        assert config.high_threshold == 10
        assert config.medium_threshold == 5
        assert config.max_alternatives == 2

    def test_threshold_order_validation(self):
        """The medium band cannot sit above the high band."""
        with pytest.raises(ValueError):
            CategorizationConfig(high_threshold=5, medium_threshold=8)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_CATEGORIZE_KEYWORD_WEIGHT", "12")
        monkeypatch.setenv("FINTRACK_CATEGORIZE_MAX_ALTERNATIVES", "4")

        config = CategorizationConfig()

        assert config.keyword_weight == 12
        assert config.max_alternatives == 4


class TestAnalysisConfigs:
    """Insight, budget and forecast settings."""

    def test_insight_defaults(self):
        config = InsightConfig()
        assert config.expense_increase_pct == 20.0
        assert config.expense_decrease_pct == 10.0
        assert config.concentration_pct == 40.0
        assert config.budget_warning_pct == 80.0
        assert config.min_insights == 3
        assert config.max_insights == 5

    def test_budget_defaults(self):
        config = BudgetAdvisorConfig()
        assert config.lookback_months == 6
        assert config.buffer == Decimal("1.2")
        assert config.cap == Decimal("2")
        assert config.max_suggestions == 10

    def test_forecast_defaults(self):
        config = ForecastConfig()
        assert config.lookback_months == 12
        assert config.moving_average_window == 3
        assert config.moving_average_weight == Decimal("0.7")
        assert config.cv_high_threshold == Decimal("0.3")
        assert config.default_horizon == 3

    def test_forecast_weight_bounds(self):
        with pytest.raises(ValueError):
            ForecastConfig(moving_average_weight=Decimal("1.5"))

    def test_budget_from_environment(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_BUDGET_LOOKBACK_MONTHS", "3")
        monkeypatch.setenv("FINTRACK_BUDGET_BUFFER", "1.1")

        config = BudgetAdvisorConfig()

        assert config.lookback_months == 3
        assert config.buffer == Decimal("1.1")


class TestFintrackConfig:
    """Test suite for the root FintrackConfig."""

    def test_default_values(self):
        config = FintrackConfig()

        assert config.env == "development"
        assert config.log_level == "INFO"
        assert isinstance(config.forecast, ForecastConfig)
        assert config.is_production is False

    def test_custom_nested_config(self):
        config = FintrackConfig(forecast=ForecastConfig(lookback_months=24))
        assert config.forecast.lookback_months == 24

    def test_environment_validation(self):
        assert FintrackConfig(env="  Production ").env == "production"
        with pytest.raises(ValueError):
            FintrackConfig(env="qa")

    def test_log_level_validation(self):
        assert FintrackConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            FintrackConfig(log_level="VERBOSE")

    def test_loads_from_dotenv_file(self, tmp_path, monkeypatch):
        """Settings are read from a .env file in the working directory."""
        (tmp_path / ".env").write_text(
            "FINTRACK_ENV=staging\n"
            "FINTRACK_LOG_LEVEL=ERROR\n"
            "FINTRACK_FORECAST_LOOKBACK_MONTHS=18\n"
        )
        monkeypatch.chdir(tmp_path)

        config = FintrackConfig()

        assert config.env == "staging"
        assert config.log_level == "ERROR"
        assert config.forecast.lookback_months == 18


class TestLoadConfig:
    """load_config turns validation failures into ConfigurationError."""

    def test_returns_validated_config(self):
        config = load_config(env="test", log_level="warning")
        assert config.env == "test"
        assert config.log_level == "WARNING"

    def test_invalid_override(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(log_level="VERBOSE")

        error = exc_info.value
        assert error.config_key == "log_level"
        assert error.actual == "VERBOSE"
        assert error.recoverable is False

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_CATEGORIZE_MEDIUM_THRESHOLD", "20")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_engine_rejects_invalid_environment(self, monkeypatch):
        """An engine built from a broken environment fails fast."""
        monkeypatch.setenv("FINTRACK_ENV", "qa")
        with pytest.raises(ConfigurationError):
            IntelligenceEngine(InMemoryFinanceStore(), clock=lambda: AS_OF)
