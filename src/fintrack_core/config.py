"""Configuration system for the fintrack analytics engine.

This module provides Pydantic Settings-based configuration with environment
variable support. The defaults reproduce the engine's documented heuristics
exactly; overriding them is meant for tuning, not for normal operation.

Usage:
    from fintrack_core.config import FintrackConfig, load_config

    # Load from environment variables and .env file
    config = FintrackConfig()

    # Same, but invalid settings raise ConfigurationError
    config = load_config()

    # Access forecast settings
    print(config.forecast.lookback_months)
    print(config.forecast.moving_average_weight)
"""

from decimal import Decimal
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class CategorizationConfig(BaseSettings):
    """Keyword scoring weights and confidence thresholds.

    Environment Variables:
        FINTRACK_CATEGORIZE_KEYWORD_WEIGHT: Points per lexicon keyword hit
        FINTRACK_CATEGORIZE_NAME_WORD_WEIGHT: Points per category-name word hit
        FINTRACK_CATEGORIZE_NAME_WORD_MIN_LENGTH: Name words must be longer than this
        FINTRACK_CATEGORIZE_HIGH_THRESHOLD: Minimum score for "high" confidence
        FINTRACK_CATEGORIZE_MEDIUM_THRESHOLD: Minimum score for "medium" confidence
        FINTRACK_CATEGORIZE_MAX_ALTERNATIVES: Runner-ups returned with a match
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_CATEGORIZE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    keyword_weight: int = Field(default=10, ge=0)
    name_word_weight: int = Field(default=5, ge=0)
    name_word_min_length: int = Field(default=3, ge=0)
    high_threshold: int = Field(default=10, gt=0)
    medium_threshold: int = Field(default=5, gt=0)
    max_alternatives: int = Field(default=2, ge=0, le=10)

    @model_validator(mode="after")
    def thresholds_ordered(self) -> "CategorizationConfig":
        """The medium band must sit below the high band."""
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")
        return self


class InsightConfig(BaseSettings):
    """Thresholds for the insight rule set.

    Environment Variables:
        FINTRACK_INSIGHTS_EXPENSE_INCREASE_PCT: Expense growth that triggers a warning
        FINTRACK_INSIGHTS_EXPENSE_DECREASE_PCT: Expense drop that earns praise
        FINTRACK_INSIGHTS_CONCENTRATION_PCT: Top-category share that is flagged
        FINTRACK_INSIGHTS_BUDGET_WARNING_PCT: Budget usage that counts as approaching
        FINTRACK_INSIGHTS_SAVINGS_RATE_GOOD_PCT: Savings rate considered excellent
        FINTRACK_INSIGHTS_MIN_INSIGHTS: Below this count a summary insight is added
        FINTRACK_INSIGHTS_MAX_INSIGHTS: Maximum insights returned
        FINTRACK_INSIGHTS_TOP_CATEGORIES: Number of top categories reported
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_INSIGHTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    expense_increase_pct: float = Field(default=20.0, ge=0)
    expense_decrease_pct: float = Field(default=10.0, ge=0)
    concentration_pct: float = Field(default=40.0, ge=0, le=100)
    budget_warning_pct: float = Field(default=80.0, ge=0, le=100)
    savings_rate_good_pct: float = Field(default=20.0)
    min_insights: int = Field(default=3, ge=0)
    max_insights: int = Field(default=5, ge=1)
    top_categories: int = Field(default=5, ge=1)


class BudgetAdvisorConfig(BaseSettings):
    """Parameters of the budget suggestion heuristic.

    Environment Variables:
        FINTRACK_BUDGET_LOOKBACK_MONTHS: Months of history averaged
        FINTRACK_BUDGET_BUFFER: Multiplier applied to the monthly average
        FINTRACK_BUDGET_CAP: Upper bound multiplier on the monthly average
        FINTRACK_BUDGET_HIGH_CONFIDENCE_MIN_COUNT: Transactions needed for "high"
        FINTRACK_BUDGET_LOW_CONFIDENCE_MAX_COUNT: Below this count confidence is "low"
        FINTRACK_BUDGET_MAX_SUGGESTIONS: Suggestions returned
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lookback_months: int = Field(default=6, ge=1, le=60)
    buffer: Decimal = Field(default=Decimal("1.2"), ge=Decimal("1"))
    cap: Decimal = Field(default=Decimal("2"), ge=Decimal("1"))
    high_confidence_min_count: int = Field(default=10, ge=1)
    low_confidence_max_count: int = Field(default=5, ge=1)
    max_suggestions: int = Field(default=10, ge=1)


class ForecastConfig(BaseSettings):
    """Parameters of the spending forecaster.

    Environment Variables:
        FINTRACK_FORECAST_LOOKBACK_MONTHS: Months of history used
        FINTRACK_FORECAST_MOVING_AVERAGE_WINDOW: Months in the moving average
        FINTRACK_FORECAST_MOVING_AVERAGE_WEIGHT: Share of the moving average in the blend
        FINTRACK_FORECAST_MIN_MONTHS_FOR_CONFIDENCE: Below this, confidence is "low"
        FINTRACK_FORECAST_CV_HIGH_THRESHOLD: Coefficient of variation under which confidence is "high"
        FINTRACK_FORECAST_DEFAULT_HORIZON: Months predicted when the caller does not say
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    lookback_months: int = Field(default=12, ge=1, le=120)
    moving_average_window: int = Field(default=3, ge=1)
    moving_average_weight: Decimal = Field(default=Decimal("0.7"), ge=Decimal("0"), le=Decimal("1"))
    min_months_for_confidence: int = Field(default=6, ge=1)
    cv_high_threshold: Decimal = Field(default=Decimal("0.3"), gt=Decimal("0"))
    default_horizon: int = Field(default=3, ge=0, le=24)


class FintrackConfig(BaseSettings):
    """Root configuration for the fintrack engine.

    Environment Variables:
        FINTRACK_ENV: Environment name (development, staging, production, test)
        FINTRACK_LOG_LEVEL: Logging level used by configure_logging()

    Example:
        # Load all configuration from environment
        config = FintrackConfig()

        # Override specific settings
        config = FintrackConfig(
            forecast=ForecastConfig(lookback_months=24),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    categorization: CategorizationConfig = Field(default_factory=CategorizationConfig)
    insights: InsightConfig = Field(default_factory=InsightConfig)
    budget: BudgetAdvisorConfig = Field(default_factory=BudgetAdvisorConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


def load_config(**overrides: Any) -> FintrackConfig:
    """Build a FintrackConfig from the environment, ``.env`` and ``overrides``.

    Raises:
        ConfigurationError: If any setting fails validation.
    """
    try:
        return FintrackConfig(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigurationError(
            f"Invalid configuration: {first['msg']}",
            config_key=key,
            actual=first.get("input") if key else None,
            details={"errors": e.error_count()},
        ) from e
