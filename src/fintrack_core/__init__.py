"""Fintrack Core - Personal finance intelligence engine.

Keyword categorization, rule-based insights, budget suggestions,
spending forecasts and templated advice over a user's transactions.
"""

__version__ = "0.1.0"

from .advice import AdviceEngine, classify_intent
from .advisor import BudgetAdvisor
from .aggregator import Aggregator, StoreAggregator
from .analytics import AnalyticsService
from .categorizer import CategorizationScorer
from .config import (
    BudgetAdvisorConfig,
    CategorizationConfig,
    FintrackConfig,
    ForecastConfig,
    InsightConfig,
    load_config,
)
from .engine import IntelligenceEngine
from .exceptions import (
    AnalysisError,
    ConfigurationError,
    DataAccessError,
    FintrackError,
)
from .forecaster import SpendingForecaster
from .insights import InsightGenerator
from .lexicon import DEFAULT_LEXICON, KeywordLexicon
from .log import configure_logging
from .periods import resolve_budget_window
from .store import FinanceStore, InMemoryFinanceStore

__all__ = [
    "__version__",
    # Facade
    "IntelligenceEngine",
    # Components
    "AdviceEngine",
    "AnalyticsService",
    "BudgetAdvisor",
    "CategorizationScorer",
    "InsightGenerator",
    "SpendingForecaster",
    "classify_intent",
    # Persistence and aggregation
    "Aggregator",
    "FinanceStore",
    "InMemoryFinanceStore",
    "StoreAggregator",
    "resolve_budget_window",
    # Lexicon
    "DEFAULT_LEXICON",
    "KeywordLexicon",
    # Configuration
    "BudgetAdvisorConfig",
    "CategorizationConfig",
    "FintrackConfig",
    "ForecastConfig",
    "InsightConfig",
    "configure_logging",
    "load_config",
    # Exceptions
    "AnalysisError",
    "ConfigurationError",
    "DataAccessError",
    "FintrackError",
]
