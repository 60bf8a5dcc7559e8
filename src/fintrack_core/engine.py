"""Facade over the advisory analytics components.

:class:`IntelligenceEngine` wires one store into every component and
exposes the five advisory operations with a caller-resolved ``user_id``.
It holds no per-user state; a single instance may serve any number of
concurrent callers.

Example Usage:
    ```python
    from fintrack_core import IntelligenceEngine, InMemoryFinanceStore

    store = InMemoryFinanceStore.from_json_file("examples/sample_data.json")
    engine = IntelligenceEngine(store)

    result = engine.categorize("user-1", "Starbucks coffee", "4.50")
    print(result.suggested_category.name, result.confidence)

    forecast = engine.predict_spending("user-1", months=3)
    for point in forecast.predictions:
        print(point.label, point.predicted_amount)
    ```
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

import structlog

from .advice import AdviceEngine
from .advisor import BudgetAdvisor
from .aggregator import Aggregator, StoreAggregator
from .analytics import AnalyticsService
from .categorizer import CategorizationScorer
from .config import FintrackConfig, load_config
from .forecaster import SpendingForecaster
from .insights import InsightGenerator
from .lexicon import DEFAULT_LEXICON, KeywordLexicon
from .models.results import (
    AdviceResponse,
    BudgetSuggestionReport,
    CategorizationResult,
    InsightReport,
    ReportPeriod,
    SpendingForecast,
)
from .store import FinanceStore

logger = structlog.get_logger()

Clock = Callable[[], date]


class IntelligenceEngine:
    """
    Categorization, insights, budget suggestions, forecasts and advice.

    Every operation is advisory: it returns a valid result even when the
    store fails, with ``degraded`` set so callers can tell a fallback from
    a computed answer.

    Args:
        store: Read-only persistence collaborator
        config: Tuning parameters; defaults to ``load_config()``, which reads
            the environment and raises ConfigurationError on invalid settings
        lexicon: Keyword lexicon for categorization
        clock: Returns the evaluation day; defaults to ``date.today``
        aggregator: Override the aggregation layer (defaults to one over ``store``)
    """

    def __init__(
        self,
        store: FinanceStore,
        config: Optional[FintrackConfig] = None,
        lexicon: KeywordLexicon = DEFAULT_LEXICON,
        clock: Optional[Clock] = None,
        aggregator: Optional[Aggregator] = None,
    ):
        self.store = store
        self.config = config or load_config()
        self.clock = clock or date.today
        self.aggregator = aggregator or StoreAggregator(store)

        self.categorizer = CategorizationScorer(
            store, self.aggregator, lexicon=lexicon, config=self.config.categorization
        )
        self.insight_generator = InsightGenerator(
            store, self.aggregator, config=self.config.insights
        )
        self.budget_advisor = BudgetAdvisor(store, self.aggregator, config=self.config.budget)
        self.forecaster = SpendingForecaster(self.aggregator, config=self.config.forecast)
        self.advice_engine = AdviceEngine(store, self.aggregator)

        logger.debug(
            "engine_initialized",
            env=self.config.env,
            lexicon_version=lexicon.version,
        )

    def analytics(self) -> AnalyticsService:
        """Reporting service over the same store; its reads are not degraded."""
        if isinstance(self.aggregator, StoreAggregator):
            return AnalyticsService(self.store, self.aggregator)
        return AnalyticsService(self.store)

    def categorize(
        self,
        user_id: str,
        description: Optional[str],
        amount: Union[Decimal, float, int, str],
    ) -> CategorizationResult:
        """Suggest an expense category for a transaction description."""
        return self.categorizer.categorize(user_id, description, amount)

    def insights(
        self,
        user_id: str,
        period: Union[ReportPeriod, str] = ReportPeriod.MONTH,
    ) -> InsightReport:
        """Insights for the current calendar month or year."""
        return self.insight_generator.generate(user_id, ReportPeriod(period), as_of=self.clock())

    def budget_suggestions(self, user_id: str) -> BudgetSuggestionReport:
        """Recommended monthly limits from recent expense history."""
        return self.budget_advisor.suggest(user_id, as_of=self.clock())

    def predict_spending(self, user_id: str, months: Optional[int] = None) -> SpendingForecast:
        """Expense forecast for the next ``months`` months (default 3)."""
        return self.forecaster.predict(user_id, months, as_of=self.clock())

    def advice(self, user_id: str, question: Optional[str]) -> AdviceResponse:
        """Templated answer to a free-text question."""
        return self.advice_engine.advise(user_id, question, as_of=self.clock())
