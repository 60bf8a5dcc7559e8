"""Budget suggestions derived from recent expense history."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from .aggregator import Aggregator
from .config import BudgetAdvisorConfig
from .models.records import TransactionType
from .models.results import (
    BudgetBasis,
    BudgetSuggestion,
    BudgetSuggestionReport,
    CategoryRef,
    Confidence,
    PeriodAggregate,
)
from .money import ZERO, round_money
from .periods import trailing_months_window
from .stats import range_dispersion
from .store import FinanceStore

logger = structlog.get_logger()

HIGH_CONFIDENCE_REASONING = "Based on consistent spending patterns"
LOW_CONFIDENCE_REASONING = (
    "Based on limited historical data - consider reviewing after more transactions"
)


class BudgetAdvisor:
    """
    Recommend a monthly limit for each category the user spends in.

    The trailing window (six months by default) is summed per category and
    divided by the number of months, a buffer is added on top and the
    result is capped at a multiple of the average.
    """

    def __init__(
        self,
        store: FinanceStore,
        aggregator: Aggregator,
        config: Optional[BudgetAdvisorConfig] = None,
    ):
        self.store = store
        self.aggregator = aggregator
        self.config = config or BudgetAdvisorConfig()

    @property
    def methodology(self) -> str:
        cfg = self.config
        buffer_pct = (cfg.buffer - 1) * 100
        return (
            f"Calculated using {cfg.lookback_months}-month average with "
            f"{buffer_pct:.0f}% buffer, capped at {cfg.cap.normalize():f}x average"
        )

    def suggested_amount(self, monthly_average: Decimal) -> Decimal:
        """Buffered average capped at ``cap`` times the average; never negative."""
        if monthly_average <= 0:
            return ZERO
        cfg = self.config
        return round_money(min(monthly_average * cfg.buffer, monthly_average * cfg.cap))

    def confidence_for(self, agg: PeriodAggregate) -> Confidence:
        """Transaction count and spread decide how much to trust the average."""
        cfg = self.config
        if agg.count == 0:
            return Confidence.LOW
        per_transaction = agg.total_amount / agg.count
        spread = range_dispersion(agg.max_amount, agg.min_amount)
        if agg.count >= cfg.high_confidence_min_count and spread < per_transaction:
            return Confidence.HIGH
        if agg.count < cfg.low_confidence_max_count:
            return Confidence.LOW
        return Confidence.MEDIUM

    def build_suggestion(self, category: CategoryRef, agg: PeriodAggregate) -> BudgetSuggestion:
        months = self.config.lookback_months
        monthly_average = agg.total_amount / months
        confidence = self.confidence_for(agg)
        return BudgetSuggestion(
            category=category,
            suggested_amount=self.suggested_amount(monthly_average),
            based_on=BudgetBasis(
                months=months,
                transactions=agg.count,
                average_monthly=round_money(monthly_average),
                max_transaction=agg.max_amount,
            ),
            confidence=confidence,
            reasoning=(
                HIGH_CONFIDENCE_REASONING
                if confidence == Confidence.HIGH
                else LOW_CONFIDENCE_REASONING
            ),
        )

    def suggest(self, user_id: str, *, as_of: date) -> BudgetSuggestionReport:
        """
        Suggest budgets from the expense history ending at ``as_of``.

        Returns:
            BudgetSuggestionReport with at most ``max_suggestions`` entries,
            largest suggested amount first; an empty degraded report on failure
        """
        try:
            window = trailing_months_window(as_of, self.config.lookback_months)
            suggestions = []
            for agg in self.aggregator.sum_by_category(
                user_id, window, type=TransactionType.EXPENSE
            ):
                category = self.store.get_category(agg.key)
                if category is None:
                    logger.debug("budget_category_missing", user_id=user_id, category_id=agg.key)
                    continue
                suggestions.append(
                    self.build_suggestion(CategoryRef.from_category(category), agg)
                )

            suggestions.sort(key=lambda s: s.suggested_amount, reverse=True)
            suggestions = suggestions[: self.config.max_suggestions]
            logger.info("budget_suggestions_built", user_id=user_id, count=len(suggestions))
            return BudgetSuggestionReport(suggestions=suggestions, methodology=self.methodology)
        except Exception as e:
            logger.error("budget_suggestions_failed", user_id=user_id, error=str(e))
            return BudgetSuggestionReport(
                methodology=self.methodology,
                degraded=True,
                error=str(e),
            )
