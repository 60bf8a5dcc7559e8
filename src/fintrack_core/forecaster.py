"""Monthly spending forecasts from a blend of moving average and trend."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from .aggregator import Aggregator
from .config import ForecastConfig
from .exceptions import AnalysisError
from .models.records import TransactionType
from .models.results import Confidence, ForecastPoint, SpendingForecast
from .money import ZERO, round_money
from .periods import month_label, shift_months, trailing_months_window
from .stats import coefficient_of_variation, mean, moving_average, ols_slope

logger = structlog.get_logger()

NO_HISTORY = "No historical data available"


class SpendingForecaster:
    """
    Predict expense totals for the coming months.

    Monthly expense totals over the lookback window (twelve months by
    default) feed three statistics: their mean, their least-squares slope
    against month index 1..N and the mean of the most recent months. Each
    prediction weights the moving average against the trend projection.
    """

    def __init__(self, aggregator: Aggregator, config: Optional[ForecastConfig] = None):
        self.aggregator = aggregator
        self.config = config or ForecastConfig()

    @property
    def methodology(self) -> str:
        weight = self.config.moving_average_weight * 100
        return (
            f"Uses moving average ({weight:.0f}%) and trend analysis "
            f"({100 - weight:.0f}%) for predictions"
        )

    def monthly_totals(self, user_id: str, as_of: date) -> list[Decimal]:
        """Expense totals per calendar month, oldest first; empty months are absent."""
        window = trailing_months_window(as_of, self.config.lookback_months)
        return [
            agg.total_amount
            for agg in self.aggregator.sum_by_month(user_id, window, type=TransactionType.EXPENSE)
        ]

    def overall_confidence(self, totals: list[Decimal]) -> Confidence:
        if len(totals) < self.config.min_months_for_confidence:
            return Confidence.LOW
        if coefficient_of_variation(totals) < self.config.cv_high_threshold:
            return Confidence.HIGH
        return Confidence.MEDIUM

    def project(
        self,
        totals: list[Decimal],
        months: int,
        as_of: date,
    ) -> list[ForecastPoint]:
        """Forecast points for offsets 1..``months`` after the ``as_of`` month."""
        cfg = self.config
        n = len(totals)
        average = mean(totals)
        trend = ols_slope(totals)
        recent = moving_average(totals, cfg.moving_average_window)
        weight = cfg.moving_average_weight
        point_confidence = (
            Confidence.MEDIUM if n >= cfg.min_months_for_confidence else Confidence.LOW
        )

        points = []
        for offset in range(1, months + 1):
            predicted = recent * weight + (average + trend * (n + offset)) * (1 - weight)
            points.append(
                ForecastPoint(
                    month_offset=offset,
                    label=month_label(shift_months(as_of.replace(day=1), offset)),
                    predicted_amount=max(ZERO, round_money(predicted)),
                    confidence=point_confidence,
                )
            )
        return points

    def predict(
        self,
        user_id: str,
        months: Optional[int] = None,
        *,
        as_of: date,
    ) -> SpendingForecast:
        """
        Predict spending for the next ``months`` months.

        Args:
            user_id: Owner of the history
            months: Horizon; defaults to the configured horizon. Zero or
                negative yields an empty prediction list.
            as_of: Evaluation day; the history window ends here

        Returns:
            SpendingForecast; zero and low confidence when there is no
            history, degraded on failure
        """
        if months is None:
            months = self.config.default_horizon
        try:
            totals = self.monthly_totals(user_id, as_of)
            if not totals:
                logger.info("forecast_no_history", user_id=user_id)
                return SpendingForecast(based_on=NO_HISTORY, confidence=Confidence.LOW)

            try:
                predictions = self.project(totals, max(months, 0), as_of)
                result = SpendingForecast(
                    based_on=f"{len(totals)} months of historical data",
                    months_of_data=len(totals),
                    average_monthly_spending=round_money(mean(totals)),
                    moving_average=round_money(
                        moving_average(totals, self.config.moving_average_window)
                    ),
                    trend=round_money(ols_slope(totals)),
                    predictions=predictions,
                    confidence=self.overall_confidence(totals),
                    methodology=self.methodology,
                )
            except ArithmeticError as e:
                raise AnalysisError(
                    f"Forecast computation failed: {e}",
                    component="forecaster",
                    step="project",
                ) from e

            logger.info(
                "forecast_built",
                user_id=user_id,
                months_of_data=len(totals),
                horizon=len(predictions),
                confidence=result.confidence.value,
            )
            return result
        except Exception as e:
            logger.error("forecast_failed", user_id=user_id, error=str(e))
            return SpendingForecast(
                based_on=NO_HISTORY,
                methodology=self.methodology,
                degraded=True,
                error=str(e),
            )
