"""Rule-based financial insights for a month or a year.

The generator gathers aggregates once into an :class:`InsightContext` and
then evaluates a fixed, ordered list of pure rules against it. Each rule
returns at most one :class:`Insight`. Output keeps rule order; priority
is informational metadata and never re-sorts the list.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import structlog

from .aggregator import Aggregator
from .config import InsightConfig
from .models.records import TransactionType
from .models.results import (
    BudgetStatus,
    CategoryRef,
    CategorySpending,
    DateWindow,
    Insight,
    InsightReport,
    InsightType,
    PeriodComparison,
    PeriodSummary,
    Priority,
    ReportPeriod,
)
from .periods import period_window
from .store import FinanceStore
from .tracking import budget_status, read_active_budgets, usage_ratio

logger = structlog.get_logger()


@dataclass(frozen=True)
class InsightContext:
    """Everything the rules may look at, gathered before evaluation."""

    period: ReportPeriod
    current: PeriodSummary
    comparison: PeriodComparison
    top_categories: list[CategorySpending] = field(default_factory=list)
    budgets: list[BudgetStatus] = field(default_factory=list)
    config: InsightConfig = field(default_factory=InsightConfig)

    @property
    def period_name(self) -> str:
        return ReportPeriod(self.period).value


InsightRule = Callable[[InsightContext], Optional[Insight]]


# =============================================================================
# RULES
# =============================================================================


def balance_rule(ctx: InsightContext) -> Optional[Insight]:
    """Sign of the period balance."""
    balance = ctx.current.balance
    if balance > 0:
        return Insight(
            title="Positive Cash Flow",
            description=(
                f"Great job! You have a positive balance of ${balance:.2f} this "
                f"{ctx.period_name}. Consider saving or investing the surplus."
            ),
            type=InsightType.POSITIVE,
            priority=Priority.HIGH,
        )
    if balance < 0:
        return Insight(
            title="Negative Cash Flow",
            description=(
                f"Your expenses exceed income by ${abs(balance):.2f}. "
                "Review your spending and consider creating a budget."
            ),
            type=InsightType.WARNING,
            priority=Priority.HIGH,
        )
    return None


def expense_trend_rule(ctx: InsightContext) -> Optional[Insight]:
    """Period-over-period expense movement."""
    change = ctx.comparison.expense_change
    if change > ctx.config.expense_increase_pct:
        return Insight(
            title="Spending Increase Detected",
            description=(
                f"Your expenses increased by {change:.1f}% compared to last "
                f"{ctx.period_name}. Review your top spending categories."
            ),
            type=InsightType.WARNING,
            priority=Priority.MEDIUM,
        )
    if change < -ctx.config.expense_decrease_pct:
        return Insight(
            title="Spending Reduction",
            description=(
                f"Excellent! You reduced expenses by {abs(change):.1f}% compared to last "
                f"{ctx.period_name}. Keep up the good work!"
            ),
            type=InsightType.POSITIVE,
            priority=Priority.MEDIUM,
        )
    return None


def concentration_rule(ctx: InsightContext) -> Optional[Insight]:
    """One category dominating the period's expenses."""
    if not ctx.top_categories:
        return None
    top = ctx.top_categories[0]
    if top.percentage > ctx.config.concentration_pct:
        return Insight(
            title="High Concentration in One Category",
            description=(
                f"{top.category.name} accounts for {top.percentage:.1f}% of your expenses. "
                "Consider diversifying or reviewing this category."
            ),
            type=InsightType.INFO,
            priority=Priority.MEDIUM,
        )
    return None


def budget_compliance_rule(ctx: InsightContext) -> Optional[Insight]:
    """Exceeded budgets first, otherwise budgets close to their limit."""
    if not ctx.budgets:
        return None
    warning_ratio = Decimal(str(ctx.config.budget_warning_pct)) / 100
    exceeded = [b for b in ctx.budgets if usage_ratio(b) > 1]
    approaching = [b for b in ctx.budgets if warning_ratio < usage_ratio(b) <= 1]

    if exceeded:
        n = len(exceeded)
        return Insight(
            title="Budget Exceeded",
            description=(
                f"You've exceeded {n} budget{'s' if n > 1 else ''}. "
                "Review your spending in these categories."
            ),
            type=InsightType.WARNING,
            priority=Priority.HIGH,
        )
    if approaching:
        n = len(approaching)
        verb = "budgets are" if n > 1 else "budget is"
        return Insight(
            title="Approaching Budget Limit",
            description=(
                f"{n} {verb} at {approaching[0].percentage:.0f}% capacity. Monitor closely."
            ),
            type=InsightType.INFO,
            priority=Priority.MEDIUM,
        )
    return None


def savings_rate_rule(ctx: InsightContext) -> Optional[Insight]:
    """Share of income kept; skipped when there is no income."""
    if ctx.current.income <= 0:
        return None
    rate = ctx.current.savings_rate
    if rate > ctx.config.savings_rate_good_pct:
        return Insight(
            title="Excellent Savings Rate",
            description=(
                f"You're saving {rate:.1f}% of your income. This is above the "
                f"recommended {ctx.config.savings_rate_good_pct:.0f}% savings rate!"
            ),
            type=InsightType.POSITIVE,
            priority=Priority.LOW,
        )
    if rate < 0:
        return Insight(
            title="Negative Savings Rate",
            description=(
                "You're spending more than you earn. "
                "Focus on reducing expenses or increasing income."
            ),
            type=InsightType.WARNING,
            priority=Priority.HIGH,
        )
    return None


def summary_insight(ctx: InsightContext) -> Insight:
    """Neutral prose summary appended when the rules said little."""
    s = ctx.current
    outcome = "surplus" if s.balance >= 0 else "deficit"
    return Insight(
        title="Financial Summary",
        description=(
            f"This {ctx.period_name}, you earned ${s.income:.2f} and spent ${s.expenses:.2f}, "
            f"resulting in a {outcome} of ${abs(s.balance):.2f}."
        ),
        type=InsightType.INFO,
        priority=Priority.LOW,
    )


DEFAULT_RULES: tuple[InsightRule, ...] = (
    balance_rule,
    expense_trend_rule,
    concentration_rule,
    budget_compliance_rule,
    savings_rate_rule,
)


def evaluate_rules(
    ctx: InsightContext,
    rules: tuple[InsightRule, ...] = DEFAULT_RULES,
) -> list[Insight]:
    """Run rules in order, add the summary floor, cap the list."""
    insights = [i for i in (rule(ctx) for rule in rules) if i is not None]
    if len(insights) < ctx.config.min_insights:
        insights.append(summary_insight(ctx))
    return insights[: ctx.config.max_insights]


# =============================================================================
# GENERATOR
# =============================================================================


class InsightGenerator:
    """
    Produce a ranked list of insights for the current month or year.

    Reads the current and previous period through the aggregator, the
    top expense categories of the period and the spend-to-date of every
    active budget, then evaluates the rule set.
    """

    def __init__(
        self,
        store: FinanceStore,
        aggregator: Aggregator,
        config: Optional[InsightConfig] = None,
        rules: tuple[InsightRule, ...] = DEFAULT_RULES,
    ):
        self.store = store
        self.aggregator = aggregator
        self.config = config or InsightConfig()
        self.rules = rules

    def top_categories(
        self,
        user_id: str,
        summary: PeriodSummary,
    ) -> list[CategorySpending]:
        """Largest expense categories of the summarized window."""
        window = DateWindow(start=summary.start, end=summary.end)
        result = []
        for agg in self.aggregator.sum_by_category(user_id, window, type=TransactionType.EXPENSE):
            category = self.store.get_category(agg.key)
            if category is None:
                continue
            percentage = (
                float(agg.total_amount / summary.expenses * 100) if summary.expenses > 0 else 0.0
            )
            result.append(
                CategorySpending(
                    category=CategoryRef.from_category(category),
                    amount=agg.total_amount,
                    count=agg.count,
                    percentage=percentage,
                )
            )
            if len(result) >= self.config.top_categories:
                break
        return result

    def build_context(self, user_id: str, period: ReportPeriod, as_of: date) -> InsightContext:
        overview = self.aggregator.compare_periods(user_id, period, as_of)
        budgets = [
            budget_status(self.aggregator, user_id, b, as_of)
            for b in read_active_budgets(self.store, user_id, as_of)
        ]
        return InsightContext(
            period=period,
            current=overview.current,
            comparison=overview.change,
            top_categories=self.top_categories(user_id, overview.current),
            budgets=budgets,
            config=self.config,
        )

    def generate(
        self,
        user_id: str,
        period: ReportPeriod = ReportPeriod.MONTH,
        *,
        as_of: date,
    ) -> InsightReport:
        """
        Generate insights for the period containing ``as_of``.

        Returns:
            InsightReport with 1 to ``max_insights`` insights; degrades to a
            single notice instead of raising
        """
        period = ReportPeriod(period)
        try:
            ctx = self.build_context(user_id, period, as_of)
            insights = evaluate_rules(ctx, self.rules)
            logger.info(
                "insights_generated",
                user_id=user_id,
                period=period.value,
                count=len(insights),
            )
            return InsightReport(
                period=period,
                summary=ctx.current,
                comparison=ctx.comparison,
                top_categories=ctx.top_categories,
                insights=insights,
            )
        except Exception as e:
            logger.error("insights_failed", user_id=user_id, period=period.value, error=str(e))
            window = period_window(period, as_of)
            return InsightReport(
                period=period,
                summary=PeriodSummary(start=window.start, end=window.end),
                insights=[
                    Insight(
                        title="Insights Unavailable",
                        description=(
                            "We couldn't analyze your transactions right now. "
                            "Please try again later."
                        ),
                        type=InsightType.INFO,
                        priority=Priority.LOW,
                    )
                ],
                degraded=True,
                error=str(e),
            )
