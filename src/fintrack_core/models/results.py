"""Result models produced by the analytics engine.

Every structure here is built fresh per call, carries no identity and is
discarded once serialized to the caller. Top-level results expose a
``degraded`` flag so callers can tell a computed answer from a fallback.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

from .records import BudgetPeriod, Category, TransactionType


class Confidence(str, Enum):
    """Qualitative trust level attached to heuristic output."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InsightType(str, Enum):
    """Tone of an insight."""

    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"


class Priority(str, Enum):
    """Informational ranking metadata for insights."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AdviceType(str, Enum):
    """Severity of an advice response."""

    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"
    SUGGESTION = "suggestion"
    ERROR = "error"


class AdviceIntent(str, Enum):
    """Question intents understood by the advice engine, in match order."""

    BUDGET_STATUS = "budget_status"
    SAVINGS = "savings"
    INCOME_GROWTH = "income_growth"
    CATEGORY_BREAKDOWN = "category_breakdown"
    EXPENSE_REDUCTION = "expense_reduction"
    SUMMARY = "summary"
    HELP = "help"


class ReportPeriod(str, Enum):
    """Caller-selected aggregation granularity."""

    MONTH = "month"
    YEAR = "year"


class BudgetHealth(str, Enum):
    """Traffic-light state of a tracked budget."""

    GOOD = "good"
    WARNING = "warning"
    EXCEEDED = "exceeded"


# =============================================================================
# SHARED BUILDING BLOCKS
# =============================================================================


class CategoryRef(BaseModel):
    """Display subset of a category embedded in results."""

    id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None

    @classmethod
    def from_category(cls, category: Category) -> "CategoryRef":
        """Build a reference from a full category read model."""
        return cls(
            id=category.id,
            name=category.name,
            icon=category.icon,
            color=category.color,
        )


class DateWindow(BaseModel):
    """An inclusive range of calendar days."""

    model_config = {"frozen": True}

    start: date = Field(description="First day in the window (inclusive)")
    end: date = Field(description="Last day in the window (inclusive)")

    def contains(self, day: date) -> bool:
        """Returns True if the day falls inside the window."""
        return self.start <= day <= self.end


class PeriodAggregate(BaseModel):
    """Sum and count of transactions sharing one grouping key.

    This is the common currency between the aggregator and every
    analytics component. ``key`` is a transaction type, a category id, an
    ISO day or a ``YYYY-MM`` month depending on the grouping dimension.
    """

    key: str = Field(description="Group key for the selected dimension")
    total_amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"))
    count: int = Field(default=0, ge=0)
    min_amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"))
    max_amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"))

    @computed_field
    @property
    def average_amount(self) -> Decimal:
        """Mean transaction amount in the group."""
        if self.count == 0:
            return Decimal("0.00")
        return (self.total_amount / self.count).quantize(Decimal("0.01"))


class PeriodSummary(BaseModel):
    """Income, expenses and balance over one window."""

    start: date
    end: date
    income: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"))
    expenses: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"))
    income_count: int = Field(default=0, ge=0)
    expense_count: int = Field(default=0, ge=0)

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Net cashflow: income minus expenses."""
        return self.income - self.expenses

    @computed_field
    @property
    def savings_rate(self) -> float:
        """Balance as a percentage of income; 0 when there is no income."""
        if self.income == 0:
            return 0.0
        return float(self.balance / self.income * 100)


class PeriodComparison(BaseModel):
    """Percent change of the current period against the previous one."""

    income_change: float = 0.0
    expense_change: float = 0.0
    balance_change: float = 0.0


class CategorySpending(BaseModel):
    """Expense total of one category within a window."""

    category: CategoryRef
    amount: Decimal
    count: int
    percentage: float = Field(description="Share of total expenses in the window (0-100)")


# =============================================================================
# CATEGORIZATION
# =============================================================================


class CategoryScore(BaseModel):
    """Ranking of one category against a description."""

    category: CategoryRef
    score: int = Field(ge=0)


class CategorizationResult(BaseModel):
    """Best category guess for a transaction description."""

    suggested_category: Optional[CategoryRef] = None
    confidence: Confidence = Confidence.LOW
    explanation: str = ""
    score: int = Field(default=0, ge=0)
    alternatives: list[CategoryScore] = Field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None


# =============================================================================
# INSIGHTS
# =============================================================================


class Insight(BaseModel):
    """A single human-readable observation."""

    title: str
    description: str
    type: InsightType
    priority: Priority


class InsightReport(BaseModel):
    """Output of the insight generator for one period."""

    period: ReportPeriod
    summary: PeriodSummary
    comparison: PeriodComparison = Field(default_factory=PeriodComparison)
    top_categories: list[CategorySpending] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None


# =============================================================================
# BUDGET SUGGESTIONS
# =============================================================================


class BudgetBasis(BaseModel):
    """Sample metadata a budget suggestion was derived from."""

    months: int
    transactions: int
    average_monthly: Decimal
    max_transaction: Decimal


class BudgetSuggestion(BaseModel):
    """Recommended monthly limit for one category."""

    category: CategoryRef
    suggested_amount: Decimal = Field(ge=Decimal("0"))
    based_on: BudgetBasis
    confidence: Confidence
    reasoning: str


class BudgetSuggestionReport(BaseModel):
    """Output of the budget advisor."""

    suggestions: list[BudgetSuggestion] = Field(default_factory=list)
    methodology: str = ""
    degraded: bool = False
    error: Optional[str] = None


# =============================================================================
# FORECASTS
# =============================================================================


class ForecastPoint(BaseModel):
    """Predicted expense total for one future month."""

    month_offset: int = Field(ge=1)
    label: str = Field(description="Month label, e.g. 'Apr 2025'")
    predicted_amount: Decimal = Field(ge=Decimal("0"))
    confidence: Confidence


class SpendingForecast(BaseModel):
    """Output of the spending forecaster."""

    based_on: str
    months_of_data: int = 0
    average_monthly_spending: Decimal = Decimal("0.00")
    moving_average: Decimal = Decimal("0.00")
    trend: Decimal = Decimal("0.00")
    predictions: list[ForecastPoint] = Field(default_factory=list)
    confidence: Confidence = Confidence.LOW
    methodology: str = ""
    degraded: bool = False
    error: Optional[str] = None


# =============================================================================
# ADVICE
# =============================================================================


class AdviceResponse(BaseModel):
    """Templated natural-language answer to a user question."""

    response: str
    type: AdviceType
    intent: Optional[AdviceIntent] = None
    suggestions: list[str] = Field(default_factory=list)
    degraded: bool = False
    error: Optional[str] = None


# =============================================================================
# REPORTING
# =============================================================================


class BudgetStatus(BaseModel):
    """Spend-to-date against one active budget."""

    budget_id: str
    category: CategoryRef
    amount: Decimal
    period: BudgetPeriod
    window: DateWindow
    spent: Decimal
    remaining: Decimal
    percentage: float
    health: BudgetHealth


class TrendPoint(BaseModel):
    """Total of one transaction type over one calendar period."""

    period: str = Field(description="'YYYY-MM' for months, 'YYYY' for years")
    start: date
    end: date
    type: TransactionType
    total: Decimal
    count: int


class DailySpending(BaseModel):
    """Expense total for one calendar day."""

    day: date
    total: Decimal
    count: int


class OverviewReport(BaseModel):
    """Current period against the previous equivalent period."""

    period: ReportPeriod
    current: PeriodSummary
    previous: PeriodSummary
    change: PeriodComparison


class PeriodComparisonReport(BaseModel):
    """Two arbitrary windows side by side; the first is the base."""

    first: PeriodSummary
    second: PeriodSummary
    change: PeriodComparison
