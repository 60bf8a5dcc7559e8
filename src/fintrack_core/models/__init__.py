"""Data models for fintrack-core.

This package provides:
- Read models handed over by the persistence layer (records.py)
- Result models produced by the analytics engine (results.py)
"""

from fintrack_core.models.records import (
    Budget,
    BudgetPeriod,
    Category,
    PaymentMethod,
    Transaction,
    TransactionType,
)
from fintrack_core.models.results import (
    # Enumerations
    AdviceIntent,
    AdviceType,
    BudgetHealth,
    Confidence,
    InsightType,
    Priority,
    ReportPeriod,
    # Building blocks
    CategoryRef,
    CategorySpending,
    DateWindow,
    PeriodAggregate,
    PeriodComparison,
    PeriodSummary,
    # Operation results
    AdviceResponse,
    BudgetBasis,
    BudgetStatus,
    BudgetSuggestion,
    BudgetSuggestionReport,
    CategorizationResult,
    CategoryScore,
    DailySpending,
    ForecastPoint,
    Insight,
    InsightReport,
    OverviewReport,
    PeriodComparisonReport,
    SpendingForecast,
    TrendPoint,
)

__all__ = [
    # Read models
    "Budget",
    "BudgetPeriod",
    "Category",
    "PaymentMethod",
    "Transaction",
    "TransactionType",
    # Enumerations
    "AdviceIntent",
    "AdviceType",
    "BudgetHealth",
    "Confidence",
    "InsightType",
    "Priority",
    "ReportPeriod",
    # Building blocks
    "CategoryRef",
    "CategorySpending",
    "DateWindow",
    "PeriodAggregate",
    "PeriodComparison",
    "PeriodSummary",
    # Operation results
    "AdviceResponse",
    "BudgetBasis",
    "BudgetStatus",
    "BudgetSuggestion",
    "BudgetSuggestionReport",
    "CategorizationResult",
    "CategoryScore",
    "DailySpending",
    "ForecastPoint",
    "Insight",
    "InsightReport",
    "OverviewReport",
    "PeriodComparisonReport",
    "SpendingForecast",
    "TrendPoint",
]
