"""Templated answers to free-text financial questions.

Questions are classified by keyword substrings against the lower-cased
text, in a fixed order where the first match wins. Every intent pulls
its own figures for the current calendar month and renders a response
with those numbers substituted.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import structlog

from .aggregator import Aggregator
from .models.records import TransactionType
from .models.results import (
    AdviceIntent,
    AdviceResponse,
    AdviceType,
    PeriodAggregate,
    PeriodSummary,
    ReportPeriod,
)
from .money import percent_change
from .periods import month_window, previous_period_window
from .store import FinanceStore
from .tracking import track_budgets, usage_ratio

logger = structlog.get_logger()

FOLLOW_UP_QUESTIONS = (
    "How are my budgets doing?",
    "What should I save?",
    "Where am I spending the most?",
    "How can I reduce expenses?",
)

ERROR_RESPONSE = (
    "I'm having trouble processing your request. Please try rephrasing your "
    "question or ask about budgets, spending, or savings."
)

HELP_RESPONSE = (
    "I can help you with budget planning, spending analysis, savings goals, and "
    "financial insights. Try asking:\n\n"
    "• 'How are my budgets doing?'\n"
    "• 'What should I save?'\n"
    "• 'Where am I spending the most?'\n"
    "• 'How can I reduce expenses?'\n"
    "• 'What's my financial summary?'"
)

RECOMMENDED_SAVINGS_RATE = Decimal("20")
BUDGET_WARNING_RATIO = Decimal("0.8")


def _any(*words: str) -> Callable[[str], bool]:
    return lambda text: any(w in text for w in words)


def _income_growth(text: str) -> bool:
    return "income" in text and any(w in text for w in ("growth", "increase", "how much"))


INTENT_MATCHERS: tuple[tuple[AdviceIntent, Callable[[str], bool]], ...] = (
    (AdviceIntent.BUDGET_STATUS, _any("budget", "spending limit", "budgets doing")),
    (AdviceIntent.SAVINGS, _any("save", "saving", "should i save")),
    (AdviceIntent.INCOME_GROWTH, _income_growth),
    (AdviceIntent.CATEGORY_BREAKDOWN, _any("category", "spend", "where", "spending most")),
    (AdviceIntent.EXPENSE_REDUCTION, _any("reduce", "cut", "decrease", "lower")),
    (AdviceIntent.SUMMARY, _any("balance", "overview", "summary", "how am i doing")),
)


def classify_intent(question: Optional[str]) -> AdviceIntent:
    """First matching intent for a question; HELP when nothing matches."""
    text = (question or "").lower().strip()
    for intent, matches in INTENT_MATCHERS:
        if matches(text):
            return intent
    return AdviceIntent.HELP


@dataclass
class _Reply:
    text: str
    type: AdviceType


class AdviceEngine:
    """Answer a user's question with figures from their own data."""

    def __init__(self, store: FinanceStore, aggregator: Aggregator):
        self.store = store
        self.aggregator = aggregator
        self._handlers: dict[AdviceIntent, Callable[[str, date], _Reply]] = {
            AdviceIntent.BUDGET_STATUS: self._budget_status,
            AdviceIntent.SAVINGS: self._savings,
            AdviceIntent.INCOME_GROWTH: self._income_growth,
            AdviceIntent.CATEGORY_BREAKDOWN: self._category_breakdown,
            AdviceIntent.EXPENSE_REDUCTION: self._expense_reduction,
            AdviceIntent.SUMMARY: self._summary,
        }

    def advise(self, user_id: str, question: Optional[str], *, as_of: date) -> AdviceResponse:
        """
        Answer ``question`` for ``user_id``.

        Returns:
            AdviceResponse; never raises. Failures produce a fixed apology
            with type ``error`` and no follow-up suggestions.
        """
        intent: Optional[AdviceIntent] = None
        try:
            intent = classify_intent(question)
            handler = self._handlers.get(intent)
            reply = handler(user_id, as_of) if handler else _Reply(HELP_RESPONSE, AdviceType.INFO)
            logger.info(
                "advice_answered",
                user_id=user_id,
                intent=intent.value,
                type=reply.type.value,
            )
            return AdviceResponse(
                response=reply.text,
                type=reply.type,
                intent=intent,
                suggestions=list(FOLLOW_UP_QUESTIONS),
            )
        except Exception as e:
            logger.error(
                "advice_failed",
                user_id=user_id,
                intent=intent.value if intent else None,
                error=str(e),
            )
            return AdviceResponse(
                response=ERROR_RESPONSE,
                type=AdviceType.ERROR,
                intent=intent,
                suggestions=[],
                degraded=True,
                error=str(e),
            )

    # -------------------------------------------------------------------------
    # Shared figures
    # -------------------------------------------------------------------------

    def _current_month(self, user_id: str, as_of: date) -> PeriodSummary:
        return self.aggregator.summarize(user_id, month_window(as_of))

    def _top_categories(
        self, user_id: str, as_of: date, limit: int
    ) -> list[tuple[str, PeriodAggregate]]:
        """(category name, aggregate) pairs for the month's largest expense categories."""
        result = []
        for agg in self.aggregator.sum_by_category(
            user_id, month_window(as_of), type=TransactionType.EXPENSE
        ):
            category = self.store.get_category(agg.key)
            if category is None:
                continue
            result.append((category.name, agg))
            if len(result) >= limit:
                break
        return result

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def _budget_status(self, user_id: str, as_of: date) -> _Reply:
        statuses = track_budgets(self.store, self.aggregator, user_id, as_of, to_date=True)
        if not statuses:
            return _Reply(
                "You don't have any active budgets set up yet. Creating budgets can help "
                "you track and control your spending. I recommend setting budgets for your "
                "top spending categories like Food, Transport, or Shopping.",
                AdviceType.SUGGESTION,
            )

        exceeded = [s for s in statuses if s.remaining < 0]
        warning = [
            s for s in statuses if usage_ratio(s) >= BUDGET_WARNING_RATIO and s.remaining >= 0
        ]
        if exceeded:
            listing = ", ".join(
                f"{s.category.name} (exceeded by ${abs(s.remaining):.2f})" for s in exceeded
            )
            return _Reply(
                f"⚠️ You've exceeded your budget for {listing}. Consider reviewing your "
                "spending in these categories and adjusting your budget if needed.",
                AdviceType.WARNING,
            )
        if warning:
            listing = ", ".join(f"{s.category.name} ({s.percentage:.0f}% used)" for s in warning)
            return _Reply(
                f"You're approaching your budget limit for {listing}. Monitor your spending "
                "closely to avoid exceeding these budgets.",
                AdviceType.WARNING,
            )

        lines = "\n".join(
            f"{s.category.name}: ${s.spent:.2f} / ${s.amount:.2f} ({s.percentage:.0f}% used)"
            for s in statuses
        )
        n = len(statuses)
        return _Reply(
            f"You have {n} active budget{'s' if n > 1 else ''} and you're currently "
            f"within limits:\n\n{lines}\n\nKeep monitoring your spending to stay on track!",
            AdviceType.INFO,
        )

    def _savings(self, user_id: str, as_of: date) -> _Reply:
        month = self._current_month(user_id, as_of)
        if month.income <= 0:
            return _Reply(
                "I don't see any income recorded for this month yet. Once you add income "
                "transactions, I can help you calculate how much you should save. A good "
                "rule of thumb is to save at least 20% of your income.",
                AdviceType.INFO,
            )

        rate = month.balance / month.income * 100
        saved = month.balance
        if rate > RECOMMENDED_SAVINGS_RATE:
            return _Reply(
                f"✅ Excellent! You're saving {rate:.1f}% of your income this month "
                f"(${saved:.2f}). This is above the recommended 20% savings rate. "
                "Keep up the great work!",
                AdviceType.POSITIVE,
            )
        if rate > 0:
            recommended = month.income * RECOMMENDED_SAVINGS_RATE / 100
            shortfall = recommended - saved
            return _Reply(
                f"You're currently saving {rate:.1f}% of your income this month "
                f"(${saved:.2f}). For better financial security, aim to save at least 20% "
                f"(${recommended:.2f}). You need to save ${shortfall:.2f} more to reach "
                "this goal.",
                AdviceType.SUGGESTION,
            )
        return _Reply(
            f"⚠️ You're spending ${abs(saved):.2f} more than you earn this month. Your "
            f"expenses (${month.expenses:.2f}) exceed your income (${month.income:.2f}). "
            "Focus on reducing expenses or finding ways to increase income.",
            AdviceType.WARNING,
        )

    def _income_growth(self, user_id: str, as_of: date) -> _Reply:
        income = self._current_month(user_id, as_of).income
        if income <= 0:
            return _Reply(
                "I don't see any income recorded for this month yet. Add your income "
                "transactions to track your income growth over time.",
                AdviceType.INFO,
            )

        previous = self.aggregator.total(
            user_id,
            previous_period_window(ReportPeriod.MONTH, as_of),
            type=TransactionType.INCOME,
        ).total_amount
        if previous <= 0:
            return _Reply(
                f"Your income this month is ${income:.2f}. This is your first month with "
                "recorded income. Keep tracking to see your income trends over time!",
                AdviceType.INFO,
            )

        growth = percent_change(income, previous)
        direction = "growth" if growth >= 0 else "decrease"
        return _Reply(
            f"Your income this month is ${income:.2f}. Compared to last month "
            f"(${previous:.2f}), that's a {direction} of {abs(growth):.1f}%.",
            AdviceType.POSITIVE if growth >= 0 else AdviceType.WARNING,
        )

    def _category_breakdown(self, user_id: str, as_of: date) -> _Reply:
        top = self._top_categories(user_id, as_of, limit=5)
        if not top:
            return _Reply(
                "You haven't recorded any expenses this month yet. Start adding "
                "transactions to see where your money is going.",
                AdviceType.INFO,
            )

        expenses = self._current_month(user_id, as_of).expenses
        name, agg = top[0]
        share = agg.total_amount / expenses * 100 if expenses > 0 else Decimal("0")
        top3 = "\n".join(
            f"{i}. {n}: ${a.total_amount:.2f} ({a.count} transactions)"
            for i, (n, a) in enumerate(top[:3], start=1)
        )
        return _Reply(
            f"Your top spending category this month is **{name}** with "
            f"${agg.total_amount:.2f} ({share:.1f}% of total expenses).\n\n"
            f"Top 3 spending categories:\n{top3}",
            AdviceType.INFO,
        )

    def _expense_reduction(self, user_id: str, as_of: date) -> _Reply:
        expenses = self._current_month(user_id, as_of).expenses
        if expenses <= 0:
            return _Reply(
                "You haven't recorded any expenses this month. Once you start tracking "
                "expenses, I can help identify areas to reduce spending.",
                AdviceType.INFO,
            )

        top = self._top_categories(user_id, as_of, limit=3)
        if not top:
            return _Reply(
                f"Your expenses this month are ${expenses:.2f}. To reduce expenses, review "
                "your transactions and identify areas where you can cut back.",
                AdviceType.SUGGESTION,
            )

        listing = "\n".join(f"- {n}: ${a.total_amount:.2f}" for n, a in top)
        return _Reply(
            "To reduce expenses, focus on your top spending categories:\n\n"
            f"{listing}\n\n"
            "Consider:\n"
            "1. Reviewing if these expenses are necessary\n"
            "2. Looking for cheaper alternatives\n"
            f"3. Setting a budget for {top[0][0]} (your highest category)\n"
            "4. Tracking daily spending to identify patterns",
            AdviceType.SUGGESTION,
        )

    def _summary(self, user_id: str, as_of: date) -> _Reply:
        month = self._current_month(user_id, as_of)
        balance = month.balance
        surplus = balance >= 0
        rate_line = (
            f"Savings Rate: {month.savings_rate:.1f}%"
            if month.income > 0
            else "Add income to calculate savings rate"
        )
        closing = (
            "✅ You have a positive cash flow!"
            if surplus
            else "⚠️ You're spending more than you earn. Consider reducing expenses."
        )
        return _Reply(
            "📊 **Financial Summary for This Month:**\n\n"
            f"💰 Income: ${month.income:.2f}\n"
            f"💸 Expenses: ${month.expenses:.2f}\n"
            f"📈 Balance: ${balance:.2f} {'(Surplus)' if surplus else '(Deficit)'}\n\n"
            f"{rate_line}\n\n"
            f"{closing}",
            AdviceType.POSITIVE if surplus else AdviceType.WARNING,
        )
