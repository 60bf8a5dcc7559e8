"""Keyword-scoring categorization of transaction descriptions.

Categorization is advisory: it must never block the caller from saving a
transaction. Any failure therefore degrades to the first visible category
with low confidence instead of raising.
"""

from decimal import Decimal
from typing import Optional, Union

import structlog

from .aggregator import Aggregator
from .config import CategorizationConfig
from .exceptions import DataAccessError
from .lexicon import DEFAULT_LEXICON, KeywordLexicon
from .models.records import Category, TransactionType
from .models.results import (
    CategorizationResult,
    CategoryRef,
    CategoryScore,
    Confidence,
)
from .store import FinanceStore

logger = structlog.get_logger()


class CategorizationScorer:
    """
    Suggest an expense category for a free-text description.

    Each visible expense category is scored against the lower-cased
    description: lexicon keyword hits, category-name word hits and
    amount-range bonuses. The best score wins; ties keep the store's
    enumeration order. With no signal at all the user's most used
    category is suggested instead.
    """

    def __init__(
        self,
        store: FinanceStore,
        aggregator: Aggregator,
        lexicon: KeywordLexicon = DEFAULT_LEXICON,
        config: Optional[CategorizationConfig] = None,
    ):
        self.store = store
        self.aggregator = aggregator
        self.lexicon = lexicon
        self.config = config or CategorizationConfig()

    def score(self, category: Category, description: str, amount: Decimal) -> int:
        """Score one category against an already lower-cased description."""
        cfg = self.config
        score = 0

        for keyword in self.lexicon.keywords_for(category.name):
            if keyword in description:
                score += cfg.keyword_weight

        for word in category.name.lower().split(" "):
            if len(word) > cfg.name_word_min_length and word in description:
                score += cfg.name_word_weight

        score += self.lexicon.amount_bonus(category.name, amount)
        return score

    def rank(
        self,
        categories: list[Category],
        description: str,
        amount: Decimal,
    ) -> list[tuple[Category, int]]:
        """All categories with their scores, best first (stable on ties)."""
        scored = [(c, self.score(c, description, amount)) for c in categories]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def confidence_for(self, score: int) -> Confidence:
        if score >= self.config.high_threshold:
            return Confidence.HIGH
        if score >= self.config.medium_threshold:
            return Confidence.MEDIUM
        return Confidence.LOW

    def _most_used(self, user_id: str, categories: list[Category]) -> Optional[Category]:
        visible = {c.id: c for c in categories}
        for usage in self.aggregator.category_usage(user_id, type=TransactionType.EXPENSE):
            if usage.key in visible:
                return visible[usage.key]
        return None

    def _alternatives(
        self,
        ranked: list[tuple[Category, int]],
        chosen: Category,
    ) -> list[CategoryScore]:
        runners = [(c, s) for c, s in ranked if c.id != chosen.id]
        return [
            CategoryScore(category=CategoryRef.from_category(c), score=s)
            for c, s in runners[: self.config.max_alternatives]
        ]

    def categorize(
        self,
        user_id: str,
        description: Optional[str],
        amount: Union[Decimal, float, int, str],
    ) -> CategorizationResult:
        """
        Suggest a category for a transaction.

        Args:
            user_id: Owner of the transaction
            description: Free-text description (may be empty)
            amount: Positive transaction amount

        Returns:
            CategorizationResult; never raises
        """
        try:
            amount = Decimal(str(amount))
            categories = self._expense_categories(user_id)
            if not categories:
                logger.info("categorize_no_categories", user_id=user_id)
                return CategorizationResult(
                    suggested_category=None,
                    confidence=Confidence.LOW,
                    explanation="No expense categories found",
                )

            text = (description or "").lower()
            ranked = self.rank(categories, text, amount)
            top, top_score = ranked[0]

            if top_score == 0:
                chosen = self._most_used(user_id, categories) or categories[0]
                logger.info(
                    "categorize_fallback",
                    user_id=user_id,
                    category=chosen.name,
                )
                return CategorizationResult(
                    suggested_category=CategoryRef.from_category(chosen),
                    confidence=Confidence.LOW,
                    explanation="No keyword matches found. Using most frequently used category.",
                    score=0,
                    alternatives=self._alternatives(ranked, chosen),
                )

            confidence = self.confidence_for(top_score)
            if confidence == Confidence.HIGH:
                explanation = f'Strong keyword match found for "{top.name}"'
            else:
                explanation = f'Partial match found for "{top.name}"'

            logger.debug(
                "categorize_scored",
                user_id=user_id,
                category=top.name,
                score=top_score,
                confidence=confidence.value,
            )
            return CategorizationResult(
                suggested_category=CategoryRef.from_category(top),
                confidence=confidence,
                explanation=explanation,
                score=top_score,
                alternatives=self._alternatives(ranked, top),
            )
        except Exception as e:
            logger.error("categorize_failed", user_id=user_id, error=str(e))
            return self._degraded(user_id, e)

    def _expense_categories(self, user_id: str) -> list[Category]:
        try:
            return list(self.store.list_categories(user_id, type=TransactionType.EXPENSE))
        except Exception as e:
            raise DataAccessError(
                f"Failed to read categories: {e}",
                operation="list_categories",
                user_id=user_id,
            ) from e

    def _degraded(self, user_id: str, cause: Exception) -> CategorizationResult:
        first: Optional[CategoryRef] = None
        try:
            categories = self._expense_categories(user_id)
            if categories:
                first = CategoryRef.from_category(categories[0])
        except DataAccessError as e:
            logger.warning("categorize_default_unavailable", user_id=user_id, error=str(e))
        return CategorizationResult(
            suggested_category=first,
            confidence=Confidence.LOW,
            explanation="Error in categorization. Using default category.",
            degraded=True,
            error=str(cause),
        )
