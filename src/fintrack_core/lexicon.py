"""Keyword lexicon for description-based categorization.

Maps canonical category *names* to the keywords and phrases that suggest
them, plus small amount-range bonuses. Matching is by name, so a user
category whose name is not listed here simply scores 0 rather than
failing.

The lexicon is versioned with the code and built once at import; pass a
different :class:`KeywordLexicon` to the categorizer to customise it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional


LEXICON_VERSION = "2025.1"


# =============================================================================
# KEYWORDS
# =============================================================================

CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Food & Dining": (
        "restaurant", "food", "dining", "cafe", "coffee", "lunch", "dinner",
        "breakfast", "pizza", "burger", "starbucks", "mcdonald", "kfc", "subway",
    ),
    "Shopping": (
        "amazon", "walmart", "target", "mall", "store", "shop", "purchase",
        "buy", "retail", "clothing", "apparel",
    ),
    "Transportation": (
        "uber", "lyft", "taxi", "gas", "fuel", "parking", "metro", "subway",
        "bus", "train", "airline", "flight", "car", "vehicle",
    ),
    "Bills & Utilities": (
        "electric", "water", "gas bill", "internet", "phone", "utility", "bill",
        "payment", "subscription", "netflix", "spotify",
    ),
    "Entertainment": (
        "movie", "cinema", "theater", "concert", "game", "sports", "ticket",
        "entertainment", "fun",
    ),
    "Healthcare": (
        "hospital", "doctor", "pharmacy", "medicine", "medical", "health",
        "clinic", "dental", "prescription",
    ),
    "Education": (
        "school", "university", "course", "tuition", "book", "education",
        "learning", "student",
    ),
    "Travel": (
        "hotel", "travel", "vacation", "trip", "airbnb", "booking", "resort",
    ),
}


# =============================================================================
# AMOUNT HEURISTICS
# =============================================================================


@dataclass(frozen=True)
class AmountRule:
    """Bonus points when an amount falls strictly inside a range.

    A missing bound is unbounded on that side.
    """

    category_name: str
    bonus: int
    above: Optional[Decimal] = None
    below: Optional[Decimal] = None

    def applies(self, category_name: str, amount: Decimal) -> bool:
        if category_name != self.category_name:
            return False
        if self.above is not None and not amount > self.above:
            return False
        if self.below is not None and not amount < self.below:
            return False
        return True


AMOUNT_RULES: tuple[AmountRule, ...] = (
    # Small tickets lean toward dining out
    AmountRule("Food & Dining", bonus=3, below=Decimal("100")),
    AmountRule("Shopping", bonus=2, above=Decimal("50")),
    AmountRule("Bills & Utilities", bonus=2, above=Decimal("20"), below=Decimal("500")),
)


# =============================================================================
# LEXICON
# =============================================================================


@dataclass(frozen=True)
class KeywordLexicon:
    """Immutable keyword and amount-heuristic tables."""

    keywords: Mapping[str, tuple[str, ...]]
    amount_rules: tuple[AmountRule, ...] = field(default_factory=tuple)
    version: str = LEXICON_VERSION

    @classmethod
    def build(
        cls,
        keywords: Mapping[str, tuple[str, ...]],
        amount_rules: tuple[AmountRule, ...] = (),
        version: str = LEXICON_VERSION,
    ) -> "KeywordLexicon":
        """Freeze the given tables; keywords are lower-cased once here."""
        frozen = {
            name: tuple(k.lower() for k in words) for name, words in keywords.items()
        }
        return cls(
            keywords=MappingProxyType(frozen),
            amount_rules=tuple(amount_rules),
            version=version,
        )

    def keywords_for(self, category_name: str) -> tuple[str, ...]:
        """Keywords for a category name; empty for unknown names."""
        return self.keywords.get(category_name, ())

    def amount_bonus(self, category_name: str, amount: Decimal) -> int:
        """Sum of every amount rule that applies."""
        return sum(r.bonus for r in self.amount_rules if r.applies(category_name, amount))


DEFAULT_LEXICON = KeywordLexicon.build(CATEGORY_KEYWORDS, AMOUNT_RULES)
