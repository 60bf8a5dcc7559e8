"""Read models owned by the persistence layer.

The engine consumes transactions, categories and budgets as immutable
snapshots. These models validate the shape of what the store hands over
but never write anything back.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    """Direction of a transaction and type of a category."""

    EXPENSE = "expense"
    INCOME = "income"


class BudgetPeriod(str, Enum):
    """Recurrence of a budget."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class PaymentMethod(str, Enum):
    """How a transaction was paid."""

    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    DIGITAL_WALLET = "digital_wallet"
    OTHER = "other"


def _coerce_decimal(v):
    if isinstance(v, (str, int)):
        return Decimal(str(v))
    if isinstance(v, float):
        # repr-based conversion keeps 4.5 as Decimal("4.5"), not its binary expansion
        return Decimal(repr(v))
    return v


class Category(BaseModel):
    """A spending or income category.

    Categories with no owner are global and visible to every user.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "cat-food",
                    "name": "Food & Dining",
                    "type": "expense",
                    "icon": "🍔",
                    "color": "#f97316",
                    "owner_id": None,
                    "is_default": True,
                }
            ]
        },
    }

    id: str = Field(description="Unique category identifier")
    name: str = Field(description="Display name, matched against the keyword lexicon")
    type: TransactionType = Field(description="Whether the category holds expenses or income")
    icon: str = Field(default="💰", description="Emoji or icon name for display")
    color: str = Field(default="#6366f1", description="Hex color for display")
    owner_id: Optional[str] = Field(
        default=None,
        description="Owning user id; None means the category is global",
    )
    is_default: bool = Field(default=False, description="Seeded default category")

    @property
    def is_global(self) -> bool:
        """Returns True if the category is shared by all users."""
        return self.owner_id is None

    def is_visible_to(self, user_id: str) -> bool:
        """Returns True if the user may reference this category."""
        return self.owner_id is None or self.owner_id == user_id

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Category names are trimmed like the writing layer does."""
        return v.strip()


class Transaction(BaseModel):
    """A single income or expense entry recorded by a user."""

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "txn-1",
                    "user_id": "user-1",
                    "type": "expense",
                    "amount": "4.50",
                    "category_id": "cat-food",
                    "description": "Starbucks coffee",
                    "date": "2025-03-04T08:15:00",
                }
            ]
        },
    }

    id: str = Field(description="Unique transaction identifier")
    user_id: str = Field(description="Owner of the transaction")
    type: TransactionType = Field(description="expense or income")
    amount: Decimal = Field(gt=Decimal("0"), description="Positive transaction amount")
    category_id: str = Field(description="Category the transaction is filed under")
    description: Optional[str] = Field(default=None, description="Free-text description")
    date: datetime = Field(description="When the transaction happened")
    tags: list[str] = Field(default_factory=list, description="User supplied tags")
    payment_method: Optional[PaymentMethod] = Field(default=None)
    location: Optional[str] = Field(default=None)

    @property
    def day(self) -> "date":
        """Calendar day of the transaction, used for window matching."""
        return self.date.date()

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal."""
        return _coerce_decimal(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date_to_datetime(cls, v):
        """Accept plain dates as midnight timestamps."""
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime(v.year, v.month, v.day)
        return v


class Budget(BaseModel):
    """A spending limit for one expense category over a period.

    When ``end_date`` is absent the window ends with the start month
    (monthly) or the start year (yearly); see
    :func:`fintrack_core.periods.resolve_budget_window`.
    """

    model_config = {"frozen": True}

    id: str = Field(description="Unique budget identifier")
    user_id: str = Field(description="Owner of the budget")
    category_id: str = Field(description="Expense category the budget limits")
    amount: Decimal = Field(gt=Decimal("0"), description="Spending limit for the window")
    period: BudgetPeriod = Field(description="monthly or yearly")
    start_date: date = Field(description="First day covered by the budget")
    end_date: Optional[date] = Field(default=None, description="Last day covered, if explicit")
    is_active: bool = Field(default=True)
    category: Optional[Category] = Field(
        default=None,
        description="The referenced category, populated by the store on read",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal."""
        return _coerce_decimal(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def truncate_datetimes(cls, v):
        """Budgets are day-granular; drop any time component."""
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_validator("end_date")
    @classmethod
    def end_date_after_start_date(cls, v, info):
        """Validate that end_date is not before start_date."""
        if v is not None and "start_date" in info.data and v < info.data["start_date"]:
            raise ValueError("end_date must be on or after start_date")
        return v

    @property
    def category_name(self) -> str:
        """Name of the budgeted category, or its id when not populated."""
        return self.category.name if self.category else self.category_id
