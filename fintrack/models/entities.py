"""
Core Entity Models for fintrack

These models define the persisted shape of every record the finance tracker
keeps: users, categories, transactions, goals, budgets, notifications and
per-user settings.

They are designed to:
1. Enforce type safety at runtime
2. Mirror storage column constraints (money is numeric(12, 2))
3. Serialize with the camelCase keys the client application uses
4. Carry no behaviour beyond trivial copy helpers

DESIGN DECISION: Ids are never generated here.
The storage collaborator owns id generation and passes ids in, which keeps
records reproducible in tests.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from fintrack.models.types import (
    IsoDate,
    IsoDateTime,
    NonNegativeMoney,
    PositiveMoney,
    utcnow,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of money flow.

    Shared by Category.type and Transaction.type: a transaction must have the
    same type as the category it is filed under.
    """
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    """Length of the window a budget limit applies to."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class RecurringInterval(str, Enum):
    """Repeat interval of a recurring transaction."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class NotificationType(str, Enum):
    """Kinds of notification the derived-state rules can produce."""
    BUDGET_ALERT = "budget_alert"
    GOAL_MILESTONE = "goal_milestone"
    DAILY_SUMMARY = "daily_summary"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"


class Language(str, Enum):
    ENGLISH = "en"
    TELUGU = "te"


# Settings keys a client may never write
SYSTEM_MANAGED_FIELDS = ("id", "userId", "createdAt", "updatedAt")


class FinanceRecord(BaseModel):
    """Base for all persisted records: camelCase aliases, trimmed strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# USERS & CATEGORIES
# =============================================================================

class User(FinanceRecord):
    """
    A registered user.

    Password and PIN are stored as hashes only. Hashing happens in the
    authentication layer before a User is ever built.
    """

    id: str = Field(..., min_length=1)
    username: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Login name, unique across the system"
    )
    password_hash: str = Field(..., min_length=1, repr=False)
    pin_hash: Optional[str] = Field(default=None, repr=False)
    biometric_enabled: bool = False
    created_at: datetime = Field(default_factory=utcnow)


class Category(FinanceRecord):
    """
    A user-owned category that transactions and budgets point at.

    CRITICAL: `type` is fixed at creation. Changing it would silently
    reclassify every transaction already filed under the category.
    """

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=50)
    icon: str = Field(..., min_length=1)
    type: TransactionType = Field(..., frozen=True)
    color: str = Field(..., min_length=1)
    is_default: bool = False
    created_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class RecurringPattern(FinanceRecord):
    """
    Descriptor of how a transaction repeats.

    Stored only. Nothing in fintrack executes the pattern.
    """

    interval: RecurringInterval
    end_date: IsoDate
    occurrences: int = Field(
        ...,
        ge=1,
        description="Number of times the transaction repeats"
    )


class Transaction(FinanceRecord):
    """A single income or expense entry."""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    amount: PositiveMoney = Field(
        ...,
        description="Amount in the user's currency, always positive"
    )
    description: str = Field(..., min_length=1, max_length=500)
    type: TransactionType
    payment_method: str = Field(..., min_length=1)
    date: IsoDateTime
    location: Optional[str] = None
    receipt_url: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode='after')
    def validate_recurrence(self) -> 'Transaction':
        """A recurring transaction must say how it recurs."""
        if self.is_recurring and self.recurring_pattern is None:
            raise ValueError("Recurring transactions require a recurring pattern")
        return self

    @property
    def calendar_date(self) -> date:
        return self.date.date()


# =============================================================================
# GOALS & BUDGETS
# =============================================================================

class Goal(FinanceRecord):
    """
    A savings goal.

    current_amount may exceed target_amount; progress is clamped for
    display by the derived-state rules, not here.
    """

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    target_amount: PositiveMoney
    current_amount: NonNegativeMoney = Decimal("0")
    target_date: IsoDateTime
    emoji: str = "🎯"
    color: str = Field(..., min_length=1)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Budget(FinanceRecord):
    """
    A spending limit for one category over a repeating period.

    `spent` is an accumulator maintained by the storage collaborator using
    the derived-state rules.
    """

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    amount: PositiveMoney = Field(
        ...,
        description="Limit for one period"
    )
    period: BudgetPeriod
    spent: NonNegativeMoney = Decimal("0")
    alert_threshold: int = Field(
        default=80,
        ge=1,
        le=100,
        description="Utilization percentage at which an alert fires"
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# NOTIFICATIONS & SETTINGS
# =============================================================================

class Notification(FinanceRecord):
    """
    A message for the user.

    Frozen: once created, only the read flag may change, and that goes
    through mark_read() which returns a new record.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    type: NotificationType
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    data: Optional[dict[str, Any]] = Field(
        default=None,
        description="Opaque context payload (ids, amounts) for the client"
    )
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    def mark_read(self) -> 'Notification':
        return self.model_copy(update={"is_read": True})


class AppSettings(FinanceRecord):
    """Per-user application settings. Exactly one record per user."""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    theme: Theme = Theme.AUTO
    language: Language = Language.ENGLISH
    currency: str = Field(default="INR", pattern="^[A-Z]{3}$")
    app_lock_enabled: bool = False
    pin_hash: Optional[str] = Field(default=None, repr=False)
    data_encryption: bool = True
    budget_alerts: bool = True
    goal_milestones: bool = True
    daily_summary: bool = False
    auto_backup: bool = False
    smart_categorization: bool = True
    location_tracking: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def apply(
        self,
        changes: dict[str, Any],
        now: Optional[datetime] = None,
    ) -> 'AppSettings':
        """
        Return a copy with already-validated changes applied.

        `changes` is keyed by field name (see UpdateAppSettings.changes()).
        """
        return self.model_copy(
            update={**changes, "updated_at": now or utcnow()}
        )
