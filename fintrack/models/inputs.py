"""
Insertable and updatable subsets of the entity models.

These are the shapes a caller may supply. System-managed fields (id,
userId, createdAt, updatedAt) are absent: ids come from storage, the owner
comes from the authenticated session, timestamps come from the clock.

Unknown keys are dropped rather than rejected, matching how the client
application's own schemas treat them.
"""

from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from fintrack.models.entities import (
    BudgetPeriod,
    Language,
    RecurringPattern,
    Theme,
    TransactionType,
)
from fintrack.models.types import (
    IsoDateTime,
    PositiveAmount,
    Required,
    RequiredText,
    require_secret,
)


class InsertModel(BaseModel):
    """Base for caller-supplied input shapes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class InsertUser(InsertModel):
    """
    Registration input.

    The password is kept verbatim (no whitespace stripping) and handed to
    the password hasher; it is never stored as-is.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    username: Annotated[
        str,
        Required,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=64),
    ]
    password: Annotated[str, BeforeValidator(require_secret), Field(repr=False)]


class InsertCategory(InsertModel):
    name: Annotated[RequiredText, Field(max_length=50)]
    icon: RequiredText
    type: Annotated[TransactionType, Required]
    color: RequiredText


class InsertTransaction(InsertModel):
    """
    New transaction input.

    amount and date arrive as strings and leave as Decimal/datetime.
    Optional fields are type-checked only.
    """

    category_id: RequiredText
    amount: PositiveAmount
    description: Annotated[RequiredText, Field(max_length=500)]
    type: Annotated[TransactionType, Required]
    payment_method: RequiredText
    date: IsoDateTime
    location: Optional[str] = None
    receipt_url: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[RecurringPattern] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator('is_recurring', 'tags', mode='before')
    @classmethod
    def null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Nullable columns: an explicit null is the column default."""
        if v is None:
            return False if info.field_name == "is_recurring" else []
        return v


class InsertGoal(InsertModel):
    name: Annotated[RequiredText, Field(max_length=100)]
    description: Optional[str] = Field(default=None, max_length=500)
    target_amount: PositiveAmount
    target_date: IsoDateTime
    emoji: Optional[str] = None
    color: Optional[str] = None


class GoalContribution(InsertModel):
    """Money added to (or recorded against) a goal."""

    amount: PositiveAmount


class InsertBudget(InsertModel):
    category_id: RequiredText
    amount: PositiveAmount
    period: Annotated[BudgetPeriod, Required]
    alert_threshold: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        description="Percent; the configured default applies when omitted"
    )


# Settings fields that may be explicitly cleared with null
NULLABLE_SETTINGS = frozenset({"pin_hash"})


class UpdateAppSettings(InsertModel):
    """
    Partial settings update.

    Every field is optional; only fields the caller actually sent are
    applied (see changes()).
    """

    theme: Optional[Theme] = None
    language: Optional[Language] = None
    currency: Optional[str] = Field(default=None, pattern="^[A-Z]{3}$")
    app_lock_enabled: Optional[bool] = None
    pin_hash: Optional[str] = Field(default=None, repr=False)
    data_encryption: Optional[bool] = None
    budget_alerts: Optional[bool] = None
    goal_milestones: Optional[bool] = None
    daily_summary: Optional[bool] = None
    auto_backup: Optional[bool] = None
    smart_categorization: Optional[bool] = None
    location_tracking: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        """Fields the caller sent, keyed by field name."""
        return self.model_dump(exclude_unset=True)


DEFAULT_CATEGORIES: tuple[InsertCategory, ...] = (
    InsertCategory(name="Food & Dining", icon="utensils", type=TransactionType.EXPENSE, color="#F97316"),
    InsertCategory(name="Transportation", icon="car", type=TransactionType.EXPENSE, color="#3B82F6"),
    InsertCategory(name="Shopping", icon="shopping-bag", type=TransactionType.EXPENSE, color="#EC4899"),
    InsertCategory(name="Bills & Utilities", icon="receipt", type=TransactionType.EXPENSE, color="#EAB308"),
    InsertCategory(name="Entertainment", icon="film", type=TransactionType.EXPENSE, color="#8B5CF6"),
    InsertCategory(name="Healthcare", icon="heart-pulse", type=TransactionType.EXPENSE, color="#EF4444"),
    InsertCategory(name="Salary", icon="briefcase", type=TransactionType.INCOME, color="#22C55E"),
    InsertCategory(name="Other Income", icon="wallet", type=TransactionType.INCOME, color="#14B8A6"),
)
