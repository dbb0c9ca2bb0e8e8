"""
Data Models Package

This package contains all Pydantic models used by fintrack.
All data flowing through the system must conform to these schemas.
"""

from fintrack.models.entities import (
    SYSTEM_MANAGED_FIELDS,
    AppSettings,
    Budget,
    BudgetPeriod,
    Category,
    Goal,
    Language,
    Notification,
    NotificationType,
    RecurringInterval,
    RecurringPattern,
    Theme,
    Transaction,
    TransactionType,
    User,
)
from fintrack.models.inputs import (
    DEFAULT_CATEGORIES,
    NULLABLE_SETTINGS,
    GoalContribution,
    InsertBudget,
    InsertCategory,
    InsertGoal,
    InsertTransaction,
    InsertUser,
    UpdateAppSettings,
)
from fintrack.models.validation import (
    EntityKind,
    ValidationIssue,
    ValidationResult,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entities
    "SYSTEM_MANAGED_FIELDS",
    "AppSettings",
    "Budget",
    "BudgetPeriod",
    "Category",
    "Goal",
    "Language",
    "Notification",
    "NotificationType",
    "RecurringInterval",
    "RecurringPattern",
    "Theme",
    "Transaction",
    "TransactionType",
    "User",
    # Inputs
    "DEFAULT_CATEGORIES",
    "NULLABLE_SETTINGS",
    "GoalContribution",
    "InsertBudget",
    "InsertCategory",
    "InsertGoal",
    "InsertTransaction",
    "InsertUser",
    "UpdateAppSettings",
    # Validation
    "EntityKind",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
