"""
Two-Stage Validation Pipeline

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (a blank string counts as missing)
- Type checking
- Format validation (decimal amounts, ISO 8601 dates)
- Numeric range (positive amounts, threshold 1..100)

STAGE 2 - SEMANTIC VALIDATION:
- Cross-field rules (recurring flag vs pattern, pattern end date)
- System-managed settings keys
- Soft warnings (future dates, unusually large amounts, past goal dates)

WHY TWO STAGES:
1. Separation of concerns (structural vs logical)
2. Better error messages (know exactly what kind of issue)
3. Stage 2 can rely on typed values because it only runs after stage 1

Each entity kind has its own validate_* method rather than one polymorphic
validator. validate() dispatches on EntityKind for callers that only have
the kind at runtime.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the caller can re-prompt or reject the request.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from fintrack.config import BudgetSettings, ValidationSettings, get_settings
from fintrack.models.entities import SYSTEM_MANAGED_FIELDS
from fintrack.models.inputs import (
    NULLABLE_SETTINGS,
    GoalContribution,
    InsertBudget,
    InsertCategory,
    InsertGoal,
    InsertTransaction,
    InsertUser,
    UpdateAppSettings,
)
from fintrack.models.types import utcnow
from fintrack.models.validation import (
    EntityKind,
    ValidationIssue,
    ValidationResult,
)


_SUGGESTED_FIXES = {
    "required": "Provide a value for this field",
    "invalid_format": 'Use a plain decimal number such as "420.00"',
    "invalid_precision": "Round the amount to two decimal places",
    "invalid_date": 'Use a date such as "2024-10-05"',
    "out_of_range": "Check the value was entered correctly",
}

# Settings keys are checked against both spellings
_SYSTEM_MANAGED_KEYS = {
    key: key for key in SYSTEM_MANAGED_FIELDS
} | {
    "user_id": "userId",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    """
    Convert a Pydantic ValidationError into per-field issues.

    Missing keys and blank strings both become issue_type "required" with a
    message naming the field.
    """
    issues = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "input"
        error_type = err["type"]

        if error_type in ("missing", "required"):
            issue_type = "required"
            message = f"{field} is required"
        else:
            issue_type = error_type
            message = f"{field}: {err['msg']}"

        issues.append(ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
            severity="error",
            suggested_fix=_SUGGESTED_FIXES.get(issue_type),
        ))
    return issues


class EntityValidator:
    """
    Validates raw, untyped input for each entity kind.

    Returns a ValidationResult; never raises for bad input. Use
    ValidationResult.unwrap() to turn a rejection into ValidationError.
    """

    def __init__(
        self,
        validation_settings: Optional[ValidationSettings] = None,
        budget_settings: Optional[BudgetSettings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize validator.

        Args:
            validation_settings: Limits for warnings. Defaults to env config.
            budget_settings: Budget defaults. Defaults to env config.
            clock: Source of "now" for date checks (injectable for tests).
        """
        settings = get_settings()
        self._settings = validation_settings or settings.validation
        self._budget_settings = budget_settings or settings.budget
        self._clock = clock
        self._dispatch: dict[EntityKind, Callable[[Any], ValidationResult]] = {
            EntityKind.USER: self.validate_user,
            EntityKind.CATEGORY: self.validate_category,
            EntityKind.TRANSACTION: self.validate_transaction,
            EntityKind.GOAL: self.validate_goal,
            EntityKind.GOAL_CONTRIBUTION: self.validate_goal_contribution,
            EntityKind.BUDGET: self.validate_budget,
            EntityKind.SETTINGS: self.validate_settings_update,
        }

    # -------------------------------------------------------------------------
    # Stage 1
    # -------------------------------------------------------------------------

    def _validate_schema(
        self,
        model: type[BaseModel],
        raw: Any,
    ) -> tuple[Optional[BaseModel], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (typed_value_or_None, list_of_issues)
        """
        try:
            return model.model_validate(raw), []
        except PydanticValidationError as e:
            return None, issues_from_pydantic(e)

    def _run(
        self,
        kind: EntityKind,
        model: type[BaseModel],
        raw: Any,
        semantic: Optional[Callable[[Any, Any], tuple[Any, list[ValidationIssue]]]] = None,
    ) -> ValidationResult:
        all_issues: list[ValidationIssue] = []

        value, schema_issues = self._validate_schema(model, raw)
        all_issues.extend(schema_issues)
        schema_valid = value is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            if semantic is not None:
                value, semantic_issues = semantic(value, raw)
                all_issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in all_issues)

        is_valid = schema_valid and semantic_valid

        return ValidationResult(
            entity_kind=kind,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=is_valid,
            issues=all_issues,
            warnings=[i.message for i in all_issues if i.severity == "warning"],
            value=value if is_valid else None,
        )

    # -------------------------------------------------------------------------
    # Stage 2, per kind
    # -------------------------------------------------------------------------

    def _semantic_transaction(
        self,
        txn: InsertTransaction,
        raw: Any,
    ) -> tuple[InsertTransaction, list[ValidationIssue]]:
        """
        Checks:
        - Recurring transactions carry a pattern
        - Pattern end date is not before the transaction date
        - Future dates (warning)
        - Absurd amounts (warning)
        """
        issues = []
        today = self._clock().date()

        if txn.is_recurring and txn.recurring_pattern is None:
            issues.append(ValidationIssue(
                field="recurringPattern",
                issue_type="required",
                message="recurringPattern is required when isRecurring is true",
                severity="error",
                suggested_fix="Provide interval, endDate and occurrences",
            ))

        if (
            txn.recurring_pattern is not None
            and txn.recurring_pattern.end_date < txn.date.date()
        ):
            issues.append(ValidationIssue(
                field="recurringPattern.endDate",
                issue_type="inconsistent",
                message="recurringPattern.endDate is before the transaction date",
                severity="error",
                suggested_fix="Pick an end date on or after the first occurrence",
            ))

        max_future_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if txn.date.date() > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Transaction date ({txn.date.date()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = Decimal(str(self._settings.max_transaction_amount))
        if txn.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({txn.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return txn, issues

    def _semantic_goal(
        self,
        goal: InsertGoal,
        raw: Any,
    ) -> tuple[InsertGoal, list[ValidationIssue]]:
        issues = []
        if goal.target_date.date() < self._clock().date():
            issues.append(ValidationIssue(
                field="targetDate",
                issue_type="past_date",
                message=f"Target date ({goal.target_date.date()}) is in the past",
                severity="warning",
                suggested_fix="Please verify the target date",
            ))
        return goal, issues

    def _semantic_budget(
        self,
        budget: InsertBudget,
        raw: Any,
    ) -> tuple[InsertBudget, list[ValidationIssue]]:
        """Fill in the configured alert threshold when the caller omitted it."""
        if budget.alert_threshold is None:
            budget = budget.model_copy(
                update={"alert_threshold": self._budget_settings.default_alert_threshold}
            )
        return budget, []

    def _semantic_settings(
        self,
        update: UpdateAppSettings,
        raw: Any,
    ) -> tuple[UpdateAppSettings, list[ValidationIssue]]:
        """
        Checks:
        - System-managed keys (id, userId, createdAt, updatedAt) were not sent
        - Non-nullable settings were not sent as null
        """
        issues = []

        for key in (raw.keys() if isinstance(raw, dict) else ()):
            if key in _SYSTEM_MANAGED_KEYS:
                field = _SYSTEM_MANAGED_KEYS[key]
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="immutable",
                    message=f"{field} is system-managed and cannot be updated",
                    severity="error",
                    suggested_fix=f"Remove {field} from the update",
                ))

        for name, value in update.changes().items():
            if value is None and name not in NULLABLE_SETTINGS:
                field = to_camel(name)
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="not_nullable",
                    message=f"{field} cannot be null",
                    severity="error",
                    suggested_fix=f"Omit {field} to leave it unchanged",
                ))

        return update, issues

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def validate_user(self, raw: Any) -> ValidationResult:
        """Registration input: non-empty username and password."""
        return self._run(EntityKind.USER, InsertUser, raw)

    def validate_category(self, raw: Any) -> ValidationResult:
        return self._run(EntityKind.CATEGORY, InsertCategory, raw)

    def validate_transaction(self, raw: Any) -> ValidationResult:
        """New transaction: amount and date arrive as strings."""
        return self._run(
            EntityKind.TRANSACTION, InsertTransaction, raw, self._semantic_transaction
        )

    def validate_goal(self, raw: Any) -> ValidationResult:
        return self._run(EntityKind.GOAL, InsertGoal, raw, self._semantic_goal)

    def validate_goal_contribution(self, raw: Any) -> ValidationResult:
        return self._run(EntityKind.GOAL_CONTRIBUTION, GoalContribution, raw)

    def validate_budget(self, raw: Any) -> ValidationResult:
        return self._run(EntityKind.BUDGET, InsertBudget, raw, self._semantic_budget)

    def validate_settings_update(self, raw: Any) -> ValidationResult:
        """Partial settings update; system-managed keys are rejected."""
        return self._run(
            EntityKind.SETTINGS, UpdateAppSettings, raw, self._semantic_settings
        )

    def validate(self, kind: EntityKind | str, raw: Any) -> ValidationResult:
        """
        Validate raw input for the given entity kind.

        Raises:
            ValueError: If kind is not a known entity kind
        """
        return self._dispatch[EntityKind(kind)](raw)

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("Some information is missing or invalid:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
