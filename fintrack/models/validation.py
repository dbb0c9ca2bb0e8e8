"""
Validation result models.

A validation run never raises for bad input. It returns a ValidationResult
that either carries the typed insert model (`value`) or lists every issue
found, field by field.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from fintrack.errors import ValidationError
from fintrack.models.types import utcnow


class EntityKind(str, Enum):
    """Input kinds the validation layer knows how to check."""
    USER = "user"
    CATEGORY = "category"
    TRANSACTION = "transaction"
    GOAL = "goal"
    GOAL_CONTRIBUTION = "goal_contribution"
    BUDGET = "budget"
    SETTINGS = "settings"


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue, as the caller named it (camelCase)"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'required', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (types, required fields, formats, ranges)
    Stage 2: Semantic validation (cross-field rules, soft warnings)
    """

    entity_kind: EntityKind
    validated_at: datetime = Field(default_factory=utcnow)

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    value: Optional[Any] = Field(
        default=None,
        description="The typed insert/update model; None unless is_valid"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def error_fields(self) -> list[str]:
        """Fields with at least one error, in report order."""
        fields: list[str] = []
        for issue in self.issues:
            if issue.severity == "error" and issue.field not in fields:
                fields.append(issue.field)
        return fields

    def errors_for(self, field: str) -> list[ValidationIssue]:
        return [
            issue for issue in self.issues
            if issue.field == field and issue.severity == "error"
        ]

    def unwrap(self) -> Any:
        """Return the validated value, or raise ValidationError."""
        if not self.is_valid:
            raise ValidationError(
                [issue for issue in self.issues if issue.severity == "error"],
                entity_kind=self.entity_kind.value,
            )
        return self.value
