"""
Error Taxonomy for fintrack

Every error raised by the core is an expected, recoverable condition that
the caller reports back to the user. None of them is fatal to the process.

- ValidationError: one or more fields failed a required/format/range rule
- ReferentialInconsistency: a referenced record belongs to another user or
  has a mismatched type
- ComputationError: a derived value cannot be computed (division by zero)

IMPORTANT: Nothing here is silently corrected. Errors are surfaced.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from fintrack.models.validation import ValidationIssue


class FinanceCoreError(Exception):
    """Base exception for all fintrack core errors."""
    pass


class ValidationError(FinanceCoreError):
    """
    Raw input failed validation.

    Carries the field-level issues so callers can re-prompt or reject the
    request with a 4xx-equivalent response.
    """

    def __init__(
        self,
        issues: list["ValidationIssue"],
        entity_kind: Optional[str] = None,
    ):
        self.issues = issues
        self.entity_kind = entity_kind
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        target = f"{entity_kind} " if entity_kind else ""
        super().__init__(f"Invalid {target}input: {summary}")

    @property
    def fields(self) -> list[str]:
        """Offending field names, in the order they were reported."""
        seen: list[str] = []
        for issue in self.issues:
            if issue.field not in seen:
                seen.append(issue.field)
        return seen


class ReferentialInconsistency(FinanceCoreError):
    """A referenced Category/Budget/Goal does not fit the referencing record."""

    def __init__(
        self,
        message: str,
        field: str,
        entity_id: Optional[str] = None,
    ):
        self.field = field
        self.entity_id = entity_id
        super().__init__(message)


class ComputationError(FinanceCoreError):
    """A derived-state value could not be computed."""

    def __init__(self, message: str, operation: str):
        self.operation = operation
        super().__init__(message)
