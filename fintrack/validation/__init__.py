"""Input validation package."""

from fintrack.validation.references import (
    check_budget_category,
    check_ownership,
    check_transaction_category,
)
from fintrack.validation.validator import EntityValidator, issues_from_pydantic

__all__ = [
    "EntityValidator",
    "check_budget_category",
    "check_ownership",
    "check_transaction_category",
    "issues_from_pydantic",
]
