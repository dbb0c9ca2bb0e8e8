"""Configuration package."""

from fintrack.config.settings import (
    BudgetSettings,
    CoreSettings,
    Settings,
    ValidationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "BudgetSettings",
    "CoreSettings",
    "Settings",
    "ValidationSettings",
    "get_settings",
    "validate_all_settings",
]
