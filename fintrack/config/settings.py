"""
Configuration Management for fintrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable thresholds live here.
Validation limits, budget defaults and period policy are read from the
environment (or a .env file) so the host application can adjust them
without touching the rules themselves.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidationSettings(BaseSettings):
    """Limits applied by the validation layer."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_transaction_amount: float = Field(
        default=10_000_000.0,
        gt=0,
        description="Amount above which a transaction is flagged for review"
    )
    future_date_tolerance_days: int = Field(
        default=1,
        ge=0,
        description="How many days in the future a transaction date can be before a warning"
    )


class BudgetSettings(BaseSettings):
    """Defaults for budgets, goals and period windows."""

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_alert_threshold: int = Field(
        default=80,
        ge=1,
        le=100,
        description="Alert threshold (percent) used when a budget omits one"
    )
    week_start: int = Field(
        default=0,
        ge=0,
        le=6,
        description="First day of a weekly budget window (0 = Monday)"
    )
    goal_milestones: str = Field(
        default="25,50,75,100",
        description="Comma-separated goal progress percentages that raise a notification"
    )

    @field_validator('goal_milestones')
    @classmethod
    def validate_goal_milestones(cls, v: str) -> str:
        """Every milestone must be an integer percentage in 1..100."""
        for part in v.split(","):
            part = part.strip()
            if not part.isdigit() or not 1 <= int(part) <= 100:
                raise ValueError(f"Invalid goal milestone: {part!r}")
        return v

    @property
    def goal_milestones_list(self) -> list[int]:
        """Get milestones as a sorted list of ints."""
        return sorted({int(part.strip()) for part in self.goal_milestones.split(",")})


class CoreSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FINTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )
    default_currency: str = Field(
        default="INR",
        pattern="^[A-Z]{3}$",
        description="Currency stamped on newly created settings records"
    )
    default_goal_color: str = Field(
        default="#3B82F6",
        min_length=1,
        description="Colour used for goals created without one"
    )
    default_goal_emoji: str = Field(
        default="🎯",
        min_length=1,
        description="Emoji used for goals created without one"
    )
    seed_default_categories: bool = Field(
        default=True,
        description="Create the default category set when a user registers"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def validation(self) -> ValidationSettings:
        return ValidationSettings()

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def core(self) -> CoreSettings:
        return CoreSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool | str]:
    """
    Validate all settings groups load from the current environment.

    Returns a dict of {group_name: is_valid} plus `<group>_error` entries
    for groups that failed. Useful for startup checks.
    """
    results: dict[str, bool | str] = {}
    settings = get_settings()

    for name in ("validation", "budget", "core"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
