"""Derived-state rules package."""

from fintrack.derived.periods import (
    DateRange,
    WindowProvider,
    calendar_window_provider,
    period_window,
)
from fintrack.derived.rules import (
    BudgetStatus,
    PeriodSummary,
    accumulate_spent,
    apply_transaction,
    budget_remaining,
    budget_status,
    budget_utilization,
    crossed_goal_milestones,
    goal_progress,
    is_budget_alert_triggered,
    recompute_spent,
    summarize_transactions,
)

__all__ = [
    # Periods
    "DateRange",
    "WindowProvider",
    "calendar_window_provider",
    "period_window",
    # Rules
    "BudgetStatus",
    "PeriodSummary",
    "accumulate_spent",
    "apply_transaction",
    "budget_remaining",
    "budget_status",
    "budget_utilization",
    "crossed_goal_milestones",
    "goal_progress",
    "is_budget_alert_triggered",
    "recompute_spent",
    "summarize_transactions",
]
