"""
Derived-State Rules

Pure functions over already-validated records:
- budget utilization and alert triggering
- goal progress and milestone crossing
- accumulation of a budget's spent value

GUARANTEES:
- Inputs are never mutated; functions that "update" return new values
- Money stays Decimal end to end
- Division by zero is reported as ComputationError, never inf or NaN
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from fintrack.derived.periods import DateRange
from fintrack.errors import ComputationError
from fintrack.models.entities import Budget, Goal, Transaction, TransactionType
from fintrack.models.types import utcnow


HUNDRED = Decimal("100")
ZERO = Decimal("0")
ONE = Decimal("1")


# =============================================================================
# BUDGETS
# =============================================================================

def budget_utilization(budget: Budget) -> Decimal:
    """
    Percentage of the budget used: spent / amount * 100.

    Raises:
        ComputationError: If the budget amount is zero
    """
    if budget.amount == 0:
        raise ComputationError(
            f"Budget {budget.id} has a zero amount; utilization is undefined",
            operation="budget_utilization",
        )
    return budget.spent / budget.amount * HUNDRED


def is_budget_alert_triggered(budget: Budget) -> bool:
    """True once utilization reaches the budget's alert threshold."""
    return budget_utilization(budget) >= Decimal(budget.alert_threshold)


def budget_remaining(budget: Budget) -> Decimal:
    """Amount left in the period. Negative when overspent."""
    return budget.amount - budget.spent


def accumulate_spent(
    budget: Budget,
    transaction: Transaction,
    window: DateRange,
) -> Decimal:
    """
    The budget's spent value after counting `transaction`.

    The transaction counts only if it is an expense, filed under the
    budget's category, and dated inside `window` (the budget's current
    period, supplied by the caller). Otherwise spent is returned unchanged.
    """
    if (
        transaction.type == TransactionType.EXPENSE
        and transaction.category_id == budget.category_id
        and window.contains(transaction.date)
    ):
        return budget.spent + transaction.amount
    return budget.spent


def apply_transaction(
    budget: Budget,
    transaction: Transaction,
    window: DateRange,
    now: Optional[datetime] = None,
) -> Budget:
    """Return a copy of budget with `transaction` accumulated into spent."""
    new_spent = accumulate_spent(budget, transaction, window)
    if new_spent == budget.spent:
        return budget
    return budget.model_copy(
        update={"spent": new_spent, "updated_at": now or utcnow()}
    )


def recompute_spent(
    budget: Budget,
    transactions: Iterable[Transaction],
    window: DateRange,
) -> Decimal:
    """Spent for `window` rebuilt from scratch out of `transactions`."""
    running = budget.model_copy(update={"spent": ZERO})
    for transaction in transactions:
        running = running.model_copy(
            update={"spent": accumulate_spent(running, transaction, window)}
        )
    return running.spent


# =============================================================================
# GOALS
# =============================================================================

def goal_progress(goal: Goal) -> Decimal:
    """
    Progress toward the goal as a ratio clamped to [0, 1].

    Raises:
        ComputationError: If the target amount is zero
    """
    if goal.target_amount == 0:
        raise ComputationError(
            f"Goal {goal.id} has a zero target; progress is undefined",
            operation="goal_progress",
        )
    ratio = goal.current_amount / goal.target_amount
    return max(ZERO, min(ONE, ratio))


def crossed_goal_milestones(
    before: Decimal,
    after: Decimal,
    milestones: Iterable[int],
) -> list[int]:
    """
    Milestone percentages passed when progress moved from `before` to `after`.

    `before` and `after` are progress ratios as returned by goal_progress().
    """
    low, high = before * HUNDRED, after * HUNDRED
    return sorted(m for m in milestones if low < m <= high)


# =============================================================================
# SUMMARIES
# =============================================================================

class PeriodSummary(BaseModel):
    """Income and expense totals for a window."""

    window: DateRange
    income_total: Decimal = ZERO
    expense_total: Decimal = ZERO
    transaction_count: int = Field(default=0, ge=0)

    @property
    def net(self) -> Decimal:
        return self.income_total - self.expense_total


def summarize_transactions(
    transactions: Iterable[Transaction],
    window: DateRange,
) -> PeriodSummary:
    """Totals of the transactions dated inside `window`."""
    income = expense = ZERO
    count = 0
    for transaction in transactions:
        if not window.contains(transaction.date):
            continue
        count += 1
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount
    return PeriodSummary(
        window=window,
        income_total=income,
        expense_total=expense,
        transaction_count=count,
    )


class BudgetStatus(BaseModel):
    """Point-in-time view of a budget within its current window."""

    budget_id: str
    window: DateRange
    spent: Decimal
    amount: Decimal
    remaining: Decimal
    utilization: Decimal
    alert_threshold: int
    alert_triggered: bool


def budget_status(budget: Budget, window: DateRange) -> BudgetStatus:
    """
    Snapshot of utilization, remaining amount and alert state.

    Raises:
        ComputationError: If the budget amount is zero
    """
    utilization = budget_utilization(budget)
    return BudgetStatus(
        budget_id=budget.id,
        window=window,
        spent=budget.spent,
        amount=budget.amount,
        remaining=budget_remaining(budget),
        utilization=utilization,
        alert_threshold=budget.alert_threshold,
        alert_triggered=utilization >= Decimal(budget.alert_threshold),
    )
