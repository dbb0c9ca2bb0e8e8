"""
Notification construction.

The derived-state rules detect conditions (budget over threshold, goal
milestone passed, end of day). These builders turn a detected condition
into a Notification record for the dispatcher.

Ids are passed in; storage owns id generation.
"""

from decimal import Decimal

from fintrack.derived.rules import PeriodSummary
from fintrack.models.entities import Budget, Goal, Notification, NotificationType


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


class NotificationBuilder:
    """
    Helper class to build notifications with common patterns.

    Usage:
        note = NotificationBuilder.budget_alert(new_id, budget, "Groceries", Decimal("84"))
    """

    @staticmethod
    def budget_alert(
        notification_id: str,
        budget: Budget,
        category_name: str,
        utilization: Decimal,
    ) -> Notification:
        return Notification(
            id=notification_id,
            user_id=budget.user_id,
            type=NotificationType.BUDGET_ALERT,
            title=f"Budget alert: {category_name}",
            message=(
                f"You've used {utilization:.0f}% of your {budget.period.value} "
                f"{category_name} budget ({_money(budget.spent)} of {_money(budget.amount)})."
            ),
            data={
                "budgetId": budget.id,
                "categoryId": budget.category_id,
                "spent": str(budget.spent),
                "amount": str(budget.amount),
                "utilization": str(utilization.quantize(Decimal("0.01"))),
                "alertThreshold": budget.alert_threshold,
            },
        )

    @staticmethod
    def goal_milestone(
        notification_id: str,
        goal: Goal,
        milestone: int,
    ) -> Notification:
        if milestone >= 100:
            title = f"Goal reached: {goal.name} {goal.emoji}"
            message = f"You've saved {_money(goal.current_amount)} and reached your goal!"
        else:
            title = f"{milestone}% of the way to {goal.name} {goal.emoji}"
            message = (
                f"You've saved {_money(goal.current_amount)} of "
                f"{_money(goal.target_amount)}. Keep going!"
            )
        return Notification(
            id=notification_id,
            user_id=goal.user_id,
            type=NotificationType.GOAL_MILESTONE,
            title=title,
            message=message,
            data={
                "goalId": goal.id,
                "milestone": milestone,
                "currentAmount": str(goal.current_amount),
                "targetAmount": str(goal.target_amount),
            },
        )

    @staticmethod
    def daily_summary(
        notification_id: str,
        user_id: str,
        summary: PeriodSummary,
        currency: str,
    ) -> Notification:
        day = summary.window.start
        if summary.transaction_count == 0:
            message = f"No transactions recorded on {day.isoformat()}."
        else:
            message = (
                f"{summary.transaction_count} transactions on {day.isoformat()}: "
                f"income {currency} {_money(summary.income_total)}, "
                f"expenses {currency} {_money(summary.expense_total)}."
            )
        return Notification(
            id=notification_id,
            user_id=user_id,
            type=NotificationType.DAILY_SUMMARY,
            title=f"Daily summary for {day.isoformat()}",
            message=message,
            data={
                "date": day.isoformat(),
                "incomeTotal": str(summary.income_total),
                "expenseTotal": str(summary.expense_total),
                "net": str(summary.net),
                "transactionCount": summary.transaction_count,
                "currency": currency,
            },
        )
