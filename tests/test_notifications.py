"""
Tests for notification construction.
"""

from datetime import date
from decimal import Decimal

from fintrack.derived import DateRange, PeriodSummary
from fintrack.models import Budget, BudgetPeriod, Goal, NotificationType
from fintrack.notifications import NotificationBuilder


class TestNotificationBuilder:
    """Tests for NotificationBuilder."""

    def test_budget_alert(self):
        budget = Budget(
            id="b1", user_id="u1", category_id="c1",
            amount=Decimal("500.00"), period=BudgetPeriod.MONTHLY,
            spent=Decimal("420.00"),
        )
        note = NotificationBuilder.budget_alert("n1", budget, "Food & Dining", Decimal("84"))
        assert note.type == NotificationType.BUDGET_ALERT
        assert note.user_id == "u1"
        assert note.is_read is False
        assert "84%" in note.message
        assert "Food & Dining" in note.title
        assert note.data["budgetId"] == "b1"
        assert note.data["utilization"] == "84.00"
        assert note.data["alertThreshold"] == 80

    def test_goal_milestone(self):
        goal = Goal(
            id="g1", user_id="u1", name="Trip", target_amount=Decimal("1000.00"),
            current_amount=Decimal("500.00"), target_date="2025-06-01", color="#3B82F6",
        )
        note = NotificationBuilder.goal_milestone("n1", goal, 50)
        assert note.type == NotificationType.GOAL_MILESTONE
        assert note.title.startswith("50%")
        assert note.data == {
            "goalId": "g1",
            "milestone": 50,
            "currentAmount": "500.00",
            "targetAmount": "1000.00",
        }

    def test_goal_reached(self):
        goal = Goal(
            id="g1", user_id="u1", name="Trip", target_amount=Decimal("1000.00"),
            current_amount=Decimal("1000.00"), target_date="2025-06-01", color="#3B82F6",
        )
        note = NotificationBuilder.goal_milestone("n1", goal, 100)
        assert note.title.startswith("Goal reached")

    def test_daily_summary(self):
        day = date(2024, 10, 5)
        summary = PeriodSummary(
            window=DateRange(start=day, end=day),
            income_total=Decimal("2500.00"),
            expense_total=Decimal("420.00"),
            transaction_count=3,
        )
        note = NotificationBuilder.daily_summary("n1", "u1", summary, "INR")
        assert note.type == NotificationType.DAILY_SUMMARY
        assert "2024-10-05" in note.title
        assert "INR 2,500.00" in note.message
        assert note.data["net"] == "2080.00"
        assert note.data["transactionCount"] == 3

    def test_daily_summary_without_transactions(self):
        day = date(2024, 10, 5)
        summary = PeriodSummary(window=DateRange(start=day, end=day))
        note = NotificationBuilder.daily_summary("n1", "u1", summary, "INR")
        assert note.message == "No transactions recorded on 2024-10-05."
