"""
Flow tests against in-memory storage.

A recording dispatcher stands in for push/e-mail delivery.
"""

import itertools
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from fintrack.errors import ReferentialInconsistency, ValidationError
from fintrack.models import AuditEventType, NotificationType, TransactionType
from fintrack.notifications import NotificationDeliveryError, NotificationDispatcher
from fintrack.orchestrator import create_app_components
from fintrack.storage import InMemoryAuditStorage, InMemoryFinanceStorage, NotFoundError


NOW = datetime(2024, 10, 10, 12, 0, tzinfo=timezone.utc)


class RecordingDispatcher(NotificationDispatcher):
    def __init__(self):
        self.sent = []

    def dispatch(self, notification):
        self.sent.append(notification)


class FailingDispatcher(NotificationDispatcher):
    def dispatch(self, notification):
        raise NotificationDeliveryError("push gateway unavailable")


def build(dispatcher=None, clock=None):
    counter = itertools.count(1)
    storage = InMemoryFinanceStorage(id_factory=lambda: f"id-{next(counter)}")
    audit_storage = InMemoryAuditStorage()
    components = create_app_components(
        password_hasher=lambda password: f"hashed:{password}",
        storage=storage,
        audit_storage=audit_storage,
        dispatcher=dispatcher or RecordingDispatcher(),
        clock=clock or (lambda: NOW),
    )
    return components, audit_storage


def register(app, username="asha"):
    return app.accounts.register_user({"username": username, "password": "secret"})


def category_named(app, user_id, name):
    return next(c for c in app.storage.list_categories(user_id) if c.name == name)


def expense(category_id, amount="420.00", day="2024-10-05"):
    return {
        "categoryId": category_id,
        "amount": amount,
        "description": "Groceries",
        "type": "expense",
        "paymentMethod": "upi",
        "date": day,
    }


class TestAccountFlow:
    """Tests for registration, categories and settings."""

    def test_register_seeds_settings_and_categories(self):
        app, audit = build()
        user = register(app)

        assert user.password_hash == "hashed:secret"
        categories = app.storage.list_categories(user.id)
        assert len(categories) == 8
        assert all(c.is_default for c in categories)
        assert len(app.storage.list_categories(user.id, type=TransactionType.INCOME)) == 2

        settings = app.accounts.get_settings(user.id)
        assert settings.budget_alerts is True
        assert settings.daily_summary is False

        events = audit.get_events_by_entity("user", user.id)
        assert events[0].event_type == AuditEventType.USER_REGISTERED

    def test_duplicate_username(self):
        app, _ = build()
        register(app)
        with pytest.raises(ValidationError) as exc_info:
            register(app)
        assert exc_info.value.issues[0].issue_type == "duplicate"
        assert exc_info.value.fields == ["username"]

    def test_invalid_registration(self):
        app, audit = build()
        with pytest.raises(ValidationError) as exc_info:
            app.accounts.register_user({"username": "", "password": ""})
        assert set(exc_info.value.fields) == {"username", "password"}
        assert audit.get_recent_events(1)[0].event_type == AuditEventType.VALIDATION_FAILED

    def test_create_category(self):
        app, _ = build()
        user = register(app)
        category = app.accounts.create_category(
            user.id, {"name": "Pets", "icon": "paw", "type": "expense", "color": "#000000"}
        )
        assert category.user_id == user.id
        assert category.is_default is False

    def test_update_settings(self):
        app, _ = build()
        user = register(app)
        updated = app.accounts.update_settings(user.id, {"theme": "dark", "dailySummary": True})
        assert updated.theme.value == "dark"
        assert updated.daily_summary is True
        assert updated.updated_at == NOW
        assert app.accounts.get_settings(user.id).daily_summary is True

    def test_update_settings_rejects_system_fields(self):
        app, _ = build()
        user = register(app)
        with pytest.raises(ValidationError) as exc_info:
            app.accounts.update_settings(user.id, {"userId": "someone-else"})
        assert exc_info.value.issues[0].issue_type == "immutable"
        assert app.accounts.get_settings(user.id).user_id == user.id

    def test_settings_not_found(self):
        app, _ = build()
        with pytest.raises(NotFoundError):
            app.accounts.get_settings("nobody")


class TestTransactionFlow:
    """Tests for recording transactions and budget updates."""

    def test_record_updates_budget_and_alerts(self):
        """Test 420 spent against a 500 monthly budget raises one alert."""
        dispatcher = RecordingDispatcher()
        app, audit = build(dispatcher)
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        assert budget.alert_threshold == 80

        correlation_id = uuid4()
        txn, notifications = app.transactions.record_transaction(
            user.id, expense(food.id), correlation_id=correlation_id
        )

        assert txn.amount == Decimal("420.00")
        assert app.storage.get_budget(budget.id).spent == Decimal("420.00")
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.BUDGET_ALERT
        assert dispatcher.sent == notifications

        event_types = {e.event_type for e in audit.get_events_by_correlation_id(correlation_id)}
        assert {
            AuditEventType.TRANSACTION_RECORDED,
            AuditEventType.BUDGET_SPENT_UPDATED,
            AuditEventType.BUDGET_ALERT_TRIGGERED,
            AuditEventType.NOTIFICATION_CREATED,
        } <= event_types

    def test_alert_fires_once(self):
        """Test that later expenses above the threshold don't re-alert."""
        app, _ = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        app.transactions.record_transaction(user.id, expense(food.id))
        _, notifications = app.transactions.record_transaction(user.id, expense(food.id, "10.00"))

        assert notifications == []
        assert app.storage.get_budget(budget.id).spent == Decimal("430.00")

    def test_new_month_starts_from_zero(self):
        """Test that last month's spending doesn't count against this month."""
        now = [NOW]
        app, _ = build(clock=lambda: now[0])
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        _, october_alerts = app.transactions.record_transaction(user.id, expense(food.id))
        assert len(october_alerts) == 1

        now[0] = datetime(2024, 11, 3, 9, 0, tzinfo=timezone.utc)
        _, notifications = app.transactions.record_transaction(
            user.id, expense(food.id, "10.00", day="2024-11-02")
        )
        assert notifications == []
        assert app.storage.get_budget(budget.id).spent == Decimal("10.00")
        assert app.budgets.get_status(user.id, budget.id).utilization == Decimal("2")

        # Crossing the threshold again in November raises a fresh alert
        _, notifications = app.transactions.record_transaction(
            user.id, expense(food.id, "400.00", day="2024-11-03")
        )
        assert app.storage.get_budget(budget.id).spent == Decimal("410.00")
        assert len(notifications) == 1

    def test_rollover_ignores_transaction_from_earlier_month(self):
        """Test that a backdated expense in a new month still resets spent."""
        now = [NOW]
        app, _ = build(clock=lambda: now[0])
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        app.transactions.record_transaction(user.id, expense(food.id))

        now[0] = datetime(2024, 11, 3, 9, 0, tzinfo=timezone.utc)
        app.transactions.record_transaction(user.id, expense(food.id, "5.00", day="2024-10-30"))
        assert app.storage.get_budget(budget.id).spent == Decimal("0")

    def test_transaction_outside_window_not_counted(self):
        app, _ = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        app.transactions.record_transaction(user.id, expense(food.id, day="2024-09-28"))
        assert app.storage.get_budget(budget.id).spent == Decimal("0")

    def test_alerts_disabled_in_settings(self):
        app, _ = build()
        user = register(app)
        app.accounts.update_settings(user.id, {"budgetAlerts": False})
        food = category_named(app, user.id, "Food & Dining")
        budget = app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        _, notifications = app.transactions.record_transaction(user.id, expense(food.id))
        assert notifications == []
        assert app.storage.get_budget(budget.id).spent == Decimal("420.00")

    def test_invalid_amount(self):
        app, audit = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        with pytest.raises(ValidationError) as exc_info:
            app.transactions.record_transaction(user.id, expense(food.id, amount=""))
        assert exc_info.value.fields == ["amount"]
        assert app.storage.list_transactions(user.id) == []
        assert audit.get_recent_events(1)[0].event_type == AuditEventType.VALIDATION_FAILED

    def test_type_mismatch_with_category(self):
        """Test that an expense filed under an income category is rejected."""
        app, _ = build()
        user = register(app)
        salary = category_named(app, user.id, "Salary")
        with pytest.raises(ReferentialInconsistency) as exc_info:
            app.transactions.record_transaction(user.id, expense(salary.id))
        assert exc_info.value.field == "type"
        assert app.storage.list_transactions(user.id) == []

    def test_unknown_category(self):
        app, audit = build()
        user = register(app)
        with pytest.raises(ReferentialInconsistency) as exc_info:
            app.transactions.record_transaction(user.id, expense("missing"))
        assert exc_info.value.field == "categoryId"
        assert audit.get_recent_events(1)[0].event_type == AuditEventType.REFERENTIAL_INCONSISTENCY

    def test_other_users_category(self):
        app, _ = build()
        owner = register(app, "asha")
        intruder = register(app, "ravi")
        food = category_named(app, owner.id, "Food & Dining")
        with pytest.raises(ReferentialInconsistency):
            app.transactions.record_transaction(intruder.id, expense(food.id))

    def test_delivery_failure_keeps_notification(self):
        """Test that a failed delivery doesn't undo the transaction."""
        app, audit = build(FailingDispatcher())
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        txn, notifications = app.transactions.record_transaction(user.id, expense(food.id))

        assert app.storage.get_transaction(txn.id) is not None
        assert len(notifications) == 1
        assert app.notifications.list_notifications(user.id, unread_only=True) == notifications
        assert any(
            e.event_type == AuditEventType.SYSTEM_ERROR
            for e in audit.get_recent_events()
        )


class TestBudgetFlow:
    """Tests for budget creation and status."""

    def test_budget_on_income_category_rejected(self):
        app, _ = build()
        user = register(app)
        salary = category_named(app, user.id, "Salary")
        with pytest.raises(ReferentialInconsistency):
            app.budgets.create_budget(
                user.id, {"categoryId": salary.id, "amount": "500.00", "period": "monthly"}
            )

    def test_status_and_refresh(self):
        app, _ = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        app.transactions.record_transaction(user.id, expense(food.id, "100.00"))
        budget = app.budgets.create_budget(
            user.id,
            {"categoryId": food.id, "amount": "500.00", "period": "monthly", "alertThreshold": 90},
        )

        # Transactions recorded before the budget existed are picked up on refresh
        assert app.budgets.get_status(user.id, budget.id).spent == Decimal("0")
        refreshed = app.budgets.refresh_spent(user.id, budget.id)
        assert refreshed.spent == Decimal("100.00")

        status = app.budgets.get_status(user.id, budget.id)
        assert status.remaining == Decimal("400.00")
        assert status.utilization == Decimal("20")
        assert status.alert_triggered is False
        assert status.window.start == date(2024, 10, 1)

    def test_status_of_other_users_budget(self):
        app, _ = build()
        owner = register(app, "asha")
        other = register(app, "ravi")
        food = category_named(app, owner.id, "Food & Dining")
        budget = app.budgets.create_budget(
            owner.id, {"categoryId": food.id, "amount": "500.00", "period": "weekly"}
        )
        with pytest.raises(ReferentialInconsistency):
            app.budgets.get_status(other.id, budget.id)
        with pytest.raises(NotFoundError):
            app.budgets.get_status(owner.id, "missing")


class TestGoalFlow:
    """Tests for goals and milestone notifications."""

    def test_create_goal_defaults(self):
        app, _ = build()
        user = register(app)
        goal = app.goals.create_goal(
            user.id, {"name": "Trip", "targetAmount": "1000.00", "targetDate": "2025-06-01"}
        )
        assert goal.current_amount == Decimal("0")
        assert goal.emoji
        assert goal.color
        assert app.goals.get_progress(user.id, goal.id) == Decimal("0")

    def test_contributions_reach_milestones(self):
        dispatcher = RecordingDispatcher()
        app, _ = build(dispatcher)
        user = register(app)
        goal = app.goals.create_goal(
            user.id, {"name": "Trip", "targetAmount": "1000.00", "targetDate": "2025-06-01"}
        )

        goal, sent = app.goals.contribute(user.id, goal.id, {"amount": "250.00"})
        assert goal.current_amount == Decimal("250.00")
        assert app.goals.get_progress(user.id, goal.id) == Decimal("0.25")
        assert [n.data["milestone"] for n in sent] == [25]

        goal, sent = app.goals.contribute(user.id, goal.id, {"amount": "800.00"})
        assert [n.data["milestone"] for n in sent] == [50, 75, 100]
        assert app.goals.get_progress(user.id, goal.id) == Decimal("1")
        assert len(dispatcher.sent) == 4

    def test_milestones_disabled(self):
        app, _ = build()
        user = register(app)
        app.accounts.update_settings(user.id, {"goalMilestones": False})
        goal = app.goals.create_goal(
            user.id, {"name": "Trip", "targetAmount": "1000.00", "targetDate": "2025-06-01"}
        )
        _, sent = app.goals.contribute(user.id, goal.id, {"amount": "600.00"})
        assert sent == []

    def test_contribution_past_storage_limit(self):
        """Test that a saved total beyond numeric(12, 2) is rejected."""
        app, _ = build()
        user = register(app)
        goal = app.goals.create_goal(
            user.id,
            {"name": "Island", "targetAmount": "9999999999.00", "targetDate": "2030-01-01"},
        )
        goal, _ = app.goals.contribute(user.id, goal.id, {"amount": "9999999999.99"})

        with pytest.raises(ValidationError) as exc_info:
            app.goals.contribute(user.id, goal.id, {"amount": "1.00"})
        assert exc_info.value.issues[0].issue_type == "out_of_range"
        assert app.storage.get_goal(goal.id).current_amount == Decimal("9999999999.99")

    def test_invalid_contribution(self):
        app, _ = build()
        user = register(app)
        goal = app.goals.create_goal(
            user.id, {"name": "Trip", "targetAmount": "1000.00", "targetDate": "2025-06-01"}
        )
        with pytest.raises(ValidationError):
            app.goals.contribute(user.id, goal.id, {"amount": "-5"})
        with pytest.raises(NotFoundError):
            app.goals.contribute(user.id, "missing", {"amount": "5"})


class TestNotificationFlow:
    """Tests for reading notifications and daily summaries."""

    def _user_with_alert(self):
        app, audit = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        app.budgets.create_budget(
            user.id, {"categoryId": food.id, "amount": "500.00", "period": "monthly"}
        )
        _, notifications = app.transactions.record_transaction(user.id, expense(food.id))
        return app, audit, user, notifications[0]

    def test_mark_read(self):
        app, audit, user, note = self._user_with_alert()
        read = app.notifications.mark_read(user.id, note.id)
        assert read.is_read is True
        assert app.notifications.list_notifications(user.id, unread_only=True) == []
        assert len(app.notifications.list_notifications(user.id)) == 1
        assert audit.get_recent_events(1)[0].event_type == AuditEventType.NOTIFICATION_READ

    def test_mark_read_other_user(self):
        app, _, _, note = self._user_with_alert()
        other = register(app, "ravi")
        with pytest.raises(ReferentialInconsistency):
            app.notifications.mark_read(other.id, note.id)
        with pytest.raises(NotFoundError):
            app.notifications.mark_read(other.id, "missing")

    def test_daily_summary(self):
        app, _ = build()
        user = register(app)
        food = category_named(app, user.id, "Food & Dining")
        app.transactions.record_transaction(user.id, expense(food.id, "100.00"))

        assert app.notifications.send_daily_summary(user.id, date(2024, 10, 5)) is None

        app.accounts.update_settings(user.id, {"dailySummary": True})
        note = app.notifications.send_daily_summary(user.id, date(2024, 10, 5))
        assert note.type == NotificationType.DAILY_SUMMARY
        assert note.data["transactionCount"] == 1
        assert note.data["expenseTotal"] == "100.00"
        assert note.data["currency"] == app.accounts.get_settings(user.id).currency
