"""
Tests for fintrack models

Test strategy:
1. Unit tests for individual components (models, validators, rules)
2. Flow tests against in-memory storage
3. No real delivery or database in tests
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from fintrack.errors import ValidationError
from fintrack.models import (
    DEFAULT_CATEGORIES,
    AppSettings,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    BudgetPeriod,
    Category,
    EntityKind,
    InsertTransaction,
    Notification,
    NotificationType,
    RecurringPattern,
    Theme,
    Transaction,
    TransactionType,
    UpdateAppSettings,
    User,
    ValidationIssue,
    ValidationResult,
)


def make_transaction(**overrides) -> Transaction:
    fields = dict(
        id="t1",
        user_id="u1",
        category_id="c1",
        amount=Decimal("420.00"),
        description="Groceries",
        type=TransactionType.EXPENSE,
        payment_method="upi",
        date="2024-10-05",
    )
    fields.update(overrides)
    return Transaction(**fields)


class TestEntityModels:
    """Tests for persisted record models."""

    def test_user_hides_password_hash_in_repr(self):
        """Test that hashes never show up in repr."""
        user = User(id="u1", username="asha", password_hash="hashed:secret")
        assert "hashed:secret" not in repr(user)
        assert user.biometric_enabled is False

    def test_category_type_is_frozen(self):
        """Test that a category's type cannot change after creation."""
        category = Category(
            id="c1", user_id="u1", name="Food", icon="utensils",
            type=TransactionType.EXPENSE, color="#F97316",
        )
        with pytest.raises(PydanticValidationError):
            category.type = TransactionType.INCOME
        assert category.type == TransactionType.EXPENSE

    def test_category_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        category = Category(
            id="c1", user_id="u1", name="  Food  ", icon="utensils",
            type="expense", color="#F97316",
        )
        assert category.name == "Food"

    def test_transaction_parses_date_string(self):
        """Test that a date-only string becomes midnight of that day."""
        txn = make_transaction()
        assert txn.date == datetime(2024, 10, 5)
        assert txn.calendar_date.isoformat() == "2024-10-05"

    def test_transaction_rejects_negative_amount(self):
        """Test that stored amounts must be positive."""
        with pytest.raises(ValueError):
            make_transaction(amount=Decimal("-100"))

    def test_transaction_rejects_three_decimal_places(self):
        """Test numeric(12, 2) precision on stored amounts."""
        with pytest.raises(ValueError):
            make_transaction(amount=Decimal("10.005"))

    def test_recurring_transaction_requires_pattern(self):
        """Test that isRecurring without a pattern is rejected."""
        with pytest.raises(ValueError):
            make_transaction(is_recurring=True)

    def test_recurring_pattern_accepts_camel_case(self):
        """Test that the client's camelCase keys are accepted."""
        pattern = RecurringPattern.model_validate(
            {"interval": "monthly", "endDate": "2025-03-31", "occurrences": 6}
        )
        txn = make_transaction(is_recurring=True, recurring_pattern=pattern)
        assert txn.recurring_pattern.end_date.isoformat() == "2025-03-31"

    def test_serializes_with_camel_case_aliases(self):
        """Test that dumps by alias use the client's key names."""
        dumped = make_transaction().model_dump(by_alias=True)
        assert "categoryId" in dumped
        assert "paymentMethod" in dumped

    def test_budget_defaults(self):
        """Test that a new budget starts with nothing spent."""
        budget = Budget(
            id="b1", user_id="u1", category_id="c1",
            amount=Decimal("500.00"), period=BudgetPeriod.MONTHLY,
        )
        assert budget.spent == Decimal("0")
        assert budget.alert_threshold == 80

    def test_budget_rejects_threshold_out_of_range(self):
        with pytest.raises(ValueError):
            Budget(
                id="b1", user_id="u1", category_id="c1",
                amount=Decimal("500.00"), period="weekly", alert_threshold=0,
            )

    def test_notification_mark_read_returns_copy(self):
        """Test that notifications are immutable apart from mark_read()."""
        note = Notification(
            id="n1", user_id="u1", type=NotificationType.BUDGET_ALERT,
            title="Budget alert", message="80% used",
        )
        read = note.mark_read()
        assert read.is_read is True
        assert note.is_read is False
        with pytest.raises(PydanticValidationError):
            note.is_read = True

    def test_app_settings_apply(self):
        """Test applying a partial update."""
        settings = AppSettings(id="s1", user_id="u1")
        now = datetime(2024, 10, 10, tzinfo=timezone.utc)
        updated = settings.apply({"theme": Theme.DARK}, now=now)
        assert updated.theme == Theme.DARK
        assert updated.updated_at == now
        assert settings.theme == Theme.AUTO
        assert updated.daily_summary is False


class TestInputModels:
    """Tests for caller-supplied input shapes."""

    def test_insert_transaction_parses_amount_string(self):
        txn = InsertTransaction.model_validate({
            "categoryId": "c1",
            "amount": "420",
            "description": "Groceries",
            "type": "expense",
            "paymentMethod": "upi",
            "date": "2024-10-05T09:30:00",
        })
        assert txn.amount == Decimal("420.00")
        assert str(txn.amount) == "420.00"
        assert txn.is_recurring is False
        assert txn.tags == []

    def test_insert_transaction_rejects_float_amount(self):
        """Test that floats are rejected for money."""
        with pytest.raises(PydanticValidationError) as exc_info:
            InsertTransaction.model_validate({
                "categoryId": "c1",
                "amount": 420.0,
                "description": "Groceries",
                "type": "expense",
                "paymentMethod": "upi",
                "date": "2024-10-05",
            })
        assert exc_info.value.errors()[0]["type"] == "invalid_type"

    def test_update_settings_changes_only_sent_fields(self):
        update = UpdateAppSettings.model_validate({"theme": "dark", "pinHash": None})
        assert update.changes() == {"theme": Theme.DARK, "pin_hash": None}

    def test_default_categories(self):
        """Test the seeded category set."""
        types = [c.type for c in DEFAULT_CATEGORIES]
        assert types.count(TransactionType.EXPENSE) == 6
        assert types.count(TransactionType.INCOME) == 2
        assert len({c.name for c in DEFAULT_CATEGORIES}) == len(DEFAULT_CATEGORIES)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            description="Transaction recorded",
        )
        assert event.event_type == AuditEventType.TRANSACTION_RECORDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BUDGET_CREATED,
            description="Budget created",
            details={"amount": "500.00"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_created"
        assert log_dict["details"]["amount"] == "500.00"
        assert log_dict["correlation_id"] is None

    def test_audit_event_builder_user_registered(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.user_registered(
            user_id="u1",
            username="asha",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.USER_REGISTERED
        assert event.entity_id == "u1"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_audit_event_builder_validation_failed(self):
        """Test that rejected input is recorded as a warning."""
        event = AuditEventBuilder.validation_failed(
            entity_kind="transaction",
            user_id="u1",
            issues=[{"field": "amount", "type": "required", "message": "amount is required"}],
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.details["issues"][0]["field"] == "amount"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            entity_kind=EntityKind.TRANSACTION,
            schema_valid=False,
            semantic_valid=False,
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="required",
                    message="amount is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.error_fields == ["amount"]

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            entity_kind=EntityKind.TRANSACTION,
            schema_valid=True,
            semantic_valid=True,
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date in future",
                    severity="warning",
                ),
            ],
            value="typed",
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.unwrap() == "typed"

    def test_unwrap_raises_with_issues(self):
        result = ValidationResult(
            entity_kind=EntityKind.BUDGET,
            schema_valid=False,
            semantic_valid=False,
            is_valid=False,
            issues=[
                ValidationIssue(field="amount", issue_type="required", message="amount is required"),
                ValidationIssue(field="period", issue_type="enum", message="bad period"),
            ],
        )
        with pytest.raises(ValidationError) as exc_info:
            result.unwrap()
        assert exc_info.value.fields == ["amount", "period"]
        assert exc_info.value.entity_kind == "budget"
