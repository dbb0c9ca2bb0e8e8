"""
Main Orchestrator for fintrack

This module ties together validation, storage, derived-state rules,
notifications and audit for the everyday operations:
1. Accounts (register → seed settings and default categories)
2. Transactions (validate → check category → save → update budgets → alert)
3. Budgets (create, status snapshot, recompute spent)
4. Goals (create, contribute → milestone notifications)
5. Notifications (deliver, list, mark read, daily summary)

DESIGN DECISION: The orchestrator enforces the boundaries:
- No record is saved without passing validation
- No reference crosses user ownership or category type
- Every state change is audited

The authenticated user id is always passed in by the caller. Session
handling and password hashing are outside this module.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, NamedTuple, Optional
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from fintrack.audit import AuditLogger, create_correlation_id
from fintrack.config import BudgetSettings, CoreSettings, get_settings
from fintrack.derived import (
    BudgetStatus,
    DateRange,
    WindowProvider,
    apply_transaction,
    budget_status,
    budget_utilization,
    calendar_window_provider,
    crossed_goal_milestones,
    goal_progress,
    is_budget_alert_triggered,
    recompute_spent,
    summarize_transactions,
)
from fintrack.errors import ComputationError, ReferentialInconsistency, ValidationError
from fintrack.models.audit import AuditEventType
from fintrack.models.entities import (
    AppSettings,
    Budget,
    Category,
    Goal,
    Notification,
    Transaction,
    User,
)
from fintrack.models.inputs import DEFAULT_CATEGORIES
from fintrack.models.types import utcnow
from fintrack.models.validation import ValidationIssue, ValidationResult
from fintrack.notifications import (
    NotificationBuilder,
    NotificationDeliveryError,
    NotificationDispatcher,
)
from fintrack.storage import (
    AuditStorageInterface,
    FinanceStorageInterface,
    InMemoryAuditStorage,
    InMemoryFinanceStorage,
    NotFoundError,
)
from fintrack.validation import (
    EntityValidator,
    check_budget_category,
    check_ownership,
    check_transaction_category,
)


def _accept(
    result: ValidationResult,
    audit_logger: Optional[AuditLogger],
    user_id: Optional[str],
    correlation_id: UUID,
) -> Any:
    """Return the validated value; audit and raise ValidationError otherwise."""
    if not result.is_valid and audit_logger:
        audit_logger.log_validation_failed(
            result,
            user_id=user_id,
            correlation_id=correlation_id,
        )
    return result.unwrap()


class NotificationFlow:
    """
    Persists and delivers notifications.

    Delivery failures are logged and do not undo the operation that
    produced the notification: the stored notification stays unread.
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        dispatcher: Optional[NotificationDispatcher] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._dispatcher = dispatcher
        self._audit_logger = audit_logger

    def deliver(
        self,
        notification: Notification,
        correlation_id: Optional[UUID] = None,
    ) -> Notification:
        """Save a notification and hand it to the dispatcher."""
        correlation_id = correlation_id or create_correlation_id()

        self._storage.save_notification(notification)

        if self._audit_logger:
            self._audit_logger.log_notification(
                notification,
                correlation_id=correlation_id,
            )

        if self._dispatcher:
            try:
                self._dispatcher.dispatch(notification)
            except NotificationDeliveryError as e:
                if self._audit_logger:
                    self._audit_logger.log_error(
                        error_type="notification_delivery",
                        error_message=str(e),
                        details={"notification_id": notification.id},
                        correlation_id=correlation_id,
                    )

        return notification

    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        return self._storage.list_notifications(user_id, unread_only=unread_only)

    def mark_read(
        self,
        user_id: str,
        notification_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Notification:
        """
        Flip a notification's read flag.

        Raises:
            NotFoundError: If the notification doesn't exist
            ReferentialInconsistency: If it belongs to another user
        """
        correlation_id = correlation_id or create_correlation_id()

        notification = self._storage.get_notification(notification_id)
        if notification is None:
            raise NotFoundError(f"Notification not found: {notification_id}")
        check_ownership(notification, user_id, field="notificationId")

        if notification.is_read:
            return notification

        updated = self._storage.update_notification(notification.mark_read())

        if self._audit_logger:
            self._audit_logger.log_notification(
                updated,
                event_type=AuditEventType.NOTIFICATION_READ,
                correlation_id=correlation_id,
            )

        return updated

    def send_daily_summary(
        self,
        user_id: str,
        day: date,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[Notification]:
        """
        Build and deliver the daily summary for `day`.

        Returns None when the user has daily summaries switched off.
        """
        settings = self._storage.get_settings(user_id)
        if settings is None or not settings.daily_summary:
            return None

        window = DateRange(start=day, end=day)
        transactions = self._storage.list_transactions(
            user_id,
            date_from=day,
            date_to=day,
        )
        summary = summarize_transactions(transactions, window)
        notification = NotificationBuilder.daily_summary(
            notification_id=self._storage.new_id(),
            user_id=user_id,
            summary=summary,
            currency=settings.currency,
        )
        return self.deliver(notification, correlation_id=correlation_id)


class AccountFlow:
    """
    Orchestrates user registration, categories and settings.

    Flow (registration):
    1. Validate → non-empty username and password
    2. Uniqueness → username not taken
    3. Hash → via the injected password hasher
    4. Save → user, default settings, default categories
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        password_hasher: Callable[[str], str],
        validator: Optional[EntityValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        core_settings: Optional[CoreSettings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self._password_hasher = password_hasher
        self._validator = validator or EntityValidator(clock=clock)
        self._audit_logger = audit_logger
        self._core = core_settings or get_settings().core
        self._clock = clock

    def register_user(
        self,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: If input is invalid or the username is taken
        """
        correlation_id = correlation_id or create_correlation_id()

        insert = _accept(
            self._validator.validate_user(raw),
            self._audit_logger,
            None,
            correlation_id,
        )

        if self._storage.get_user_by_username(insert.username) is not None:
            raise ValidationError(
                [ValidationIssue(
                    field="username",
                    issue_type="duplicate",
                    message="username is already taken",
                    severity="error",
                    suggested_fix="Choose a different username",
                )],
                entity_kind="user",
            )

        now = self._clock()
        user = self._storage.save_user(User(
            id=self._storage.new_id(),
            username=insert.username,
            password_hash=self._password_hasher(insert.password),
            created_at=now,
        ))

        self._storage.save_settings(AppSettings(
            id=self._storage.new_id(),
            user_id=user.id,
            currency=self._core.default_currency,
            created_at=now,
            updated_at=now,
        ))

        if self._core.seed_default_categories:
            for template in DEFAULT_CATEGORIES:
                self._storage.save_category(Category(
                    id=self._storage.new_id(),
                    user_id=user.id,
                    is_default=True,
                    created_at=now,
                    **template.model_dump(),
                ))

        if self._audit_logger:
            self._audit_logger.log_user_registered(
                user_id=user.id,
                username=user.username,
                correlation_id=correlation_id,
            )

        return user

    def create_category(
        self,
        user_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> Category:
        correlation_id = correlation_id or create_correlation_id()

        insert = _accept(
            self._validator.validate_category(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        category = self._storage.save_category(Category(
            id=self._storage.new_id(),
            user_id=user_id,
            created_at=self._clock(),
            **insert.model_dump(),
        ))

        if self._audit_logger:
            self._audit_logger.log_entity_created(
                event_type=AuditEventType.CATEGORY_CREATED,
                entity_type="category",
                entity_id=category.id,
                user_id=user_id,
                details={"name": category.name, "type": category.type.value},
                correlation_id=correlation_id,
            )

        return category

    def get_settings(self, user_id: str) -> AppSettings:
        """
        Raises:
            NotFoundError: If the user has no settings record
        """
        settings = self._storage.get_settings(user_id)
        if settings is None:
            raise NotFoundError(f"Settings not found for user: {user_id}")
        return settings

    def update_settings(
        self,
        user_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> AppSettings:
        """
        Apply a partial settings update.

        Raises:
            ValidationError: If the update is invalid or touches system fields
            NotFoundError: If the user has no settings record
        """
        correlation_id = correlation_id or create_correlation_id()

        update = _accept(
            self._validator.validate_settings_update(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        current = self.get_settings(user_id)
        changes = update.changes()
        updated = self._storage.save_settings(current.apply(changes, now=self._clock()))

        if self._audit_logger:
            self._audit_logger.log_entity_created(
                event_type=AuditEventType.SETTINGS_UPDATED,
                entity_type="settings",
                entity_id=updated.id,
                user_id=user_id,
                details={"changed": sorted(k for k in changes if k != "pin_hash")},
                correlation_id=correlation_id,
            )

        return updated


class TransactionFlow:
    """
    Orchestrates recording a transaction.

    Flow:
    1. Validate → typed InsertTransaction
    2. Reference → category exists, is the user's, and has the same type
    3. Save → Transaction with storage-issued id
    4. Budgets → accumulate into every matching budget's current window
    5. Alert → notify when a budget crosses its alert threshold
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        validator: Optional[EntityValidator] = None,
        notification_flow: Optional[NotificationFlow] = None,
        audit_logger: Optional[AuditLogger] = None,
        window_provider: Optional[WindowProvider] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self._validator = validator or EntityValidator(clock=clock)
        self._notifications = notification_flow or NotificationFlow(
            storage, audit_logger=audit_logger
        )
        self._audit_logger = audit_logger
        self._window_provider = window_provider or calendar_window_provider(
            get_settings().budget.week_start
        )
        self._clock = clock

    def _load_category(
        self,
        category_id: str,
        user_id: str,
        correlation_id: UUID,
    ) -> Category:
        category = self._storage.get_category(category_id)
        if category is None:
            error = ReferentialInconsistency(
                f"categoryId refers to an unknown category: {category_id}",
                field="categoryId",
                entity_id=category_id,
            )
            if self._audit_logger:
                self._audit_logger.log_referential_inconsistency(
                    "transaction", user_id, error, correlation_id=correlation_id
                )
            raise error
        return category

    def record_transaction(
        self,
        user_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Transaction, list[Notification]]:
        """
        Record a transaction and update the user's budgets.

        Returns:
            (transaction, notifications_sent)

        Raises:
            ValidationError: If input is invalid
            ReferentialInconsistency: If the category is unknown, foreign,
                or of the other type
        """
        correlation_id = correlation_id or create_correlation_id()

        insert = _accept(
            self._validator.validate_transaction(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        category = self._load_category(insert.category_id, user_id, correlation_id)
        try:
            check_transaction_category(insert, category, user_id)
        except ReferentialInconsistency as e:
            if self._audit_logger:
                self._audit_logger.log_referential_inconsistency(
                    "transaction", user_id, e, correlation_id=correlation_id
                )
            raise

        now = self._clock()
        transaction = self._storage.save_transaction(Transaction(
            id=self._storage.new_id(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **insert.model_dump(),
        ))

        if self._audit_logger:
            self._audit_logger.log_transaction_recorded(
                transaction_id=transaction.id,
                user_id=user_id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
                category_id=transaction.category_id,
                correlation_id=correlation_id,
            )

        notifications = self._apply_to_budgets(transaction, category, correlation_id)
        return transaction, notifications

    def _roll_over(
        self,
        budget: Budget,
        transaction: Transaction,
        window: DateRange,
        now: datetime,
    ) -> Budget:
        """
        The budget as of the start of this call, with spent counting only
        the current window.

        A budget last updated in an earlier window still carries that
        window's spent; rebuild it from the stored transactions of the
        current window, leaving out the one being recorded.
        """
        if window.contains(budget.updated_at):
            return budget

        earlier = [
            t for t in self._storage.list_transactions(
                budget.user_id,
                date_from=window.start,
                date_to=window.end,
                category_id=budget.category_id,
            )
            if t.id != transaction.id
        ]
        return budget.model_copy(update={
            "spent": recompute_spent(budget, earlier, window),
            "updated_at": now,
        })

    def _apply_to_budgets(
        self,
        transaction: Transaction,
        category: Category,
        correlation_id: UUID,
    ) -> list[Notification]:
        now = self._clock()
        settings = self._storage.get_settings(transaction.user_id)
        alerts_enabled = settings is None or settings.budget_alerts
        sent = []

        for budget in self._storage.list_budgets(
            transaction.user_id,
            category_id=transaction.category_id,
        ):
            window = self._window_provider(budget.period, now)
            current = self._roll_over(budget, transaction, window, now)
            updated = apply_transaction(current, transaction, window, now=now)
            if updated is budget:
                continue

            self._storage.update_budget(updated)

            if self._audit_logger:
                self._audit_logger.log_budget_spent_updated(
                    budget_id=budget.id,
                    user_id=budget.user_id,
                    previous_spent=str(budget.spent),
                    new_spent=str(updated.spent),
                    correlation_id=correlation_id,
                )

            # Alert only on the crossing, not on every later expense
            if is_budget_alert_triggered(updated) and not is_budget_alert_triggered(current):
                utilization = budget_utilization(updated)
                if self._audit_logger:
                    self._audit_logger.log_budget_alert(
                        budget_id=updated.id,
                        user_id=updated.user_id,
                        utilization=str(utilization.quantize(Decimal("0.01"))),
                        threshold=updated.alert_threshold,
                        correlation_id=correlation_id,
                    )
                if alerts_enabled:
                    sent.append(self._notifications.deliver(
                        NotificationBuilder.budget_alert(
                            notification_id=self._storage.new_id(),
                            budget=updated,
                            category_name=category.name,
                            utilization=utilization,
                        ),
                        correlation_id=correlation_id,
                    ))

        return sent


class BudgetFlow:
    """Orchestrates budget creation and status reporting."""

    def __init__(
        self,
        storage: FinanceStorageInterface,
        validator: Optional[EntityValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        window_provider: Optional[WindowProvider] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self._validator = validator or EntityValidator(clock=clock)
        self._audit_logger = audit_logger
        self._window_provider = window_provider or calendar_window_provider(
            get_settings().budget.week_start
        )
        self._clock = clock

    def _get_owned(self, user_id: str, budget_id: str) -> Budget:
        budget = self._storage.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(f"Budget not found: {budget_id}")
        check_ownership(budget, user_id, field="budgetId")
        return budget

    def create_budget(
        self,
        user_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> Budget:
        """
        Create a budget for one of the user's expense categories.

        Raises:
            ValidationError: If input is invalid
            ReferentialInconsistency: If the category is unknown, foreign,
                or an income category
        """
        correlation_id = correlation_id or create_correlation_id()

        insert = _accept(
            self._validator.validate_budget(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        try:
            category = self._storage.get_category(insert.category_id)
            if category is None:
                raise ReferentialInconsistency(
                    f"categoryId refers to an unknown category: {insert.category_id}",
                    field="categoryId",
                    entity_id=insert.category_id,
                )
            check_budget_category(insert, category, user_id)
        except ReferentialInconsistency as e:
            if self._audit_logger:
                self._audit_logger.log_referential_inconsistency(
                    "budget", user_id, e, correlation_id=correlation_id
                )
            raise

        now = self._clock()
        budget = self._storage.save_budget(Budget(
            id=self._storage.new_id(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **insert.model_dump(),
        ))

        if self._audit_logger:
            self._audit_logger.log_entity_created(
                event_type=AuditEventType.BUDGET_CREATED,
                entity_type="budget",
                entity_id=budget.id,
                user_id=user_id,
                details={
                    "category_id": budget.category_id,
                    "amount": str(budget.amount),
                    "period": budget.period.value,
                },
                correlation_id=correlation_id,
            )

        return budget

    def get_status(self, user_id: str, budget_id: str) -> BudgetStatus:
        """
        Utilization snapshot for the budget's current window.

        Raises:
            NotFoundError: If the budget doesn't exist
            ReferentialInconsistency: If it belongs to another user
        """
        budget = self._get_owned(user_id, budget_id)
        window = self._window_provider(budget.period, self._clock())
        try:
            return budget_status(budget, window)
        except ComputationError as e:
            if self._audit_logger:
                self._audit_logger.log_computation_failed(
                    e, entity_id=budget.id, user_id=user_id
                )
            raise

    def refresh_spent(
        self,
        user_id: str,
        budget_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Budget:
        """
        Rebuild spent from the stored transactions of the current window.

        Used after a period rolls over, or when transactions were changed
        outside record_transaction().
        """
        correlation_id = correlation_id or create_correlation_id()

        budget = self._get_owned(user_id, budget_id)
        window = self._window_provider(budget.period, self._clock())
        transactions = self._storage.list_transactions(
            user_id,
            date_from=window.start,
            date_to=window.end,
            category_id=budget.category_id,
        )
        spent = recompute_spent(budget, transactions, window)
        if spent == budget.spent:
            return budget

        updated = self._storage.update_budget(
            budget.model_copy(update={"spent": spent, "updated_at": self._clock()})
        )

        if self._audit_logger:
            self._audit_logger.log_budget_spent_updated(
                budget_id=budget.id,
                user_id=user_id,
                previous_spent=str(budget.spent),
                new_spent=str(spent),
                correlation_id=correlation_id,
            )

        return updated


class GoalFlow:
    """Orchestrates savings goals and milestone notifications."""

    def __init__(
        self,
        storage: FinanceStorageInterface,
        validator: Optional[EntityValidator] = None,
        notification_flow: Optional[NotificationFlow] = None,
        audit_logger: Optional[AuditLogger] = None,
        core_settings: Optional[CoreSettings] = None,
        budget_settings: Optional[BudgetSettings] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        settings = get_settings()
        self._storage = storage
        self._validator = validator or EntityValidator(clock=clock)
        self._notifications = notification_flow or NotificationFlow(
            storage, audit_logger=audit_logger
        )
        self._audit_logger = audit_logger
        self._core = core_settings or settings.core
        self._milestones = (budget_settings or settings.budget).goal_milestones_list
        self._clock = clock

    def _get_owned(self, user_id: str, goal_id: str) -> Goal:
        goal = self._storage.get_goal(goal_id)
        if goal is None:
            raise NotFoundError(f"Goal not found: {goal_id}")
        check_ownership(goal, user_id, field="goalId")
        return goal

    def create_goal(
        self,
        user_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> Goal:
        """
        Raises:
            ValidationError: If input is invalid
        """
        correlation_id = correlation_id or create_correlation_id()

        insert = _accept(
            self._validator.validate_goal(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        now = self._clock()
        goal = self._storage.save_goal(Goal(
            id=self._storage.new_id(),
            user_id=user_id,
            name=insert.name,
            description=insert.description,
            target_amount=insert.target_amount,
            target_date=insert.target_date,
            emoji=insert.emoji or self._core.default_goal_emoji,
            color=insert.color or self._core.default_goal_color,
            created_at=now,
            updated_at=now,
        ))

        if self._audit_logger:
            self._audit_logger.log_entity_created(
                event_type=AuditEventType.GOAL_CREATED,
                entity_type="goal",
                entity_id=goal.id,
                user_id=user_id,
                details={"target_amount": str(goal.target_amount)},
                correlation_id=correlation_id,
            )

        return goal

    def get_progress(self, user_id: str, goal_id: str) -> Decimal:
        return goal_progress(self._get_owned(user_id, goal_id))

    def contribute(
        self,
        user_id: str,
        goal_id: str,
        raw: Any,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Goal, list[Notification]]:
        """
        Add money to a goal and notify on every milestone passed.

        Returns:
            (updated_goal, notifications_sent)

        Raises:
            ValidationError: If the contribution amount is invalid
            NotFoundError: If the goal doesn't exist
            ReferentialInconsistency: If it belongs to another user
        """
        correlation_id = correlation_id or create_correlation_id()

        contribution = _accept(
            self._validator.validate_goal_contribution(raw),
            self._audit_logger,
            user_id,
            correlation_id,
        )

        goal = self._get_owned(user_id, goal_id)
        before = goal_progress(goal)
        try:
            # Re-validate so the new total still fits numeric(12, 2)
            candidate = Goal.model_validate({
                **goal.model_dump(),
                "current_amount": goal.current_amount + contribution.amount,
                "updated_at": self._clock(),
            })
        except PydanticValidationError:
            raise ValidationError(
                [ValidationIssue(
                    field="amount",
                    issue_type="out_of_range",
                    message="amount would take the goal's saved total past the storage limit",
                    severity="error",
                    suggested_fix="Contribute a smaller amount",
                )],
                entity_kind="goal_contribution",
            ) from None
        updated = self._storage.update_goal(candidate)
        after = goal_progress(updated)

        if self._audit_logger:
            self._audit_logger.log_entity_created(
                event_type=AuditEventType.GOAL_CONTRIBUTION_RECORDED,
                entity_type="goal",
                entity_id=goal.id,
                user_id=user_id,
                details={
                    "amount": str(contribution.amount),
                    "current_amount": str(updated.current_amount),
                },
                correlation_id=correlation_id,
            )

        settings = self._storage.get_settings(user_id)
        notify = settings is None or settings.goal_milestones
        sent = []

        for milestone in crossed_goal_milestones(before, after, self._milestones):
            if self._audit_logger:
                self._audit_logger.log_goal_milestone(
                    goal_id=goal.id,
                    user_id=user_id,
                    milestone=milestone,
                    correlation_id=correlation_id,
                )
            if notify:
                sent.append(self._notifications.deliver(
                    NotificationBuilder.goal_milestone(
                        notification_id=self._storage.new_id(),
                        goal=updated,
                        milestone=milestone,
                    ),
                    correlation_id=correlation_id,
                ))

        return updated, sent


class AppComponents(NamedTuple):
    accounts: AccountFlow
    transactions: TransactionFlow
    budgets: BudgetFlow
    goals: GoalFlow
    notifications: NotificationFlow
    storage: FinanceStorageInterface


def create_app_components(
    password_hasher: Callable[[str], str],
    storage: Optional[FinanceStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    clock: Callable[[], datetime] = utcnow,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        password_hasher: Hashes a plaintext password (auth layer)
        storage: Record storage. Defaults to in-memory storage.
        audit_storage: Audit log storage. Defaults to in-memory storage.
        dispatcher: Notification delivery. If None, notifications are
                    only stored.
        clock: Source of "now" shared by every flow
    """
    storage = storage or InMemoryFinanceStorage()
    audit_logger = AuditLogger(audit_storage or InMemoryAuditStorage())
    validator = EntityValidator(clock=clock)
    notification_flow = NotificationFlow(storage, dispatcher, audit_logger)

    return AppComponents(
        accounts=AccountFlow(
            storage,
            password_hasher,
            validator=validator,
            audit_logger=audit_logger,
            clock=clock,
        ),
        transactions=TransactionFlow(
            storage,
            validator=validator,
            notification_flow=notification_flow,
            audit_logger=audit_logger,
            clock=clock,
        ),
        budgets=BudgetFlow(
            storage,
            validator=validator,
            audit_logger=audit_logger,
            clock=clock,
        ),
        goals=GoalFlow(
            storage,
            validator=validator,
            notification_flow=notification_flow,
            audit_logger=audit_logger,
            clock=clock,
        ),
        notifications=notification_flow,
        storage=storage,
    )
