"""
In-memory storage.

Backs the test suite and small embedded uses. Records are kept as the
immutable-by-convention Pydantic models they arrive as; updates replace
the stored model. No thread safety.
"""

from datetime import date
from typing import Callable, Optional
from uuid import UUID, uuid4

from fintrack.models.audit import AuditEvent
from fintrack.models.entities import (
    AppSettings,
    Budget,
    Category,
    Goal,
    Notification,
    Transaction,
    TransactionType,
    User,
)
from fintrack.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    FinanceStorageInterface,
    NotFoundError,
)


def _uuid_str() -> str:
    return str(uuid4())


class InMemoryFinanceStorage(FinanceStorageInterface):
    """
    Dictionary-backed FinanceStorageInterface.

    Args:
        id_factory: Produces record ids. Defaults to random UUID4 strings;
            pass a deterministic factory for reproducible tests.
    """

    def __init__(self, id_factory: Callable[[], str] = _uuid_str):
        self._id_factory = id_factory
        self._users: dict[str, User] = {}
        self._categories: dict[str, Category] = {}
        self._transactions: dict[str, Transaction] = {}
        self._goals: dict[str, Goal] = {}
        self._budgets: dict[str, Budget] = {}
        self._notifications: dict[str, Notification] = {}
        self._settings: dict[str, AppSettings] = {}

    def new_id(self) -> str:
        return self._id_factory()

    @staticmethod
    def _insert(table: dict, record, kind: str):
        if record.id in table:
            raise DuplicateError(f"{kind} already exists: {record.id}")
        table[record.id] = record
        return record

    @staticmethod
    def _replace(table: dict, record, kind: str):
        if record.id not in table:
            raise NotFoundError(f"{kind} not found: {record.id}")
        table[record.id] = record
        return record

    # Users ---------------------------------------------------------------

    def save_user(self, user: User) -> User:
        if self.get_user_by_username(user.username) is not None:
            raise DuplicateError(f"Username already taken: {user.username}")
        return self._insert(self._users, user, "User")

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    # Categories ----------------------------------------------------------

    def save_category(self, category: Category) -> Category:
        return self._insert(self._categories, category, "Category")

    def get_category(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def list_categories(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
    ) -> list[Category]:
        return [
            c for c in self._categories.values()
            if c.user_id == user_id and (type is None or c.type == type)
        ]

    # Transactions --------------------------------------------------------

    def save_transaction(self, transaction: Transaction) -> Transaction:
        return self._insert(self._transactions, transaction, "Transaction")

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def list_transactions(
        self,
        user_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category_id: Optional[str] = None,
    ) -> list[Transaction]:
        results = []
        for txn in self._transactions.values():
            if txn.user_id != user_id:
                continue
            if category_id and txn.category_id != category_id:
                continue
            if date_from and txn.calendar_date < date_from:
                continue
            if date_to and txn.calendar_date > date_to:
                continue
            results.append(txn)
        return sorted(results, key=lambda t: t.calendar_date)

    # Goals ---------------------------------------------------------------

    def save_goal(self, goal: Goal) -> Goal:
        return self._insert(self._goals, goal, "Goal")

    def update_goal(self, goal: Goal) -> Goal:
        return self._replace(self._goals, goal, "Goal")

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self._goals.get(goal_id)

    def list_goals(self, user_id: str, active_only: bool = False) -> list[Goal]:
        return [
            g for g in self._goals.values()
            if g.user_id == user_id and (g.is_active or not active_only)
        ]

    # Budgets -------------------------------------------------------------

    def save_budget(self, budget: Budget) -> Budget:
        return self._insert(self._budgets, budget, "Budget")

    def update_budget(self, budget: Budget) -> Budget:
        return self._replace(self._budgets, budget, "Budget")

    def get_budget(self, budget_id: str) -> Optional[Budget]:
        return self._budgets.get(budget_id)

    def list_budgets(
        self,
        user_id: str,
        category_id: Optional[str] = None,
    ) -> list[Budget]:
        return [
            b for b in self._budgets.values()
            if b.user_id == user_id
            and (category_id is None or b.category_id == category_id)
        ]

    # Notifications -------------------------------------------------------

    def save_notification(self, notification: Notification) -> Notification:
        return self._insert(self._notifications, notification, "Notification")

    def update_notification(self, notification: Notification) -> Notification:
        return self._replace(self._notifications, notification, "Notification")

    def get_notification(self, notification_id: str) -> Optional[Notification]:
        return self._notifications.get(notification_id)

    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        results = [
            n for n in self._notifications.values()
            if n.user_id == user_id and (not n.is_read or not unread_only)
        ]
        return sorted(results, key=lambda n: n.created_at, reverse=True)

    # Settings ------------------------------------------------------------

    def get_settings(self, user_id: str) -> Optional[AppSettings]:
        return self._settings.get(user_id)

    def save_settings(self, settings: AppSettings) -> AppSettings:
        existing = self._settings.get(settings.user_id)
        if existing is not None and existing.id != settings.id:
            raise DuplicateError(f"Settings already exist for user: {settings.user_id}")
        self._settings[settings.user_id] = settings
        return settings


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed, append-only audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
