"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Plug in any database the host application uses
2. Use in-memory storage for testing
3. Keep validation and derived-state rules decoupled from persistence

The interface is intentionally simple - we're not building a full ORM.
Just the lookups the flows need: by id and by owning user id.

Storage also owns id generation (new_id), so records never mint their own.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from uuid import UUID

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


class FinanceStorageInterface(ABC):
    """
    Abstract interface for finance record storage.

    Any storage implementation (PostgreSQL, SQLite, in-memory)
    must implement these methods.
    """

    @abstractmethod
    def new_id(self) -> str:
        """Generate a fresh record id."""
        pass

    # Users ---------------------------------------------------------------

    @abstractmethod
    def save_user(self, user: User) -> User:
        """
        Persist a new user.

        Raises:
            DuplicateError: If the username is already taken
        """
        pass

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    # Categories ----------------------------------------------------------

    @abstractmethod
    def save_category(self, category: Category) -> Category:
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def list_categories(
        self,
        user_id: str,
        type: Optional[TransactionType] = None,
    ) -> list[Category]:
        pass

    # Transactions --------------------------------------------------------

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        category_id: Optional[str] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions, oldest first.

        Args:
            user_id: Owner
            date_from: Only transactions on or after this date
            date_to: Only transactions on or before this date
            category_id: Only transactions in this category
        """
        pass

    # Goals ---------------------------------------------------------------

    @abstractmethod
    def save_goal(self, goal: Goal) -> Goal:
        pass

    @abstractmethod
    def update_goal(self, goal: Goal) -> Goal:
        """
        Replace a stored goal.

        Raises:
            NotFoundError: If the goal doesn't exist
        """
        pass

    @abstractmethod
    def get_goal(self, goal_id: str) -> Optional[Goal]:
        pass

    @abstractmethod
    def list_goals(self, user_id: str, active_only: bool = False) -> list[Goal]:
        pass

    # Budgets -------------------------------------------------------------

    @abstractmethod
    def save_budget(self, budget: Budget) -> Budget:
        pass

    @abstractmethod
    def update_budget(self, budget: Budget) -> Budget:
        """
        Replace a stored budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        pass

    @abstractmethod
    def get_budget(self, budget_id: str) -> Optional[Budget]:
        pass

    @abstractmethod
    def list_budgets(
        self,
        user_id: str,
        category_id: Optional[str] = None,
    ) -> list[Budget]:
        pass

    # Notifications -------------------------------------------------------

    @abstractmethod
    def save_notification(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    def update_notification(self, notification: Notification) -> Notification:
        """
        Replace a stored notification (only the read flag ever changes).

        Raises:
            NotFoundError: If the notification doesn't exist
        """
        pass

    @abstractmethod
    def get_notification(self, notification_id: str) -> Optional[Notification]:
        pass

    @abstractmethod
    def list_notifications(
        self,
        user_id: str,
        unread_only: bool = False,
    ) -> list[Notification]:
        """List a user's notifications, newest first."""
        pass

    # Settings ------------------------------------------------------------

    @abstractmethod
    def get_settings(self, user_id: str) -> Optional[AppSettings]:
        pass

    @abstractmethod
    def save_settings(self, settings: AppSettings) -> AppSettings:
        """
        Insert or replace the settings record of settings.user_id.

        Raises:
            DuplicateError: If the user already has a settings record with
                a different id
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Events of one flow call, in chronological order."""
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Events for one record, in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
