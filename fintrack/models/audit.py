"""
Audit Models for fintrack

Every state change the flows perform is logged for audit purposes.
This provides:
1. Complete traceability of all operations
2. Debugging information when things go wrong
3. Ability to reconstruct how a budget's spent value was reached

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from fintrack.models.types import utcnow


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each flow step that changes state has its own event type.
    """
    # Accounts
    USER_REGISTERED = "user_registered"
    CATEGORY_CREATED = "category_created"
    SETTINGS_UPDATED = "settings_updated"

    # Money movement
    TRANSACTION_RECORDED = "transaction_recorded"
    BUDGET_CREATED = "budget_created"
    BUDGET_SPENT_UPDATED = "budget_spent_updated"
    BUDGET_ALERT_TRIGGERED = "budget_alert_triggered"
    GOAL_CREATED = "goal_created"
    GOAL_CONTRIBUTION_RECORDED = "goal_contribution_recorded"
    GOAL_MILESTONE_REACHED = "goal_milestone_reached"

    # Notifications
    NOTIFICATION_CREATED = "notification_created"
    NOTIFICATION_READ = "notification_read"

    # Rejections
    VALIDATION_FAILED = "validation_failed"
    REFERENTIAL_INCONSISTENCY = "referential_inconsistency"
    COMPUTATION_FAILED = "computation_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - which record and whose is it?
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the affected record"
    )
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one flow call"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by a user request?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_recorded(txn, correlation_id)
        event = AuditEventBuilder.validation_failed("budget", user_id, issues, correlation_id)
    """

    @staticmethod
    def user_registered(
        user_id: str,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"User registered: {username}",
            details={"username": username},
            is_user_action=True,
        )

    @staticmethod
    def entity_created(
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        user_id: str,
        details: Optional[dict[str, Any]] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} created: {entity_id}",
            details=details or {},
            is_user_action=True,
        )

    @staticmethod
    def transaction_recorded(
        transaction_id: str,
        user_id: str,
        transaction_type: str,
        amount: str,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_RECORDED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction recorded: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
                "category_id": category_id,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_spent_updated(
        budget_id: str,
        user_id: str,
        previous_spent: str,
        new_spent: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SPENT_UPDATED,
            user_id=user_id,
            entity_type="budget",
            entity_id=budget_id,
            correlation_id=correlation_id,
            description=f"Budget spent updated: {previous_spent} -> {new_spent}",
            details={
                "previous_spent": previous_spent,
                "new_spent": new_spent,
            },
        )

    @staticmethod
    def budget_alert_triggered(
        budget_id: str,
        user_id: str,
        utilization: str,
        threshold: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ALERT_TRIGGERED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type="budget",
            entity_id=budget_id,
            correlation_id=correlation_id,
            description=f"Budget at {utilization}% (threshold {threshold}%)",
            details={
                "utilization": utilization,
                "alert_threshold": threshold,
            },
        )

    @staticmethod
    def goal_milestone_reached(
        goal_id: str,
        user_id: str,
        milestone: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_MILESTONE_REACHED,
            user_id=user_id,
            entity_type="goal",
            entity_id=goal_id,
            correlation_id=correlation_id,
            description=f"Goal reached {milestone}%",
            details={"milestone": milestone},
        )

    @staticmethod
    def validation_failed(
        entity_kind: str,
        user_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type=entity_kind,
            correlation_id=correlation_id,
            description=f"{entity_kind.capitalize()} input rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def referential_inconsistency(
        entity_type: str,
        user_id: str,
        field: str,
        entity_id: Optional[str],
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REFERENTIAL_INCONSISTENCY,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Inconsistent reference on {field}",
            error_message=message,
            details={"field": field},
            is_user_action=True,
        )

    @staticmethod
    def notification_event(
        event_type: AuditEventType,
        notification_id: str,
        user_id: str,
        notification_type: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        verb = "read" if event_type == AuditEventType.NOTIFICATION_READ else "created"
        return AuditEvent(
            event_type=event_type,
            user_id=user_id,
            entity_type="notification",
            entity_id=notification_id,
            correlation_id=correlation_id,
            description=f"Notification {verb}: {notification_type}",
            details={"notification_type": notification_type},
            is_user_action=event_type == AuditEventType.NOTIFICATION_READ,
        )

    @staticmethod
    def computation_failed(
        operation: str,
        entity_id: Optional[str],
        error_message: str,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMPUTATION_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Computation failed: {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
