"""
Audit Logger

DESIGN DECISION: Every state change a flow makes is logged.
This provides:
1. Complete traceability
2. Debugging capability
3. A record of why a budget's spent value is what it is

The audit logger:
- Always writes a structured local log line
- Gracefully handles audit-store failures (never fails the calling flow)
- Supports correlation IDs to trace the events of one flow call
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from fintrack.config import get_settings
from fintrack.errors import ComputationError, ReferentialInconsistency
from fintrack.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from fintrack.models.entities import Notification
from fintrack.models.validation import ValidationResult
from fintrack.storage.interface import AuditStorageInterface


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog through stdlib logging with JSON output."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings().core.log_level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when configured (for persistence)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("fintrack.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # The audit trail must never break the flow it records
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_user_registered(
        self,
        user_id: str,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.user_registered(
            user_id=user_id,
            username=username,
            correlation_id=correlation_id,
        ))

    def log_entity_created(
        self,
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        user_id: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.entity_created(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            details=details,
            correlation_id=correlation_id,
        ))

    def log_transaction_recorded(
        self,
        transaction_id: str,
        user_id: str,
        transaction_type: str,
        amount: str,
        category_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_recorded(
            transaction_id=transaction_id,
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            category_id=category_id,
            correlation_id=correlation_id,
        ))

    def log_budget_spent_updated(
        self,
        budget_id: str,
        user_id: str,
        previous_spent: str,
        new_spent: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_spent_updated(
            budget_id=budget_id,
            user_id=user_id,
            previous_spent=previous_spent,
            new_spent=new_spent,
            correlation_id=correlation_id,
        ))

    def log_budget_alert(
        self,
        budget_id: str,
        user_id: str,
        utilization: str,
        threshold: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_alert_triggered(
            budget_id=budget_id,
            user_id=user_id,
            utilization=utilization,
            threshold=threshold,
            correlation_id=correlation_id,
        ))

    def log_goal_milestone(
        self,
        goal_id: str,
        user_id: str,
        milestone: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.goal_milestone_reached(
            goal_id=goal_id,
            user_id=user_id,
            milestone=milestone,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        result: ValidationResult,
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected input with its error-level issues."""
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in result.issues
            if i.severity == "error"
        ]
        self.log(AuditEventBuilder.validation_failed(
            entity_kind=result.entity_kind.value,
            user_id=user_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_referential_inconsistency(
        self,
        entity_type: str,
        user_id: str,
        error: ReferentialInconsistency,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.referential_inconsistency(
            entity_type=entity_type,
            user_id=user_id,
            field=error.field,
            entity_id=error.entity_id,
            message=str(error),
            correlation_id=correlation_id,
        ))

    def log_notification(
        self,
        notification: Notification,
        event_type: AuditEventType = AuditEventType.NOTIFICATION_CREATED,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.notification_event(
            event_type=event_type,
            notification_id=notification.id,
            user_id=notification.user_id,
            notification_type=notification.type.value,
            correlation_id=correlation_id,
        ))

    def log_computation_failed(
        self,
        error: ComputationError,
        entity_id: Optional[str],
        user_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.computation_failed(
            operation=error.operation,
            entity_id=entity_id,
            error_message=str(error),
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a flow call and pass it through all
    subsequent operations.
    """
    return uuid4()
