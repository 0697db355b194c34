"""
Audit Models for the Finance Tracker Ledger

Every load, edit, submission and save request is logged for audit purposes.
This provides:
1. Traceability of every value a user changed
2. Debugging information when an edit is rejected
3. A record of when a ledger left draft status

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_REJECTED = "ledger_rejected"

    # Editing
    EDIT_APPLIED = "edit_applied"
    EDIT_REJECTED = "edit_rejected"

    # Lifecycle
    LEDGER_SUBMITTED = "ledger_submitted"

    # Persistence (performed by an external collaborator)
    SAVE_REQUESTED = "save_requested"
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"

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

    Every significant action on a ledger creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('ledger' or 'field')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Field key the event relates to, if any"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one editing session)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
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
        event = AuditEventBuilder.edit_applied("Directors", "jan", "head_count", "12", "240000", cid)
        event = AuditEventBuilder.ledger_submitted(field_count=3, correlation_id=cid)
    """

    @staticmethod
    def ledger_loaded(
        status: str,
        field_count: int,
        recomputed: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger loaded with {field_count} fields ({status})",
            details={
                "status": status,
                "field_count": field_count,
                "recomputed": recomputed,
            },
        )

    @staticmethod
    def ledger_rejected(
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def edit_applied(
        field_key: str,
        month: str,
        attribute: str,
        new_value: str,
        resulting_value: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EDIT_APPLIED,
            entity_type="field",
            entity_id=field_key,
            correlation_id=correlation_id,
            description=f"Set {field_key}.{month}.{attribute} = {new_value}",
            details={
                "month": month,
                "attribute": attribute,
                "new_value": new_value,
                "resulting_value": resulting_value,
            },
            is_user_action=True,
        )

    @staticmethod
    def edit_rejected(
        field_key: Optional[str],
        month: Optional[str],
        attribute: Optional[str],
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EDIT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="field",
            entity_id=field_key,
            correlation_id=correlation_id,
            description=f"Edit rejected: {error_code}",
            details={
                "month": month,
                "attribute": attribute,
            },
            error_code=error_code,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def ledger_submitted(
        field_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SUBMITTED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Ledger submitted; further edits are locked",
            details={
                "field_count": field_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def save_requested(
        field_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_REQUESTED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Save requested",
            details={
                "field_count": field_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_saved(
        annual_total: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger saved (annual total {annual_total})",
            details={
                "annual_total": annual_total,
            },
        )

    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Ledger save failed",
            error_message=error_message,
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
