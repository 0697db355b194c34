"""
Audit Logger

DESIGN DECISION: Every load, edit, submission and save is logged.
This provides:
1. Traceability of every value a user changed
2. Debugging capability when edits are rejected
3. A history of the ledger's lifecycle

The audit logger:
- Is synchronous, like the engine it records
- Writes structured events through structlog
- Supports correlation IDs to trace one editing session
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
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


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log. A disabled logger
    still builds events but drops them.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled
        self._logger = structlog.get_logger("finance_tracker.audit")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        if not self._enabled:
            return False

        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return True

    def log_ledger_loaded(
        self,
        status: str,
        field_count: int,
        recomputed: list[str],
        correlation_id: UUID,
    ) -> None:
        """Log a successful load."""
        event = AuditEventBuilder.ledger_loaded(
            status=status,
            field_count=field_count,
            recomputed=recomputed,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_ledger_rejected(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log a rejected load."""
        event = AuditEventBuilder.ledger_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_edit_applied(
        self,
        field_key: str,
        month: str,
        attribute: str,
        new_value: str,
        resulting_value: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.edit_applied(
            field_key=field_key,
            month=month,
            attribute=attribute,
            new_value=new_value,
            resulting_value=resulting_value,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_edit_rejected(
        self,
        field_key: Optional[str],
        month: Optional[str],
        attribute: Optional[str],
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.edit_rejected(
            field_key=field_key,
            month=month,
            attribute=attribute,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_ledger_submitted(
        self,
        field_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.ledger_submitted(
            field_count=field_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_save_requested(
        self,
        field_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.save_requested(
            field_count=field_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_ledger_saved(
        self,
        annual_total: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.ledger_saved(
            annual_total=annual_total,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_save_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.save_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per editing session and pass it to every audit call.
    """
    return uuid4()
