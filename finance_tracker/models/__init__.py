"""
Data Models Package

This package contains all Pydantic models used by the ledger core.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.ledger import (
    GROUPED_ATTRIBUTES,
    MONTHS,
    UNGROUPED_ATTRIBUTES,
    EditAttribute,
    FinanceData,
    Ledger,
    LedgerField,
    LedgerStatus,
    LedgerSummary,
    Month,
    MonthEntry,
    ValidationIssue,
    ValidationResult,
    new_field,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "GROUPED_ATTRIBUTES",
    "MONTHS",
    "UNGROUPED_ATTRIBUTES",
    "EditAttribute",
    "FinanceData",
    "Ledger",
    "LedgerField",
    "LedgerStatus",
    "LedgerSummary",
    "Month",
    "MonthEntry",
    "ValidationIssue",
    "ValidationResult",
    "new_field",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
