"""
Finance Tracker - Ledger Core

The data model and derivation engine behind a monthly financial
ledger form: raw inputs (head count, salary, amounts) and the totals
derived from them stay consistent as a user edits, and editing is
gated by the ledger's draft/submitted status.

DESIGN PRINCIPLES:
1. Validate fully before any write
2. Derived values are maintained in one place (apply_edit)
3. Totals are recomputed on every query, never cached
4. Submitted ledgers are read-only
5. Rendering and persistence are someone else's job
"""

__version__ = "1.0.0"

from finance_tracker.engine import apply_edit
from finance_tracker.errors import (
    EditError,
    InvalidAttributeError,
    InvalidMonthError,
    InvalidValueError,
    LedgerError,
    LedgerLockedError,
    MalformedLedgerError,
    UnknownFieldError,
)
from finance_tracker.lifecycle import (
    current_status,
    ensure_editable,
    is_editable,
    mark_submitted,
)
from finance_tracker.models import (
    MONTHS,
    EditAttribute,
    FinanceData,
    Ledger,
    LedgerField,
    LedgerStatus,
    Month,
    MonthEntry,
    new_field,
)
from finance_tracker.queries import (
    LedgerView,
    annual_total,
    category_total,
    display_name,
    field_monthly_total,
    filter_by_name,
    filter_ledger,
    group_by_category,
    monthly_total,
    summarize,
)
from finance_tracker.validation import dump_ledger, load_ledger

__all__ = [
    # Model
    "MONTHS",
    "EditAttribute",
    "FinanceData",
    "Ledger",
    "LedgerField",
    "LedgerStatus",
    "Month",
    "MonthEntry",
    "new_field",
    "load_ledger",
    "dump_ledger",
    # Mutation
    "apply_edit",
    # Lifecycle
    "current_status",
    "ensure_editable",
    "is_editable",
    "mark_submitted",
    # Queries
    "LedgerView",
    "annual_total",
    "category_total",
    "display_name",
    "field_monthly_total",
    "filter_by_name",
    "filter_ledger",
    "group_by_category",
    "monthly_total",
    "summarize",
    # Errors
    "EditError",
    "InvalidAttributeError",
    "InvalidMonthError",
    "InvalidValueError",
    "LedgerError",
    "LedgerLockedError",
    "MalformedLedgerError",
    "UnknownFieldError",
]
