"""
Lifecycle Gate

A ledger is either DRAFT (editable) or SUBMITTED (read-only).
Every mutation entry point consults this gate before writing.

The draft -> submitted transition belongs to an external submit workflow.
mark_submitted() is the hook that workflow calls; nothing in this package
ever moves a ledger back to draft.
"""

from finance_tracker.errors import LedgerLockedError
from finance_tracker.models.ledger import Ledger, LedgerStatus


def current_status(ledger: Ledger) -> LedgerStatus:
    """Return the ledger's lifecycle status."""
    return ledger.status


def is_editable(ledger: Ledger) -> bool:
    """True iff the ledger is still a draft."""
    return ledger.status == LedgerStatus.DRAFT


def ensure_editable(ledger: Ledger) -> None:
    """Raise LedgerLockedError unless the ledger is a draft."""
    if not is_editable(ledger):
        raise LedgerLockedError(
            f"Ledger is {ledger.status.value}; changes are only allowed in draft"
        )


def mark_submitted(ledger: Ledger) -> Ledger:
    """
    Move a draft ledger to SUBMITTED and mirror the status onto every field.

    Idempotent on a ledger that is already submitted.
    """
    ledger.status = LedgerStatus.SUBMITTED
    for field in ledger.fields:
        field.status = LedgerStatus.SUBMITTED
    return ledger
