"""
Ledger Error Hierarchy

Every failure the core can report is one of these exceptions.
They are raised synchronously, before any write happens, so a rejected
operation never leaves the ledger partially mutated.

    LedgerError
    ├── MalformedLedgerError      (construction/load time)
    └── EditError                 (apply_edit request failures)
        ├── UnknownFieldError
        ├── InvalidMonthError
        ├── InvalidAttributeError
        ├── InvalidValueError
        └── LedgerLockedError
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for all ledger core errors."""
    pass


class MalformedLedgerError(LedgerError):
    """
    The ledger payload violates a structural invariant.

    `issues` holds the ValidationIssue objects that caused the rejection.
    """

    def __init__(self, message: str, issues: Optional[list] = None):
        super().__init__(message)
        self.issues = list(issues or [])


class EditError(LedgerError):
    """Base exception for rejected edit requests."""

    def __init__(
        self,
        message: str,
        field_key: Optional[str] = None,
        month: Optional[str] = None,
        attribute: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.field_key = field_key
        self.month = month
        self.attribute = attribute
        self.value = value


class UnknownFieldError(EditError):
    """No field with the requested key exists in the ledger."""
    pass


class InvalidMonthError(EditError):
    """The month label is not one of the twelve calendar labels."""
    pass


class InvalidAttributeError(EditError):
    """The attribute cannot be edited on this kind of field."""
    pass


class InvalidValueError(EditError):
    """The new value is not a finite, non-negative number."""
    pass


class LedgerLockedError(EditError):
    """The ledger is not in draft status and cannot be mutated."""
    pass
