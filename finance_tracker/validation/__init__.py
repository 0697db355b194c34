"""Ledger validation and loading package."""

from finance_tracker.validation.loader import (
    dump_ledger,
    enforce_invariants,
    load_ledger,
    load_ledger_with_result,
)
from finance_tracker.validation.validator import LedgerValidator

__all__ = [
    "LedgerValidator",
    "dump_ledger",
    "enforce_invariants",
    "load_ledger",
    "load_ledger_with_result",
]
