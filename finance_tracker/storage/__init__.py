"""
Storage Package

Abstract interfaces for the external persistence collaborator.
No backend ships with the core.
"""

from finance_tracker.storage.interface import (
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
]
