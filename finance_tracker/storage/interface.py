"""
Abstract Storage Interface

DESIGN DECISION: Persistence and transport of a ledger belong to an
external collaborator. The core only defines the contract it calls
when the user saves, so that:
1. Any backend (REST API, database, file) can be plugged in
2. Tests can use in-memory storage
3. The engine stays free of I/O

The interface is intentionally small - save and load, nothing else.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.ledger import Ledger


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Implementations receive ledgers whose invariants already hold and
    must store them in the wire shape produced by Ledger.to_payload().
    """

    @abstractmethod
    async def save_ledger(self, ledger: Ledger) -> bool:
        """
        Persist the ledger.

        Args:
            ledger: The ledger to save

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def load_ledger(self, ledger_id: str) -> Optional[dict]:
        """
        Fetch a stored ledger payload.

        Args:
            ledger_id: Backend-specific identifier

        Returns:
            The raw payload (to be passed through load_ledger), or None
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Ledger not found in storage."""
    pass
