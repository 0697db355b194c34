"""
Editing Session Orchestrator

This module ties the ledger core together for the form that edits it:
1. Load (payload or stored ledger -> validated ledger)
2. Edit (cell change -> update engine -> derived values)
3. Save (draft ledger -> external storage collaborator)
4. Submit (external workflow locks the ledger)

DESIGN DECISION: The session enforces the boundaries:
- Nothing is loaded without passing validation
- Nothing is edited or saved outside draft status
- Every step is audited

The engine functions stay pure and synchronous; only save() awaits,
because it hands the ledger to an external storage backend.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union
from uuid import UUID

from finance_tracker.audit import AuditLogger, create_correlation_id
from finance_tracker.config import get_settings
from finance_tracker.engine import apply_edit
from finance_tracker.errors import EditError, MalformedLedgerError
from finance_tracker.lifecycle import (
    current_status,
    ensure_editable,
    is_editable,
    mark_submitted,
)
from finance_tracker.models.ledger import (
    EditAttribute,
    Ledger,
    LedgerStatus,
    Month,
)
from finance_tracker.queries import annual_total, field_monthly_total
from finance_tracker.storage import LedgerStorageInterface, NotFoundError, StorageError
from finance_tracker.validation import load_ledger_with_result


class LedgerEditingSession:
    """
    One user's editing session over one ledger.

    Flow:
    1. from_payload() or from_storage() -> load and validate
    2. apply_edit()   -> any number of cell edits while in draft
    3. save()         -> hand the ledger to storage (draft only)
    4. submit()       -> lock the ledger (external workflow)

    The session is a single writer. Callers serving concurrent
    requests must serialize calls on one session.
    """

    def __init__(
        self,
        ledger: Ledger,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        correlation_id: Optional[UUID] = None,
    ):
        self._ledger = ledger
        self._storage = storage
        self._audit_logger = audit_logger
        self._correlation_id = correlation_id or create_correlation_id()

    @classmethod
    def from_payload(
        cls,
        payload: Union[Ledger, Mapping[str, Any]],
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        grouped_value_policy: Optional[str] = None,
    ) -> "LedgerEditingSession":
        """
        Load and validate a ledger, then open a session on it.

        Raises:
            MalformedLedgerError: If the payload violates any invariant
        """
        correlation_id = create_correlation_id()

        try:
            ledger, result = load_ledger_with_result(payload, grouped_value_policy)
        except MalformedLedgerError as e:
            if audit_logger:
                audit_logger.log_ledger_rejected(
                    issues=[issue.model_dump() for issue in e.issues],
                    correlation_id=correlation_id,
                )
            raise

        if audit_logger:
            audit_logger.log_ledger_loaded(
                status=ledger.status.value,
                field_count=len(ledger.fields),
                recomputed=result.recomputed,
                correlation_id=correlation_id,
            )

        return cls(
            ledger,
            storage=storage,
            audit_logger=audit_logger,
            correlation_id=correlation_id,
        )

    @classmethod
    async def from_storage(
        cls,
        ledger_id: str,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        grouped_value_policy: Optional[str] = None,
    ) -> "LedgerEditingSession":
        """
        Fetch a stored payload and open a session on it.

        Raises:
            NotFoundError: If the storage has no ledger under that id
            MalformedLedgerError: If the stored payload violates any invariant
        """
        payload = await storage.load_ledger(ledger_id)
        if payload is None:
            raise NotFoundError(f"No stored ledger with id '{ledger_id}'")

        return cls.from_payload(
            payload,
            storage=storage,
            audit_logger=audit_logger,
            grouped_value_policy=grouped_value_policy,
        )

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    @property
    def status(self) -> LedgerStatus:
        return current_status(self._ledger)

    @property
    def is_editable(self) -> bool:
        return is_editable(self._ledger)

    def apply_edit(
        self,
        field_key: str,
        month: Union[Month, str],
        attribute: Union[EditAttribute, str],
        new_value: Any,
    ) -> Ledger:
        """
        Apply one cell edit through the update engine.

        Rejected edits are audited and re-raised unchanged.
        """
        try:
            apply_edit(self._ledger, field_key, month, attribute, new_value)
        except EditError as e:
            if self._audit_logger:
                self._audit_logger.log_edit_rejected(
                    field_key=e.field_key,
                    month=e.month,
                    attribute=e.attribute,
                    error_code=type(e).__name__,
                    error_message=str(e),
                    correlation_id=self._correlation_id,
                )
            raise

        if self._audit_logger:
            field = self._ledger.get_field(field_key)
            self._audit_logger.log_edit_applied(
                field_key=field_key,
                month=Month.parse(month).value,
                attribute=EditAttribute.parse(attribute).value,
                new_value=str(new_value),
                resulting_value=str(field_monthly_total(field, month)),
                correlation_id=self._correlation_id,
            )

        return self._ledger

    def submit(self) -> Ledger:
        """
        Lock the ledger.

        Called on behalf of the external submit workflow.
        Submitting an already submitted ledger changes nothing.
        """
        was_editable = is_editable(self._ledger)
        mark_submitted(self._ledger)

        if was_editable and self._audit_logger:
            self._audit_logger.log_ledger_submitted(
                field_count=len(self._ledger.fields),
                correlation_id=self._correlation_id,
            )

        return self._ledger

    async def save(self) -> bool:
        """
        Hand the draft ledger to the storage collaborator.

        Returns:
            Whatever the storage backend reports

        Raises:
            LedgerLockedError: If the ledger is no longer a draft
            StorageError: If no storage is configured or the save fails
        """
        ensure_editable(self._ledger)

        if self._storage is None:
            raise StorageError("No ledger storage configured")

        if self._audit_logger:
            self._audit_logger.log_save_requested(
                field_count=len(self._ledger.fields),
                correlation_id=self._correlation_id,
            )

        try:
            saved = await self._storage.save_ledger(self._ledger)
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_save_failed(
                    error_message=str(e),
                    correlation_id=self._correlation_id,
                )
            raise

        if saved and self._audit_logger:
            self._audit_logger.log_ledger_saved(
                annual_total=str(annual_total(self._ledger)),
                correlation_id=self._correlation_id,
            )

        return saved


def create_session(
    payload: Union[Ledger, Mapping[str, Any]],
    storage: Optional[LedgerStorageInterface] = None,
) -> LedgerEditingSession:
    """
    Factory function to open an editing session with default components.

    Audit logging follows the AUDIT_ENABLED setting.
    """
    audit_logger = AuditLogger(enabled=get_settings().app.audit_enabled)
    return LedgerEditingSession.from_payload(
        payload,
        storage=storage,
        audit_logger=audit_logger,
    )
