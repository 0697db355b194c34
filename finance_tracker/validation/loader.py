"""
Ledger Loading

load_ledger() is how a ledger comes into existence: from a payload
delivered by the external fetch/persistence collaborator, or from an
already-built Ledger object. Either way the result has passed the
LedgerValidator, so every invariant holds before the first edit.

Policy for grouped values that disagree with head_count * salary:
- 'reject' (default): MalformedLedgerError
- 'recompute': the stored value is replaced with head_count * salary
Structural violations are always rejected.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from finance_tracker.engine.update import grouped_total
from finance_tracker.errors import MalformedLedgerError
from finance_tracker.models.ledger import Ledger, ValidationIssue, ValidationResult
from finance_tracker.validation.validator import LedgerValidator


def _issues_from_pydantic(error: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            location=".".join(str(part) for part in err["loc"]) or "ledger",
            issue_type=err["type"],
            message=err["msg"],
            severity="error",
        )
        for err in error.errors()
    ]


def _parse(payload: Union[Ledger, Mapping[str, Any]]) -> Ledger:
    if isinstance(payload, Ledger):
        return payload
    if not isinstance(payload, Mapping):
        raise MalformedLedgerError(
            f"Ledger payload must be a mapping, got {type(payload).__name__}"
        )
    try:
        return Ledger.parse_unchecked(dict(payload))
    except ValidationError as e:
        issues = _issues_from_pydantic(e)
        raise MalformedLedgerError(
            f"Ledger payload has {len(issues)} schema errors",
            issues=issues,
        )


def _apply_policy(ledger: Ledger, result: ValidationResult) -> None:
    """Recompute flagged grouped values and mirror the ledger status onto fields."""
    if result.recomputed:
        for field in ledger.fields:
            if not field.grouped:
                continue
            for index, entry in enumerate(field.months):
                expected = grouped_total(entry.head_count, entry.salary)
                if entry.value != expected:
                    field.months[index] = entry.model_copy(update={"value": expected})

    for field in ledger.fields:
        field.status = ledger.status


def enforce_invariants(
    ledger: Ledger,
    grouped_value_policy: Optional[str] = None,
) -> ValidationResult:
    """
    Validate a parsed ledger and apply the grouped value policy.

    Runs on every Ledger construction, and from the loader with an
    explicit policy.

    Raises:
        MalformedLedgerError: If the ledger violates any invariant
    """
    validator = LedgerValidator(grouped_value_policy)
    result = validator.validate(ledger)

    if result.has_errors:
        first = next(issue for issue in result.issues if issue.severity == "error")
        raise MalformedLedgerError(
            f"Ledger rejected with {result.error_count} issues; first: {first.message}",
            issues=result.issues,
        )

    _apply_policy(ledger, result)

    return result


def load_ledger_with_result(
    payload: Union[Ledger, Mapping[str, Any]],
    grouped_value_policy: Optional[str] = None,
) -> tuple[Ledger, ValidationResult]:
    """
    Parse and validate a ledger.

    Returns:
        (ledger, validation_result)

    Raises:
        MalformedLedgerError: If the payload violates any invariant
    """
    ledger = _parse(payload)
    result = enforce_invariants(ledger, grouped_value_policy)

    return ledger, result


def load_ledger(
    payload: Union[Ledger, Mapping[str, Any]],
    grouped_value_policy: Optional[str] = None,
) -> Ledger:
    """Parse and validate a ledger. Raises MalformedLedgerError."""
    ledger, _ = load_ledger_with_result(payload, grouped_value_policy)
    return ledger


def dump_ledger(ledger: Ledger) -> dict:
    """JSON-compatible wire shape of a ledger."""
    return ledger.to_payload()
