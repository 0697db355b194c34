"""
Update Engine

The single mutation entry point for a ledger.

apply_edit() validates the whole request before touching anything:
1. Lifecycle gate (draft only)
2. Field key exists
3. Month label is one of the twelve
4. Attribute is valid for the field kind
5. New value is a finite, non-negative number

Only then is the target month entry replaced, in one assignment,
by a fully updated copy. For grouped fields that copy carries the
recomputed value = head_count * salary, so the derived total can
never drift from its inputs.

The engine performs no locking. Callers that accept concurrent edit
requests must serialize apply_edit() calls per ledger instance.
"""

from decimal import Decimal
from typing import Any, Optional, Union

from finance_tracker.errors import (
    InvalidAttributeError,
    InvalidMonthError,
    InvalidValueError,
    LedgerLockedError,
    MalformedLedgerError,
    UnknownFieldError,
)
from finance_tracker.lifecycle import is_editable
from finance_tracker.models.ledger import (
    GROUPED_ATTRIBUTES,
    UNGROUPED_ATTRIBUTES,
    EditAttribute,
    Ledger,
    LedgerField,
    Month,
    MonthEntry,
)


def grouped_total(
    head_count: Optional[int],
    salary: Optional[Decimal],
) -> Decimal:
    """Derived monthly value of a grouped entry. Missing inputs count as 0."""
    return Decimal(head_count or 0) * (salary or Decimal("0"))


def _coerce_value(
    attribute: EditAttribute,
    new_value: Any,
    context: dict,
) -> Union[int, Decimal]:
    """
    Convert an edit value to the attribute's type.

    Returns an int for head_count and a Decimal otherwise.
    """
    # bool is an int subclass but never a meaningful amount
    if isinstance(new_value, bool) or not isinstance(new_value, (int, float, Decimal)):
        raise InvalidValueError(
            f"Value for {attribute.value} must be a number, got {type(new_value).__name__}",
            value=new_value,
            **context,
        )

    if isinstance(new_value, Decimal):
        amount = new_value
    else:
        amount = Decimal(str(new_value))

    if not amount.is_finite():
        raise InvalidValueError(
            f"Value for {attribute.value} must be finite, got {new_value}",
            value=new_value,
            **context,
        )
    if amount < 0:
        raise InvalidValueError(
            f"Value for {attribute.value} cannot be negative, got {new_value}",
            value=new_value,
            **context,
        )

    if attribute == EditAttribute.HEAD_COUNT:
        if amount != amount.to_integral_value():
            raise InvalidValueError(
                f"Head count must be a whole number, got {new_value}",
                value=new_value,
                **context,
            )
        return int(amount)

    return amount


def _resolve_entry(field: LedgerField, month: Month) -> int:
    """Position of the month's entry within the field."""
    for index, entry in enumerate(field.months):
        if entry.month == month:
            return index
    # Only reachable for a ledger that skipped load validation
    raise MalformedLedgerError(
        f"Field '{field.key}' has no entry for {month.value}"
    )


def _updated_entry(
    field: LedgerField,
    entry: MonthEntry,
    attribute: EditAttribute,
    coerced: Union[int, Decimal],
) -> MonthEntry:
    """Build the replacement entry, including the derived value for grouped fields."""
    if not field.grouped:
        return entry.model_copy(update={"value": coerced})

    head_count = coerced if attribute == EditAttribute.HEAD_COUNT else (entry.head_count or 0)
    salary = coerced if attribute == EditAttribute.SALARY else (entry.salary or Decimal("0"))

    return entry.model_copy(
        update={
            "head_count": head_count,
            "salary": salary,
            "value": grouped_total(head_count, salary),
        }
    )


def apply_edit(
    ledger: Ledger,
    field_key: str,
    month: Union[Month, str],
    attribute: Union[EditAttribute, str],
    new_value: Any,
) -> Ledger:
    """
    Set one attribute on one month entry and maintain derived values.

    Args:
        ledger: The ledger to mutate in place
        field_key: Key of the target field
        month: Month label (case-insensitive) or Month
        attribute: 'value' for ungrouped fields; 'head_count'/'headCount'
                   or 'salary' for grouped fields
        new_value: Finite, non-negative number

    Returns:
        The same ledger instance, updated

    Raises:
        LedgerLockedError: Ledger is not in draft
        UnknownFieldError: No field with that key
        InvalidMonthError: Unknown month label
        InvalidAttributeError: Attribute not editable on this field
        InvalidValueError: Value is not a finite, non-negative number
    """
    context = {
        "field_key": field_key,
        "month": month.value if isinstance(month, Month) else month,
        "attribute": attribute.value if isinstance(attribute, EditAttribute) else attribute,
    }

    if not is_editable(ledger):
        raise LedgerLockedError(
            f"Ledger is {ledger.status.value}; edits are only allowed in draft",
            value=new_value,
            **context,
        )

    field = ledger.get_field(field_key)
    if field is None:
        raise UnknownFieldError(
            f"No field with key '{field_key}'",
            value=new_value,
            **context,
        )

    try:
        target_month = Month.parse(month)
    except ValueError:
        raise InvalidMonthError(
            f"Unknown month '{month}'",
            value=new_value,
            **context,
        )

    try:
        target_attribute = EditAttribute.parse(attribute)
    except ValueError:
        raise InvalidAttributeError(
            f"Unknown attribute '{attribute}'",
            value=new_value,
            **context,
        )

    allowed = GROUPED_ATTRIBUTES if field.grouped else UNGROUPED_ATTRIBUTES
    if target_attribute not in allowed:
        kind = "grouped" if field.grouped else "ungrouped"
        raise InvalidAttributeError(
            f"Cannot edit {target_attribute.value} on {kind} field '{field_key}'",
            value=new_value,
            **context,
        )

    coerced = _coerce_value(target_attribute, new_value, context)

    index = _resolve_entry(field, target_month)
    field.months[index] = _updated_entry(
        field, field.months[index], target_attribute, coerced
    )

    return ledger
