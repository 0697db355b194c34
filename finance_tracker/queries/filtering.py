"""
Category Index & Name Filter

Read-only views derived from the ledger:
- display_name(): the human-readable form of a field key
- group_by_category(): fields grouped by category label
- filter_by_name(): fields whose display name contains a query

Matching is done against the display form, not the raw key,
so 'rent_expense' is found by 'rent expense' but not by 'rent_'.
"""

import re
from collections.abc import Iterable
from typing import Optional, Union

from finance_tracker.config import get_settings
from finance_tracker.models.ledger import Ledger, LedgerField

_WORD_START = re.compile(r"\b\w")


def display_name(field_key: str, separator: Optional[str] = None) -> str:
    """
    Turn a field key into a display name.

    Separator characters become spaces, then the first character
    of every word is upper-cased: 'rent_expense' -> 'Rent Expense'.
    """
    separators = separator or get_settings().ledger.name_separator
    spaced = field_key
    for char in separators:
        spaced = spaced.replace(char, " ")
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


def category_label(
    field: LedgerField,
    implicit_category: Optional[str] = None,
) -> str:
    """The group a field belongs to; fields without a category share the implicit one."""
    if field.category:
        return field.category
    return implicit_category or get_settings().ledger.implicit_category


def _fields_of(source: Union[Ledger, Iterable[LedgerField]]) -> list[LedgerField]:
    if isinstance(source, Ledger):
        return list(source.fields)
    return list(source)


def group_by_category(
    source: Union[Ledger, Iterable[LedgerField]],
    implicit_category: Optional[str] = None,
) -> dict[str, list[LedgerField]]:
    """
    Group fields by category label.

    Groups appear in the order their label is first encountered;
    fields keep their ledger order within a group.
    """
    implicit = implicit_category or get_settings().ledger.implicit_category
    groups: dict[str, list[LedgerField]] = {}

    for field in _fields_of(source):
        groups.setdefault(category_label(field, implicit), []).append(field)

    return groups


def filter_by_name(
    fields: Union[Ledger, Iterable[LedgerField]],
    query: Optional[str],
    separator: Optional[str] = None,
) -> list[LedgerField]:
    """
    Case-insensitive substring search on display names.

    An empty or whitespace-only query returns every field, in order.
    Any other query is matched as given, surrounding spaces included.
    """
    candidates = _fields_of(fields)
    if query is None or not query.strip():
        return candidates

    needle = query.lower()

    return [
        field for field in candidates
        if needle in display_name(field.key, separator).lower()
    ]
