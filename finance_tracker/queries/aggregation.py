"""
Aggregation Engine

DESIGN DECISION: Totals are never cached on the ledger.
Every call recomputes from the current month entries, so a total can
never be stale after an edit. The ledger is small (fields x 12 months),
so recomputation is cheap.

The ledger-level functions (category_total, monthly_total, annual_total, ...)
always cover the whole, unfiltered ledger. Totals over a filtered subset
go through LedgerView (see finance_tracker.queries.view), so the two
modes cannot be mixed by accident.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional, Union

from finance_tracker.config import get_settings
from finance_tracker.errors import InvalidMonthError
from finance_tracker.models.ledger import (
    MONTHS,
    Ledger,
    LedgerField,
    LedgerSummary,
    Month,
)
from finance_tracker.queries.filtering import category_label

ZERO = Decimal("0")


def _month(month: Union[Month, str]) -> Month:
    try:
        return Month.parse(month)
    except ValueError:
        raise InvalidMonthError(f"Unknown month '{month}'", month=str(month))


# =============================================================================
# FIELD LEVEL
# =============================================================================

def field_monthly_total(field: LedgerField, month: Union[Month, str]) -> Decimal:
    """The value of one field in one month."""
    entry = field.get_month(_month(month))
    return entry.value if entry is not None else ZERO


def field_annual_total(field: LedgerField) -> Decimal:
    """Sum of a field's value over all twelve months."""
    return sum((entry.value for entry in field.months), ZERO)


# =============================================================================
# FIELD SUBSETS
# =============================================================================

def fields_monthly_total(
    fields: Iterable[LedgerField],
    month: Union[Month, str],
) -> Decimal:
    target = _month(month)
    return sum((field_monthly_total(field, target) for field in fields), ZERO)


def fields_category_total(
    fields: Iterable[LedgerField],
    category: Optional[str],
    implicit_category: Optional[str] = None,
) -> Decimal:
    """
    Sum over all months of the fields in one category.

    category=None selects the implicit catch-all category.
    """
    implicit = implicit_category or get_settings().ledger.implicit_category
    target = category or implicit
    return sum(
        (
            field_annual_total(field)
            for field in fields
            if category_label(field, implicit) == target
        ),
        ZERO,
    )


def fields_annual_total(fields: Iterable[LedgerField]) -> Decimal:
    return sum((field_annual_total(field) for field in fields), ZERO)


def fields_monthly_totals(fields: Iterable[LedgerField]) -> dict[Month, Decimal]:
    """Month -> total, in calendar order."""
    fields = list(fields)
    return {month: fields_monthly_total(fields, month) for month in MONTHS}


def fields_category_totals(
    fields: Iterable[LedgerField],
    implicit_category: Optional[str] = None,
) -> dict[str, Decimal]:
    """Category label -> total, in first-encounter order."""
    totals: dict[str, Decimal] = {}
    for field in fields:
        label = category_label(field, implicit_category)
        totals[label] = totals.get(label, ZERO) + field_annual_total(field)
    return totals


def summarize_fields(
    fields: Iterable[LedgerField],
    filtered: bool = False,
    query: Optional[str] = None,
) -> LedgerSummary:
    fields = list(fields)
    return LedgerSummary(
        field_count=len(fields),
        monthly_totals=fields_monthly_totals(fields),
        category_totals=fields_category_totals(fields),
        annual_total=fields_annual_total(fields),
        filtered=filtered,
        query=query,
    )


# =============================================================================
# WHOLE LEDGER (always unfiltered)
# =============================================================================

def category_total(ledger: Ledger, category: Optional[str]) -> Decimal:
    """
    Sum of value over all months of all fields in a category.

    category=None selects the implicit catch-all category.
    A category with no fields totals 0.
    """
    return fields_category_total(ledger.fields, category)


def monthly_total(ledger: Ledger, month: Union[Month, str]) -> Decimal:
    """Sum of value at one month across all fields."""
    return fields_monthly_total(ledger.fields, month)


def annual_total(ledger: Ledger) -> Decimal:
    """Sum of value across every (field, month) pair."""
    return fields_annual_total(ledger.fields)


def monthly_totals(ledger: Ledger) -> dict[Month, Decimal]:
    """The monthly summary: month -> total, in calendar order."""
    return fields_monthly_totals(ledger.fields)


def category_totals(ledger: Ledger) -> dict[str, Decimal]:
    """Category label -> total, in first-encounter order."""
    return fields_category_totals(ledger.fields)


def summarize(ledger: Ledger) -> LedgerSummary:
    """All totals for the whole ledger."""
    return summarize_fields(ledger.fields)
