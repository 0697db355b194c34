"""
Filtered Ledger Views

A LedgerView is the result of searching a ledger by field name.
It keeps references to the ledger's own field objects, so its totals
follow later edits; the set of matching fields is fixed when the view
is created.

Display grouping is always derived from the filtered fields, so a
category whose fields were all filtered out does not appear at all.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from finance_tracker.models.ledger import Ledger, LedgerField, LedgerSummary, Month
from finance_tracker.queries.aggregation import (
    fields_annual_total,
    fields_category_total,
    fields_category_totals,
    fields_monthly_total,
    fields_monthly_totals,
    summarize_fields,
)
from finance_tracker.queries.filtering import filter_by_name, group_by_category


@dataclass(frozen=True)
class LedgerView:
    """Fields of a ledger that matched a name query."""

    ledger: Ledger
    query: str
    fields: tuple[LedgerField, ...]

    @property
    def is_filtered(self) -> bool:
        return bool(self.query.strip())

    @property
    def field_keys(self) -> list[str]:
        return [field.key for field in self.fields]

    def groups(self) -> dict[str, list[LedgerField]]:
        """Matching fields grouped by category; empty categories are omitted."""
        return group_by_category(self.fields)

    def category_total(self, category: Optional[str]) -> Decimal:
        """Total of the matching fields in a category."""
        return fields_category_total(self.fields, category)

    def monthly_total(self, month: Union[Month, str]) -> Decimal:
        return fields_monthly_total(self.fields, month)

    def annual_total(self) -> Decimal:
        return fields_annual_total(self.fields)

    def monthly_totals(self) -> dict[Month, Decimal]:
        return fields_monthly_totals(self.fields)

    def category_totals(self) -> dict[str, Decimal]:
        return fields_category_totals(self.fields)

    def summary(self) -> LedgerSummary:
        return summarize_fields(
            self.fields,
            filtered=self.is_filtered,
            query=self.query or None,
        )


def filter_ledger(ledger: Ledger, query: Optional[str]) -> LedgerView:
    """Search a ledger by field display name."""
    return LedgerView(
        ledger=ledger,
        query=query or "",
        fields=tuple(filter_by_name(ledger.fields, query)),
    )
