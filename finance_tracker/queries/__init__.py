"""Read-only query package: totals, grouping and name search."""

from finance_tracker.queries.aggregation import (
    annual_total,
    category_total,
    category_totals,
    field_annual_total,
    field_monthly_total,
    monthly_total,
    monthly_totals,
    summarize,
)
from finance_tracker.queries.filtering import (
    category_label,
    display_name,
    filter_by_name,
    group_by_category,
)
from finance_tracker.queries.view import LedgerView, filter_ledger

__all__ = [
    "LedgerView",
    "annual_total",
    "category_label",
    "category_total",
    "category_totals",
    "display_name",
    "field_annual_total",
    "field_monthly_total",
    "filter_by_name",
    "filter_ledger",
    "group_by_category",
    "monthly_total",
    "monthly_totals",
    "summarize",
]
