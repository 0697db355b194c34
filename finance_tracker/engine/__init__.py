"""Update engine package."""

from finance_tracker.engine.update import apply_edit, grouped_total

__all__ = ["apply_edit", "grouped_total"]
