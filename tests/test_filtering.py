"""
Tests for the category index, name filter and filtered views.
"""

import pytest
from decimal import Decimal

from finance_tracker.engine import apply_edit
from finance_tracker.models.ledger import Month, new_field
from finance_tracker.queries import (
    annual_total,
    category_total,
    display_name,
    filter_by_name,
    filter_ledger,
    group_by_category,
)
from finance_tracker.validation import load_ledger


class TestDisplayName:
    """Tests for display_name()."""

    @pytest.mark.parametrize(
        "field_key, expected",
        [
            ("rent_expense", "Rent Expense"),
            ("Directors", "Directors"),
            ("office_supplies_q1", "Office Supplies Q1"),
            ("travel", "Travel"),
        ],
    )
    def test_display_name(self, field_key, expected):
        assert display_name(field_key) == expected

    def test_custom_separator(self):
        assert display_name("rent-expense", separator="-") == "Rent Expense"

    def test_separator_from_environment(self, monkeypatch):
        monkeypatch.setenv("LEDGER_NAME_SEPARATOR", "_-")
        assert display_name("rent-expense_q1") == "Rent Expense Q1"


class TestGroupByCategory:
    """Tests for group_by_category()."""

    def test_groups_in_first_encounter_order(self, ledger):
        groups = group_by_category(ledger)

        assert list(groups) == ["headcount", "other"]
        assert [f.key for f in groups["headcount"]] == ["Directors"]
        assert [f.key for f in groups["other"]] == ["rent_expense", "office_supplies"]

    def test_uncategorized_first(self):
        ledger = load_ledger({
            "fields": [
                new_field("rent_expense").to_payload(),
                new_field("Directors", grouped=True, category="headcount").to_payload(),
                new_field("travel", category="").to_payload(),
            ],
        })

        groups = group_by_category(ledger)

        assert list(groups) == ["other", "headcount"]
        assert [f.key for f in groups["other"]] == ["rent_expense", "travel"]

    def test_every_field_in_exactly_one_group(self, ledger):
        groups = group_by_category(ledger)
        grouped_keys = [f.key for fields in groups.values() for f in fields]
        assert sorted(grouped_keys) == sorted(ledger.field_keys)

    def test_implicit_category_override(self, ledger):
        groups = group_by_category(ledger, implicit_category="uncategorized")
        assert list(groups) == ["headcount", "uncategorized"]

    def test_implicit_category_from_environment(self, ledger, monkeypatch):
        monkeypatch.setenv("LEDGER_IMPLICIT_CATEGORY", "misc")

        assert list(group_by_category(ledger)) == ["headcount", "misc"]
        assert category_total(ledger, None) == Decimal("54500")
        assert category_total(ledger, "misc") == Decimal("54500")

    def test_accepts_field_list(self, ledger):
        groups = group_by_category(ledger.fields[1:])
        assert list(groups) == ["other"]


class TestFilterByName:
    """Tests for filter_by_name()."""

    def test_empty_query_returns_all_fields(self, ledger):
        assert filter_by_name(ledger, "") == ledger.fields
        assert filter_by_name(ledger, None) == ledger.fields
        assert filter_by_name(ledger, "   ") == ledger.fields

    def test_case_insensitive_match(self, ledger):
        assert [f.key for f in filter_by_name(ledger, "RENT")] == ["rent_expense"]

    def test_matches_display_form(self, ledger):
        """Test that the query is matched against 'Rent Expense', not the key."""
        assert [f.key for f in filter_by_name(ledger, "rent expense")] == ["rent_expense"]
        assert filter_by_name(ledger, "rent_") == []

    def test_no_match(self, ledger):
        assert filter_by_name(ledger, "payroll") == []

    def test_query_is_not_stripped(self, ledger):
        """Test that surrounding spaces in a non-blank query take part in the match."""
        assert filter_by_name(ledger, "Expense ") == []
        assert [f.key for f in filter_by_name(ledger, " expense")] == ["rent_expense"]
        assert [f.key for f in filter_by_name(ledger, "expense")] == ["rent_expense"]

    def test_keeps_ledger_order(self, ledger):
        keys = [f.key for f in filter_by_name(ledger, "e")]
        assert keys == ["Directors", "rent_expense", "office_supplies"]

    def test_result_is_subset(self, ledger):
        result = filter_by_name(ledger, "s")
        assert all(field in ledger.fields for field in result)


class TestLedgerView:
    """Filtered totals and grouping."""

    def test_filtered_view_groups(self, ledger):
        view = filter_ledger(ledger, "rent")

        assert view.is_filtered is True
        assert view.field_keys == ["rent_expense"]
        groups = view.groups()
        assert list(groups) == ["other"]
        assert "headcount" not in groups

    def test_filtered_totals_differ_from_ledger_totals(self, ledger):
        view = filter_ledger(ledger, "rent")

        assert view.category_total(None) == Decimal("46000")
        assert category_total(ledger, None) == Decimal("54500")
        assert view.annual_total() == Decimal("46000")
        assert annual_total(ledger) == Decimal("746500")

    def test_filtered_monthly_totals(self, ledger):
        view = filter_ledger(ledger, "directors")

        assert view.monthly_total("feb") == Decimal("252000")
        assert view.monthly_totals()[Month.JAN] == Decimal("200000")
        assert view.category_totals() == {"headcount": Decimal("692000")}

    def test_unfiltered_view_covers_ledger(self, ledger):
        view = filter_ledger(ledger, "")

        assert view.is_filtered is False
        assert view.annual_total() == annual_total(ledger)
        assert view.summary().filtered is False
        assert view.summary().query is None

    def test_view_totals_follow_edits(self, ledger):
        view = filter_ledger(ledger, "rent")

        apply_edit(ledger, "rent_expense", "jan", "value", 20000)

        assert view.monthly_total("jan") == Decimal("20000")
        assert view.annual_total() == Decimal("51000")

    def test_view_summary(self, ledger):
        summary = filter_ledger(ledger, "office").summary()

        assert summary.field_count == 1
        assert summary.annual_total == Decimal("8500")
        assert summary.filtered is True
        assert summary.query == "office"
