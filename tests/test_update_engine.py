"""
Tests for the update engine (apply_edit).
"""

import pytest
from decimal import Decimal

from finance_tracker.engine import apply_edit
from finance_tracker.engine.update import grouped_total
from finance_tracker.errors import (
    EditError,
    InvalidAttributeError,
    InvalidMonthError,
    InvalidValueError,
    LedgerLockedError,
    UnknownFieldError,
)
from finance_tracker.lifecycle import mark_submitted
from finance_tracker.models.ledger import MONTHS, EditAttribute, Month
from finance_tracker.queries import monthly_total
from finance_tracker.validation import dump_ledger


def _entry(ledger, key, month):
    return ledger.get_field(key).get_month(Month.parse(month))


class TestGroupedEdits:
    """Grouped fields derive value from head_count * salary."""

    def test_head_count_edit_recomputes_value(self, scenario_ledger):
        """Test the Directors head count scenario end to end."""
        assert monthly_total(scenario_ledger, "jan") == Decimal("215000")

        apply_edit(scenario_ledger, "Directors", "jan", "head_count", 12)

        jan = _entry(scenario_ledger, "Directors", "jan")
        assert jan.head_count == 12
        assert jan.salary == Decimal("20000")
        assert jan.value == Decimal("240000")
        assert monthly_total(scenario_ledger, "jan") == Decimal("255000")

    def test_salary_edit_recomputes_value(self, ledger):
        apply_edit(ledger, "Directors", "feb", "salary", 25000)

        feb = _entry(ledger, "Directors", "feb")
        assert feb.head_count == 12
        assert feb.salary == Decimal("25000")
        assert feb.value == Decimal("300000")

    def test_camel_case_attribute_and_upper_case_month(self, ledger):
        apply_edit(ledger, "Directors", "MAR", "headCount", 3)

        assert _entry(ledger, "Directors", "mar").value == Decimal("72000")

    def test_enum_arguments(self, ledger):
        apply_edit(ledger, "Directors", Month.APR, EditAttribute.HEAD_COUNT, 2)
        apply_edit(ledger, "Directors", Month.APR, EditAttribute.SALARY, 1000)

        assert _entry(ledger, "Directors", "apr").value == Decimal("2000")

    def test_fractional_salary(self, ledger):
        """Test that float input is converted exactly through its decimal string."""
        apply_edit(ledger, "Directors", "jan", "salary", 1234.5)

        jan = _entry(ledger, "Directors", "jan")
        assert jan.salary == Decimal("1234.5")
        assert jan.value == Decimal("12345")

    def test_integral_float_head_count(self, ledger):
        apply_edit(ledger, "Directors", "jan", "head_count", 12.0)

        jan = _entry(ledger, "Directors", "jan")
        assert jan.head_count == 12
        assert isinstance(jan.head_count, int)

    def test_zero_head_count_zeroes_value(self, ledger):
        apply_edit(ledger, "Directors", "jan", "head_count", 0)

        assert _entry(ledger, "Directors", "jan").value == Decimal("0")

    def test_derived_value_holds_after_many_edits(self, ledger):
        """Test that value == head_count * salary after any edit sequence."""
        edits = [
            ("jan", "head_count", 4),
            ("jan", "salary", Decimal("1500.25")),
            ("jun", "salary", 9000),
            ("jun", "head_count", 7),
            ("jan", "head_count", 0),
            ("dec", "salary", 0.1),
            ("dec", "head_count", 3),
        ]
        for month, attribute, value in edits:
            apply_edit(ledger, "Directors", month, attribute, value)

        directors = ledger.get_field("Directors")
        for entry in directors.months:
            assert entry.value == grouped_total(entry.head_count, entry.salary)

        assert _entry(ledger, "Directors", "jun").value == Decimal("63000")
        assert _entry(ledger, "Directors", "dec").value == Decimal("0.3")


class TestUngroupedEdits:
    """Ungrouped fields take value directly."""

    def test_value_edit(self, scenario_ledger):
        apply_edit(scenario_ledger, "rent_expense", "jan", "value", 18000)

        jan = _entry(scenario_ledger, "rent_expense", "jan")
        assert jan.value == Decimal("18000")
        assert jan.head_count is None
        assert jan.salary is None
        assert monthly_total(scenario_ledger, "jan") == Decimal("218000")

    def test_decimal_value(self, ledger):
        apply_edit(ledger, "office_supplies", "jul", "value", Decimal("99.95"))

        assert _entry(ledger, "office_supplies", "jul").value == Decimal("99.95")

    def test_edit_touches_only_target_entry(self, ledger):
        before = dump_ledger(ledger)

        apply_edit(ledger, "rent_expense", "feb", "value", 17500)

        after = dump_ledger(ledger)
        assert after["fields"][1]["months"][1]["value"] == 17500
        after["fields"][1]["months"][1]["value"] = 15000
        assert after == before

    def test_returns_same_ledger(self, ledger):
        assert apply_edit(ledger, "rent_expense", "jan", "value", 1) is ledger

    def test_entries_keep_calendar_order(self, ledger):
        apply_edit(ledger, "rent_expense", "dec", "value", 5)

        months = [entry.month for entry in ledger.get_field("rent_expense").months]
        assert months == list(MONTHS)


class TestRejectedEdits:
    """Every rejected edit leaves the ledger untouched."""

    @pytest.mark.parametrize(
        "field_key, month, attribute, value, error",
        [
            ("bonus", "jan", "value", 10, UnknownFieldError),
            ("rent_expense", "janu", "value", 10, InvalidMonthError),
            ("rent_expense", "13", "value", 10, InvalidMonthError),
            ("rent_expense", "jan", "head_count", 10, InvalidAttributeError),
            ("rent_expense", "jan", "salary", 10, InvalidAttributeError),
            ("Directors", "jan", "value", 10, InvalidAttributeError),
            ("Directors", "jan", "bonus", 10, InvalidAttributeError),
            ("rent_expense", "jan", "value", -1, InvalidValueError),
            ("rent_expense", "jan", "value", float("nan"), InvalidValueError),
            ("rent_expense", "jan", "value", float("inf"), InvalidValueError),
            ("rent_expense", "jan", "value", Decimal("NaN"), InvalidValueError),
            ("rent_expense", "jan", "value", "100", InvalidValueError),
            ("rent_expense", "jan", "value", None, InvalidValueError),
            ("rent_expense", "jan", "value", True, InvalidValueError),
            ("Directors", "jan", "head_count", 1.5, InvalidValueError),
            ("Directors", "jan", "salary", -20000, InvalidValueError),
        ],
    )
    def test_rejected_edit(self, ledger, field_key, month, attribute, value, error):
        before = dump_ledger(ledger)

        with pytest.raises(error):
            apply_edit(ledger, field_key, month, attribute, value)

        assert dump_ledger(ledger) == before

    def test_all_edit_errors_share_a_base(self, ledger):
        with pytest.raises(EditError):
            apply_edit(ledger, "bonus", "jan", "value", 10)

    def test_error_carries_request_context(self, ledger):
        with pytest.raises(InvalidValueError) as exc_info:
            apply_edit(ledger, "rent_expense", "jan", "value", -1)

        error = exc_info.value
        assert error.field_key == "rent_expense"
        assert error.month == "jan"
        assert error.attribute == "value"
        assert error.value == -1


class TestLockedLedger:
    """Submitted ledgers reject every edit."""

    def test_locked_edit_is_rejected(self, scenario_ledger):
        mark_submitted(scenario_ledger)

        with pytest.raises(LedgerLockedError):
            apply_edit(scenario_ledger, "rent_expense", "jan", "value", 999)

        assert _entry(scenario_ledger, "rent_expense", "jan").value == Decimal("15000")

    def test_lock_checked_before_anything_else(self, ledger):
        """Test that a locked ledger wins over every other problem with the request."""
        mark_submitted(ledger)

        with pytest.raises(LedgerLockedError):
            apply_edit(ledger, "bonus", "janu", "colour", -1)

    def test_status_set_as_plain_string_locks(self, ledger):
        """Test that an outside workflow writing a raw status string still locks edits."""
        ledger.status = "submitted"

        with pytest.raises(LedgerLockedError, match="Ledger is submitted"):
            apply_edit(ledger, "rent_expense", "jan", "value", 1)

        assert _entry(ledger, "rent_expense", "jan").value == Decimal("15000")
