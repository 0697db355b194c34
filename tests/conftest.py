"""
Shared fixtures for the ledger core tests.

Payloads are built in the wire shape the external loader delivers,
then passed through load_ledger like real data.
"""

from typing import Optional

import pytest

from finance_tracker.config import get_settings
from finance_tracker.models.ledger import Ledger
from finance_tracker.storage import LedgerStorageInterface, StorageError
from finance_tracker.validation import load_ledger


MONTH_LABELS = [
    "jan", "feb", "mar", "apr", "may", "jun",
    "jul", "aug", "sep", "oct", "nov", "dec",
]

SETTINGS_ENV_VARS = [
    "LEDGER_IMPLICIT_CATEGORY",
    "LEDGER_NAME_SEPARATOR",
    "LEDGER_GROUPED_VALUE_POLICY",
    "APP_ENVIRONMENT",
    "DEBUG_MODE",
    "AUDIT_ENABLED",
]


def _grouped_months(inputs: dict) -> list[dict]:
    """Twelve grouped entries; months not in `inputs` are zero."""
    months = []
    for label in MONTH_LABELS:
        head_count, salary = inputs.get(label, (0, 0))
        months.append({
            "month": label,
            "value": head_count * salary,
            "head_count": head_count,
            "salary": salary,
        })
    return months


def _ungrouped_months(values: dict) -> list[dict]:
    """Twelve ungrouped entries; months not in `values` are zero."""
    return [{"month": label, "value": values.get(label, 0)} for label in MONTH_LABELS]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings."""
    for var in SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def grouped_months():
    return _grouped_months


@pytest.fixture
def ungrouped_months():
    return _ungrouped_months


@pytest.fixture
def finance_payload() -> dict:
    """The form's sample data, padded to twelve months."""
    return {
        "status": "draft",
        "fields": [
            {
                "fieldKey": "Directors",
                "category": "headcount",
                "grouped": True,
                "status": "draft",
                "months": _grouped_months({
                    "jan": (10, 20000),
                    "feb": (12, 21000),
                    "mar": (10, 24000),
                }),
            },
            {
                "fieldKey": "rent_expense",
                "grouped": False,
                "status": "draft",
                "months": _ungrouped_months({"jan": 15000, "feb": 15000, "mar": 16000}),
            },
            {
                "fieldKey": "office_supplies",
                "grouped": False,
                "status": "draft",
                "months": _ungrouped_months({"jan": 2500, "feb": 3200, "mar": 2800}),
            },
        ],
    }


@pytest.fixture
def ledger(finance_payload) -> Ledger:
    return load_ledger(finance_payload)


@pytest.fixture
def scenario_ledger() -> Ledger:
    """One grouped and one ungrouped field."""
    return load_ledger({
        "status": "draft",
        "fields": [
            {
                "fieldKey": "Directors",
                "category": "headcount",
                "grouped": True,
                "months": _grouped_months({"jan": (10, 20000)}),
            },
            {
                "fieldKey": "rent_expense",
                "grouped": False,
                "months": _ungrouped_months({"jan": 15000}),
            },
        ],
    })


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Keeps saved payloads in a dict."""

    def __init__(self):
        self.saved: dict[str, dict] = {}
        self.save_count = 0

    async def save_ledger(self, ledger: Ledger) -> bool:
        self.save_count += 1
        self.saved["current"] = ledger.to_payload()
        return True

    async def load_ledger(self, ledger_id: str) -> Optional[dict]:
        return self.saved.get(ledger_id)


class FailingLedgerStorage(LedgerStorageInterface):
    """Backend that is always down."""

    async def save_ledger(self, ledger: Ledger) -> bool:
        raise StorageError("backend unavailable")

    async def load_ledger(self, ledger_id: str) -> Optional[dict]:
        raise StorageError("backend unavailable")


@pytest.fixture
def memory_storage() -> InMemoryLedgerStorage:
    return InMemoryLedgerStorage()


@pytest.fixture
def failing_storage() -> FailingLedgerStorage:
    return FailingLedgerStorage()
