"""
Core Data Models for the Finance Tracker Ledger

These models define the shape of the monthly financial ledger:
1. Ledger (a.k.a. FinanceData) is the aggregate root
2. LedgerField is one line item, addressed by its unique key
3. MonthEntry holds one calendar month of data for one field

DESIGN DECISION: The models are data containers.
MonthEntry and LedgerField enforce type-level constraints (non-negative
amounts, known month labels, known statuses). The cross-record invariants
(twelve ordered months, unique keys, grouped value == head_count * salary)
are checked by the LedgerValidator whenever a Ledger is built, and
maintained by the update engine afterwards.

Assignments are validated too, so a status set from outside is always
a LedgerStatus.

Money is Decimal so that category, month and annual sums are exact.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Month(str, Enum):
    """
    The twelve calendar month labels.

    Declaration order is calendar order; every field carries exactly
    one entry per member, in this order.
    """
    JAN = "jan"
    FEB = "feb"
    MAR = "mar"
    APR = "apr"
    MAY = "may"
    JUN = "jun"
    JUL = "jul"
    AUG = "aug"
    SEP = "sep"
    OCT = "oct"
    NOV = "nov"
    DEC = "dec"

    @classmethod
    def parse(cls, label: Union["Month", str]) -> "Month":
        """Resolve a label case-insensitively. Raises ValueError if unknown."""
        if isinstance(label, cls):
            return label
        if not isinstance(label, str):
            raise ValueError(f"Month label must be a string, got {type(label).__name__}")
        return cls(label.strip().lower())


MONTHS: tuple[Month, ...] = tuple(Month)


class LedgerStatus(str, Enum):
    """
    Ledger lifecycle status.

    CRITICAL: Only DRAFT ledgers may be mutated.
    SUBMITTED is terminal as far as this core is concerned.
    """
    DRAFT = "draft"
    SUBMITTED = "submitted"


class EditAttribute(str, Enum):
    """Month entry attributes that an edit may target."""
    VALUE = "value"
    HEAD_COUNT = "head_count"
    SALARY = "salary"

    @classmethod
    def parse(cls, name: Union["EditAttribute", str]) -> "EditAttribute":
        """Resolve an attribute name, accepting the camelCase wire spelling."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise ValueError(f"Attribute name must be a string, got {type(name).__name__}")
        normalized = name.strip()
        if normalized == "headCount":
            normalized = "head_count"
        return cls(normalized)


# Which attributes each kind of field accepts
GROUPED_ATTRIBUTES = frozenset({EditAttribute.HEAD_COUNT, EditAttribute.SALARY})
UNGROUPED_ATTRIBUTES = frozenset({EditAttribute.VALUE})


def _wire_number(amount: Optional[Decimal]) -> Union[int, float, None]:
    """Render a Decimal as a plain JSON number."""
    if amount is None:
        return None
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


# =============================================================================
# LEDGER MODELS
# =============================================================================

# Validation context flag for Ledger.parse_unchecked
SKIP_INVARIANTS = "skip_invariants"

class MonthEntry(BaseModel):
    """
    One calendar month of data for one field.

    For ungrouped fields `value` is entered directly.
    For grouped fields `value` is derived: head_count * salary.
    """
    model_config = ConfigDict(populate_by_name=True)

    month: Month = Field(
        ...,
        description="Calendar month label"
    )
    value: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Authoritative monthly amount"
    )
    head_count: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("head_count", "headCount"),
        description="Number of heads (grouped fields only)"
    )
    salary: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Per-head compensation (grouped fields only)"
    )

    @field_validator("month", mode="before")
    @classmethod
    def normalize_month(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_payload(self) -> dict:
        """Convert to the wire shape. Grouped attributes only appear when set."""
        payload = {
            "month": self.month.value,
            "value": _wire_number(self.value),
        }
        if self.head_count is not None:
            payload["head_count"] = self.head_count
        if self.salary is not None:
            payload["salary"] = _wire_number(self.salary)
        return payload


class LedgerField(BaseModel):
    """
    One ledger line item.

    The key is the stable identity used to address edits,
    and the source of the human-readable display name.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        validate_assignment=True,
    )

    key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("fieldKey", "key"),
        description="Unique field identifier"
    )
    category: Optional[str] = Field(
        default=None,
        description="Grouping label; absent means the implicit catch-all"
    )
    grouped: bool = Field(
        default=False,
        description="Grouped fields derive value from head_count * salary"
    )
    status: LedgerStatus = Field(
        default=LedgerStatus.DRAFT,
        description="Mirrors the ledger status"
    )
    months: list[MonthEntry] = Field(
        default_factory=list,
        description="Exactly twelve entries in calendar order"
    )

    @field_validator("category")
    @classmethod
    def blank_category_is_absent(cls, v: Optional[str]) -> Optional[str]:
        """An empty label groups like a missing one."""
        return v or None

    def get_month(self, month: Month) -> Optional[MonthEntry]:
        """Find the entry for a month, or None."""
        for entry in self.months:
            if entry.month == month:
                return entry
        return None

    def to_payload(self) -> dict:
        payload = {
            "fieldKey": self.key,
            "grouped": self.grouped,
            "status": self.status.value,
            "months": [entry.to_payload() for entry in self.months],
        }
        if self.category is not None:
            payload["category"] = self.category
        return payload


class Ledger(BaseModel):
    """
    The aggregate root of the finance data.

    `status` is the single source of truth for editability.
    `fields` order is the default display order.

    Building a Ledger runs the full LedgerValidator; a ledger that breaks
    a structural invariant raises MalformedLedgerError.
    """

    model_config = ConfigDict(validate_assignment=True)

    status: LedgerStatus = Field(
        default=LedgerStatus.DRAFT,
        description="Ledger lifecycle status"
    )
    fields: list[LedgerField] = Field(
        default_factory=list,
        description="Line items in display order; keys unique"
    )

    @model_validator(mode="after")
    def check_invariants(self, info: ValidationInfo) -> "Ledger":
        if info.context and info.context.get(SKIP_INVARIANTS):
            return self
        # Imported here: the validator package depends on this module
        from finance_tracker.validation.loader import enforce_invariants
        enforce_invariants(self)
        return self

    @classmethod
    def parse_unchecked(cls, data: Any) -> "Ledger":
        """
        Parse a payload without the invariant checks.

        Only for callers that run LedgerValidator themselves.
        """
        return cls.model_validate(data, context={SKIP_INVARIANTS: True})

    def get_field(self, key: str) -> Optional[LedgerField]:
        """Find a field by key, or None."""
        for field in self.fields:
            if field.key == key:
                return field
        return None

    @property
    def field_keys(self) -> list[str]:
        return [field.key for field in self.fields]

    def to_payload(self) -> dict:
        """
        Convert to the JSON-compatible wire shape.

        This is what the external save/transport collaborator receives.
        """
        return {
            "status": self.status.value,
            "fields": [field.to_payload() for field in self.fields],
        }


# The form front end calls the aggregate root FinanceData
FinanceData = Ledger


def new_field(
    key: str,
    grouped: bool = False,
    category: Optional[str] = None,
    status: LedgerStatus = LedgerStatus.DRAFT,
) -> LedgerField:
    """
    Build a fully materialized field with explicit zero entries.

    Grouped fields start with head_count=0 and salary=0 on every month,
    so value == head_count * salary holds from the start.
    """
    if grouped:
        months = [
            MonthEntry(month=month, value=Decimal("0"), head_count=0, salary=Decimal("0"))
            for month in MONTHS
        ]
    else:
        months = [MonthEntry(month=month, value=Decimal("0")) for month in MONTHS]

    return LedgerField(
        key=key,
        category=category,
        grouped=grouped,
        status=status,
        months=months,
    )


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single invariant violation found while loading a ledger."""

    location: str = Field(
        ...,
        description="Where the issue is, e.g. 'fields[Directors].months[jan]'"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing_month', 'duplicate_key', 'value_mismatch')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage ledger validation.

    Stage 1: Structural checks (month completeness, key uniqueness,
             grouped/ungrouped attribute sets)
    Stage 2: Semantic checks (grouped value == head_count * salary)
    """

    structure_valid: bool = Field(
        ...,
        description="Did structural validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All issues found"
    )
    recomputed: list[str] = Field(
        default_factory=list,
        description="Locations whose stored value was recomputed by policy"
    )

    @property
    def is_valid(self) -> bool:
        return self.structure_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# QUERY MODELS
# =============================================================================

class LedgerSummary(BaseModel):
    """
    Totals for a ledger or a filtered view of it.

    Always computed on demand, never stored on the ledger.
    """

    field_count: int = Field(ge=0)
    monthly_totals: dict[Month, Decimal] = Field(default_factory=dict)
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    annual_total: Decimal = Decimal("0")
    filtered: bool = Field(
        default=False,
        description="Whether the totals cover a filtered subset"
    )
    query: Optional[str] = None
