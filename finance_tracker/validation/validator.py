"""
Two-Stage Ledger Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - STRUCTURAL VALIDATION:
- Every field has exactly twelve months, one per label, in calendar order
- Field keys are unique
- Grouped fields carry head_count and salary on every month
- Ungrouped fields carry neither

STAGE 2 - SEMANTIC VALIDATION:
- Grouped entries satisfy value == head_count * salary

Stage 2 only runs if stage 1 passes; a value check on a ledger with
missing months or attributes would only produce noise.

IMPORTANT: The validator never changes the ledger. What happens to a
grouped value that disagrees with its inputs is decided by the configured
policy: 'reject' reports an error, 'recompute' reports a warning and the
loader overwrites the value.
"""

from collections import Counter
from typing import Optional

from finance_tracker.config import get_settings
from finance_tracker.engine.update import grouped_total
from finance_tracker.models.ledger import (
    MONTHS,
    Ledger,
    LedgerField,
    ValidationIssue,
    ValidationResult,
)


def _field_location(field: LedgerField) -> str:
    return f"fields[{field.key}]"


class LedgerValidator:
    """
    Validates a parsed ledger against the structural and semantic invariants.
    """

    def __init__(self, grouped_value_policy: Optional[str] = None):
        """
        Initialize validator.

        Args:
            grouped_value_policy: 'reject' or 'recompute'.
                                  If None, the configured policy is used.
        """
        policy = grouped_value_policy or get_settings().ledger.grouped_value_policy
        if policy not in ("reject", "recompute"):
            raise ValueError(f"Unknown grouped value policy: {policy}")
        self._policy = policy

    @property
    def policy(self) -> str:
        return self._policy

    def _validate_months(self, field: LedgerField) -> list[ValidationIssue]:
        """Month completeness: one entry per label, calendar order."""
        issues = []
        location = _field_location(field)
        labels = [entry.month for entry in field.months]

        if labels == list(MONTHS):
            return issues

        counts = Counter(labels)
        for month in MONTHS:
            if counts[month] == 0:
                issues.append(ValidationIssue(
                    location=f"{location}.months[{month.value}]",
                    issue_type="missing_month",
                    message=f"Field '{field.key}' has no entry for {month.value}",
                    severity="error",
                ))
            elif counts[month] > 1:
                issues.append(ValidationIssue(
                    location=f"{location}.months[{month.value}]",
                    issue_type="duplicate_month",
                    message=(
                        f"Field '{field.key}' has {counts[month]} entries "
                        f"for {month.value}"
                    ),
                    severity="error",
                ))

        # Complete and unique, but not in calendar order
        if not issues:
            issues.append(ValidationIssue(
                location=f"{location}.months",
                issue_type="month_order",
                message=f"Field '{field.key}' months are not in calendar order",
                severity="error",
            ))

        return issues

    def _validate_attributes(self, field: LedgerField) -> list[ValidationIssue]:
        """Grouped fields need head_count and salary; ungrouped fields must not have them."""
        issues = []
        location = _field_location(field)

        for entry in field.months:
            entry_location = f"{location}.months[{entry.month.value}]"
            if field.grouped:
                for name in ("head_count", "salary"):
                    if getattr(entry, name) is None:
                        issues.append(ValidationIssue(
                            location=entry_location,
                            issue_type="missing_attribute",
                            message=(
                                f"Grouped field '{field.key}' is missing {name} "
                                f"for {entry.month.value}"
                            ),
                            severity="error",
                        ))
            else:
                for name in ("head_count", "salary"):
                    if getattr(entry, name) is not None:
                        issues.append(ValidationIssue(
                            location=entry_location,
                            issue_type="unexpected_attribute",
                            message=(
                                f"Ungrouped field '{field.key}' has {name} "
                                f"for {entry.month.value}"
                            ),
                            severity="error",
                        ))

        return issues

    def _validate_structure(
        self,
        ledger: Ledger,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Structural validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        key_counts = Counter(field.key for field in ledger.fields)
        for key, count in key_counts.items():
            if count > 1:
                issues.append(ValidationIssue(
                    location=f"fields[{key}]",
                    issue_type="duplicate_key",
                    message=f"Field key '{key}' is used by {count} fields",
                    severity="error",
                ))

        for field in ledger.fields:
            issues.extend(self._validate_months(field))
            issues.extend(self._validate_attributes(field))

            if field.status != ledger.status:
                issues.append(ValidationIssue(
                    location=_field_location(field),
                    issue_type="status_mismatch",
                    message=(
                        f"Field '{field.key}' is {field.status.value} but the "
                        f"ledger is {ledger.status.value}; the ledger status applies"
                    ),
                    severity="warning",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_semantic(
        self,
        ledger: Ledger,
    ) -> tuple[bool, list[ValidationIssue], list[str]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues, locations_to_recompute)
        """
        issues = []
        recompute = []
        severity = "error" if self._policy == "reject" else "warning"

        for field in ledger.fields:
            if not field.grouped:
                continue
            for entry in field.months:
                expected = grouped_total(entry.head_count, entry.salary)
                if entry.value == expected:
                    continue

                location = f"{_field_location(field)}.months[{entry.month.value}]"
                issues.append(ValidationIssue(
                    location=location,
                    issue_type="value_mismatch",
                    message=(
                        f"Grouped field '{field.key}' {entry.month.value} value "
                        f"{entry.value} != head_count {entry.head_count} * "
                        f"salary {entry.salary} ({expected})"
                    ),
                    severity=severity,
                ))
                if self._policy == "recompute":
                    recompute.append(location)

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues, recompute

    def validate(self, ledger: Ledger) -> ValidationResult:
        """
        Run the full two-stage validation pipeline.

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        structure_valid, structure_issues = self._validate_structure(ledger)
        all_issues.extend(structure_issues)

        semantic_valid = False
        recomputed = []
        if structure_valid:
            semantic_valid, semantic_issues, recomputed = self._validate_semantic(ledger)
            all_issues.extend(semantic_issues)

        return ValidationResult(
            structure_valid=structure_valid,
            semantic_valid=semantic_valid,
            issues=all_issues,
            recomputed=recomputed,
        )
