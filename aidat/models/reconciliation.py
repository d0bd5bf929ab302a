"""
Derived Reconciliation Models

Everything in this module is DERIVED from a snapshot of residents,
obligations and payments. None of it is persisted; every call of the
engine builds fresh instances.

Data quality problems travel alongside the numbers as ValidationIssue
records collected in ReconciliationDiagnostics, so callers can warn the
user without the engine ever raising on bad data.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from aidat.models.ledger import CanonicalPeriod, Payment


ZERO = Decimal("0")


# =============================================================================
# DIAGNOSTICS
# =============================================================================

class IssueType(str, Enum):
    """Kinds of data quality problems the engine tolerates."""
    UNPARSABLE_PERIOD = "unparsable_period"
    INVALID_DATE = "invalid_date"
    INVALID_AMOUNT = "invalid_amount"
    AMBIGUOUS_PAYMENT = "ambiguous_payment"


class ValidationIssue(BaseModel):
    """A single data quality issue attached to one record."""

    issue_type: IssueType
    record_type: str = Field(
        ...,
        pattern="^(obligation|payment)$",
        description="Kind of record the issue is about"
    )
    record_id: int
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="warning",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    value: Optional[str] = Field(
        default=None,
        description="The offending raw value, as text"
    )
    related_ids: list[int] = Field(
        default_factory=list,
        description="Other records involved (e.g., residents a payment matched)"
    )

    @property
    def key(self) -> tuple[str, str, int]:
        return (self.issue_type.value, self.record_type, self.record_id)


class ReconciliationDiagnostics(BaseModel):
    """
    Issues found while reconciling.

    Issues are unique per (issue type, record); merging two diagnostics
    never counts the same record twice.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    _keys: set[tuple[str, str, int]] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._keys = {issue.key for issue in self.issues}

    def _count(self, issue_type: IssueType) -> int:
        return sum(1 for issue in self.issues if issue.issue_type == issue_type)

    @property
    def unparsable_periods(self) -> int:
        return self._count(IssueType.UNPARSABLE_PERIOD)

    @property
    def invalid_dates(self) -> int:
        return self._count(IssueType.INVALID_DATE)

    @property
    def invalid_amounts(self) -> int:
        return self._count(IssueType.INVALID_AMOUNT)

    @property
    def ambiguous_payments(self) -> int:
        return self._count(IssueType.AMBIGUOUS_PAYMENT)

    @property
    def skipped_records(self) -> int:
        """Distinct records excluded from at least one calculation."""
        return len({
            (issue.record_type, issue.record_id)
            for issue in self.issues
            if issue.issue_type != IssueType.AMBIGUOUS_PAYMENT
        })

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)

    def add(self, issue: ValidationIssue) -> bool:
        """Add an issue unless the same record already has one of its type."""
        if issue.key in self._keys:
            return False
        self._keys.add(issue.key)
        self.issues.append(issue)
        return True

    def merged(self, *others: "ReconciliationDiagnostics") -> "ReconciliationDiagnostics":
        """Return a new diagnostics object holding the issues of all inputs."""
        result = ReconciliationDiagnostics(issues=list(self.issues))
        for other in others:
            for issue in other.issues:
                result.add(issue)
        return result

    def counts(self) -> dict[str, int]:
        return {
            "unparsable_periods": self.unparsable_periods,
            "invalid_dates": self.invalid_dates,
            "invalid_amounts": self.invalid_amounts,
            "ambiguous_payments": self.ambiguous_payments,
            "skipped_records": self.skipped_records,
        }


# =============================================================================
# PER-DUE VIEW
# =============================================================================

class RowStatus(str, Enum):
    """Derived payment status of a single due."""
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"
    UNRECONCILABLE = "unreconcilable"  # Period label could not be parsed


class ReconciliationRow(BaseModel):
    """One due with the payments attributed to it."""

    obligation_id: int
    resident_id: int
    period: str = Field(
        default="",
        description="Period label as written on the due"
    )
    canonical_period: Optional[CanonicalPeriod] = None
    due_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    payments: list[Payment] = Field(
        default_factory=list,
        description="Payments that contributed to paid_amount"
    )

    @property
    def outstanding(self) -> Decimal:
        """Due minus paid; negative when overpaid."""
        return self.due_amount - self.paid_amount

    @property
    def status(self) -> RowStatus:
        if self.canonical_period is None:
            return RowStatus.UNRECONCILABLE
        if self.paid_amount >= self.due_amount:
            return RowStatus.PAID
        if self.paid_amount > ZERO:
            return RowStatus.PARTIAL
        return RowStatus.UNPAID


class PeriodReconciliation(BaseModel):
    """Per-due breakdown for one resident."""

    resident_id: int
    rows: list[ReconciliationRow] = Field(default_factory=list)
    diagnostics: ReconciliationDiagnostics = Field(
        default_factory=ReconciliationDiagnostics
    )

    @property
    def total_due(self) -> Decimal:
        return sum((row.due_amount for row in self.rows), ZERO)

    @property
    def total_paid(self) -> Decimal:
        """Sum of period-matched payments only."""
        return sum((row.paid_amount for row in self.rows), ZERO)


# =============================================================================
# PER-RESIDENT VIEW
# =============================================================================

class BalanceResult(BaseModel):
    """Coarse resident-level view: every identity match counts as paid."""

    resident_id: int
    total_due: Decimal = ZERO
    total_paid: Decimal = ZERO
    remaining: Decimal = ZERO
    matched_payments: list[Payment] = Field(default_factory=list)
    diagnostics: ReconciliationDiagnostics = Field(
        default_factory=ReconciliationDiagnostics
    )

    @property
    def has_debt(self) -> bool:
        return self.remaining > ZERO


class SummaryRow(BaseModel):
    """One line of the cross-resident balance report."""

    resident_id: int
    name: str
    apartment: str
    total_due: Decimal = ZERO
    total_paid: Decimal = ZERO
    remaining_balance: Decimal = ZERO

    @property
    def has_debt(self) -> bool:
        return self.remaining_balance > ZERO


class BalanceSummary(BaseModel):
    """
    Cross-resident report ordered by apartment code.

    ambiguous_payments maps a payment id to every resident it matched when
    it matched more than one.
    """

    rows: list[SummaryRow] = Field(default_factory=list)
    diagnostics: ReconciliationDiagnostics = Field(
        default_factory=ReconciliationDiagnostics
    )
    ambiguous_payments: dict[int, list[int]] = Field(default_factory=dict)

    @property
    def total_due(self) -> Decimal:
        return sum((row.total_due for row in self.rows), ZERO)

    @property
    def total_paid(self) -> Decimal:
        return sum((row.total_paid for row in self.rows), ZERO)

    @property
    def total_remaining(self) -> Decimal:
        return sum((row.remaining_balance for row in self.rows), ZERO)

    def debtors(self) -> list[SummaryRow]:
        """Rows with a positive remaining balance, in report order."""
        return [row for row in self.rows if row.has_debt]
