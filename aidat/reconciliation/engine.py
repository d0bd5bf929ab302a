"""
Reconciliation Engine

Attributes payments to dues. Nothing links them except text:
- WHO paid: the payment description mentions the resident's name or
  apartment number (identity matching)
- FOR WHICH PERIOD: the payment date falls in the due's month (temporal
  matching against the period extracted from the due's label)

DESIGN DECISION: Every call is a fold over the snapshot it receives.
Payments are normalized once per call, dues are checked once per call,
and fresh result objects are returned. No state survives between calls
and inputs are never mutated.

Data quality problems never raise. They exclude the affected record from
the affected sum and are reported in the result's diagnostics. Only
programmer errors (a missing resident or collection) raise
ReconciliationInputError.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, NamedTuple, Optional, TypeVar

from aidat.audit import AuditLogger
from aidat.config import get_settings
from aidat.matching.identity import (
    IdentityMatcher,
    ResidentIdentity,
    get_identity_matcher,
)
from aidat.matching.temporal import matches_period
from aidat.matching.text import normalize_text
from aidat.models.audit import AuditEventType
from aidat.models.ledger import Obligation, Payment, Resident
from aidat.models.reconciliation import (
    ZERO,
    BalanceResult,
    PeriodReconciliation,
    ReconciliationDiagnostics,
    ReconciliationRow,
    ValidationIssue,
)
from aidat.validation import LedgerValidator


RecordT = TypeVar("RecordT", Resident, Obligation, Payment)


class ReconciliationInputError(Exception):
    """A required input is missing or of the wrong type."""
    pass


class PreparedPayment(NamedTuple):
    """A payment with its description normalized and fields coerced."""

    payment: Payment
    description: str
    amount: Optional[Decimal]
    paid_on: Optional[date]
    amount_issues: list[ValidationIssue]
    date_issues: list[ValidationIssue]


def require_resident(resident: Any) -> Resident:
    if resident is None:
        raise ReconciliationInputError("resident is required")
    if not isinstance(resident, Resident):
        raise ReconciliationInputError(
            f"resident must be a Resident, got {type(resident).__name__}"
        )
    return resident


def require_records(records: Any, model: type[RecordT], name: str) -> list[RecordT]:
    """
    Materialize a required collection and check its element type.

    Raises:
        ReconciliationInputError: If the collection is missing, is not a
            collection, or holds something other than `model` instances
    """
    if records is None:
        raise ReconciliationInputError(f"{name} is required")
    if isinstance(records, (str, bytes)) or not isinstance(records, Iterable):
        raise ReconciliationInputError(f"{name} must be a collection")
    result = list(records)
    for record in result:
        if not isinstance(record, model):
            raise ReconciliationInputError(
                f"{name} must contain {model.__name__} records, "
                f"got {type(record).__name__}"
            )
    return result


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


class ReconciliationEngine:
    """
    Computes per-due and per-resident reconciliation.

    GUARANTEES:
    - A due with an unparsable period still counts toward the total owed,
      but no payment is ever attributed to it
    - A payment counts for a due only on identity AND exact month match
    - Remaining balances are never clamped; overpayment is negative
    - One payment may count for several residents (reported as ambiguity
      by the summary)
    """

    def __init__(
        self,
        identity_matcher: Optional[IdentityMatcher] = None,
        validator: Optional[LedgerValidator] = None,
    ):
        """
        Initialize engine.

        Args:
            identity_matcher: Identity strategy. Defaults to the one named
                             by AIDAT_IDENTITY_STRATEGY.
            validator: Record validator. A fresh LedgerValidator if omitted.
        """
        if identity_matcher is None:
            strategy = get_settings().reconciliation.identity_strategy
            identity_matcher = get_identity_matcher(strategy)
        self._matcher = identity_matcher
        self._validator = validator or LedgerValidator()

    @property
    def identity_matcher(self) -> IdentityMatcher:
        return self._matcher

    # -------------------------------------------------------------------------
    # Snapshot preparation
    # -------------------------------------------------------------------------

    def prepare_payments(self, payments: Iterable[Payment]) -> list[PreparedPayment]:
        """Normalize and coerce every payment once."""
        prepared = []
        for payment in payments:
            amount, amount_issues = self._validator.check_payment_amount(payment)
            paid_on, date_issues = self._validator.check_payment_date(payment)
            prepared.append(PreparedPayment(
                payment=payment,
                description=normalize_text(payment.description),
                amount=amount,
                paid_on=paid_on,
                amount_issues=amount_issues,
                date_issues=date_issues,
            ))
        return prepared

    def identity_matches(
        self,
        identity: ResidentIdentity,
        prepared: Iterable[PreparedPayment],
    ) -> list[PreparedPayment]:
        """Payments whose description refers to the resident."""
        if identity.is_empty:
            return []
        return [p for p in prepared if self._matcher.matches(identity, p.description)]

    def find_claimants(
        self,
        payment: Payment,
        residents: Iterable[Resident],
    ) -> list[int]:
        """
        IDs of every resident the payment's description refers to.

        More than one ID means the payment is ambiguous; it counts for all
        of them.
        """
        description = normalize_text(payment.description)
        return [
            resident.id
            for resident in residents
            if self._matcher.matches(ResidentIdentity.from_resident(resident), description)
        ]

    # -------------------------------------------------------------------------
    # Folds
    # -------------------------------------------------------------------------

    def fold_period_rows(
        self,
        resident: Resident,
        obligations: list[Obligation],
        prepared: list[PreparedPayment],
        diagnostics: ReconciliationDiagnostics,
    ) -> list[ReconciliationRow]:
        candidates = self.identity_matches(
            ResidentIdentity.from_resident(resident), prepared
        )
        for candidate in candidates:
            for issue in candidate.amount_issues + candidate.date_issues:
                diagnostics.add(issue)

        rows = []
        for obligation in obligations:
            if obligation.resident_id != resident.id:
                continue
            check = self._validator.check_obligation(obligation)
            for issue in check.issues:
                diagnostics.add(issue)

            matched: list[PreparedPayment] = []
            if check.period is not None:
                matched = [
                    c for c in candidates
                    if c.amount is not None and matches_period(c.paid_on, check.period)
                ]

            rows.append(ReconciliationRow(
                obligation_id=obligation.id,
                resident_id=resident.id,
                period=obligation.period or "",
                canonical_period=check.period,
                due_amount=check.amount if check.amount is not None else ZERO,
                paid_amount=_sum(c.amount for c in matched),
                payments=[c.payment for c in matched],
            ))
        return rows

    def balance_positions(
        self,
        resident: Resident,
        prepared: list[PreparedPayment],
        diagnostics: ReconciliationDiagnostics,
    ) -> list[int]:
        """
        Positions in `prepared` of the payments counted toward the resident.

        Positions, not payment IDs: two ledger entries sharing an ID are
        still two payments.
        """
        identity = ResidentIdentity.from_resident(resident)
        if identity.is_empty:
            return []

        positions = []
        for position, candidate in enumerate(prepared):
            if not self._matcher.matches(identity, candidate.description):
                continue
            for issue in candidate.amount_issues:
                diagnostics.add(issue)
            if candidate.amount is not None:
                positions.append(position)
        return positions

    def fold_balance(
        self,
        resident: Resident,
        obligations: list[Obligation],
        prepared: list[PreparedPayment],
        diagnostics: ReconciliationDiagnostics,
        positions: Optional[list[int]] = None,
    ) -> BalanceResult:
        """
        Resident-level totals over a prepared snapshot.

        `positions` are the resident's payments as returned by
        balance_positions; they are computed here when omitted.
        """
        total_due = ZERO
        for obligation in obligations:
            if obligation.resident_id != resident.id:
                continue
            check = self._validator.check_obligation(obligation)
            for issue in check.issues:
                diagnostics.add(issue)
            if check.amount is not None:
                total_due += check.amount

        if positions is None:
            positions = self.balance_positions(resident, prepared, diagnostics)
        paid = [prepared[position] for position in positions]

        total_paid = _sum(c.amount for c in paid)
        return BalanceResult(
            resident_id=resident.id,
            total_due=total_due,
            total_paid=total_paid,
            remaining=total_due - total_paid,
            matched_payments=[c.payment for c in paid],
            diagnostics=diagnostics,
        )

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def reconcile_period(
        self,
        resident: Resident,
        obligations: Iterable[Obligation],
        payments: Iterable[Payment],
        audit_logger: Optional[AuditLogger] = None,
    ) -> PeriodReconciliation:
        """
        Per-due breakdown for one resident.

        Each of the resident's dues becomes a ReconciliationRow holding the
        payments that match the resident AND fall in the due's month.
        Dues of other residents in `obligations` are ignored.
        """
        resident = require_resident(resident)
        obligation_list = require_records(obligations, Obligation, "obligations")
        payment_list = require_records(payments, Payment, "payments")

        diagnostics = ReconciliationDiagnostics()
        rows = self.fold_period_rows(
            resident,
            obligation_list,
            self.prepare_payments(payment_list),
            diagnostics,
        )
        result = PeriodReconciliation(
            resident_id=resident.id,
            rows=rows,
            diagnostics=diagnostics,
        )

        audit = audit_logger or AuditLogger()
        audit.log_issues(diagnostics)
        audit.log_run_completed(
            AuditEventType.PERIOD_RECONCILIATION_COMPLETED,
            diagnostics,
            resident_id=resident.id,
            rows=len(rows),
            total_due=str(result.total_due),
            total_paid=str(result.total_paid),
        )
        return result

    def reconcile_balance(
        self,
        resident: Resident,
        obligations: Iterable[Obligation],
        payments: Iterable[Payment],
        audit_logger: Optional[AuditLogger] = None,
    ) -> BalanceResult:
        """
        Coarse resident-level view.

        total_due sums all of the resident's dues (parsable period or not);
        total_paid sums every payment that mentions the resident, whatever
        its date; remaining is their difference and may be negative.
        """
        resident = require_resident(resident)
        obligation_list = require_records(obligations, Obligation, "obligations")
        payment_list = require_records(payments, Payment, "payments")

        result = self.fold_balance(
            resident,
            obligation_list,
            self.prepare_payments(payment_list),
            ReconciliationDiagnostics(),
        )

        audit = audit_logger or AuditLogger()
        audit.log_issues(result.diagnostics)
        audit.log_run_completed(
            AuditEventType.BALANCE_RECONCILIATION_COMPLETED,
            result.diagnostics,
            resident_id=resident.id,
            total_due=str(result.total_due),
            total_paid=str(result.total_paid),
            remaining=str(result.remaining),
        )
        return result


def reconcile_period(
    resident: Resident,
    obligations: Iterable[Obligation],
    payments: Iterable[Payment],
) -> PeriodReconciliation:
    """Per-due breakdown using the configured default engine."""
    return ReconciliationEngine().reconcile_period(resident, obligations, payments)


def reconcile_balance(
    resident: Resident,
    obligations: Iterable[Obligation],
    payments: Iterable[Payment],
) -> BalanceResult:
    """Resident-level balance using the configured default engine."""
    return ReconciliationEngine().reconcile_balance(resident, obligations, payments)


def find_claimants(payment: Payment, residents: Iterable[Resident]) -> list[int]:
    """Resident IDs the payment refers to, using the default engine."""
    if payment is None or not isinstance(payment, Payment):
        raise ReconciliationInputError("payment must be a Payment")
    resident_list = require_records(residents, Resident, "residents")
    return ReconciliationEngine().find_claimants(payment, resident_list)
