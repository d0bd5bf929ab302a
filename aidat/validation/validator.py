"""
Ledger Record Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - COERCION:
- Amount is a number (or a numeric string)
- Payment date is a strict ISO calendar date
- Period label yields a canonical (year, month)

STAGE 2 - SEMANTIC:
- Amount is finite and not negative

IMPORTANT: Validation NEVER raises on bad data and NEVER silently fixes it.
A record that fails is excluded from the affected calculation and reported
as a ValidationIssue, so the caller can warn the user.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional

from aidat.config import get_settings
from aidat.matching.period import extract_period
from aidat.matching.temporal import parse_payment_date
from aidat.models.ledger import CanonicalPeriod, Obligation, Payment, RawAmount
from aidat.models.reconciliation import (
    IssueType,
    ReconciliationDiagnostics,
    ValidationIssue,
)


def _as_text(value: RawAmount) -> Optional[str]:
    return None if value is None else str(value)


def _parse_decimal(value: RawAmount) -> Optional[Decimal]:
    """Stage 1: turn a raw amount into a Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip().replace(" ", "")
        if not text:
            return None
        # "1.250,50" and "200,5" are how amounts get typed in Turkey
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            return Decimal(text)
        except InvalidOperation:
            return None
    return None


def coerce_amount(value: RawAmount) -> Optional[Decimal]:
    """
    Coerce a raw amount to a non-negative, finite Decimal.

    Returns None when the amount is missing, non-numeric, NaN/infinite or
    negative.

    Examples:
        >>> coerce_amount("200")
        Decimal('200')
        >>> coerce_amount("1.250,50")
        Decimal('1250.50')
        >>> coerce_amount(-5) is None
        True
    """
    amount = _parse_decimal(value)
    if amount is None or not amount.is_finite():
        return None
    if amount < 0:
        return None
    return amount


class ObligationCheck(NamedTuple):
    amount: Optional[Decimal]
    period: Optional[CanonicalPeriod]
    issues: list[ValidationIssue]


class LedgerValidator:
    """
    Validates obligations and payments on their way into a calculation.

    Each check returns the coerced value (or None) together with the issues
    found. Nothing is cached between calls.
    """

    def check_obligation_amount(
        self,
        obligation: Obligation,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        amount = coerce_amount(obligation.amount)
        if amount is not None:
            return amount, []
        return None, [ValidationIssue(
            issue_type=IssueType.INVALID_AMOUNT,
            record_type="obligation",
            record_id=obligation.id,
            value=_as_text(obligation.amount),
            message=(
                f"Due {obligation.id} has an invalid amount "
                f"({obligation.amount!r}) and was left out of the totals"
            ),
        )]

    def check_obligation_period(
        self,
        obligation: Obligation,
    ) -> tuple[Optional[CanonicalPeriod], list[ValidationIssue]]:
        period = extract_period(obligation.period)
        if period is not None:
            return period, []
        return None, [ValidationIssue(
            issue_type=IssueType.UNPARSABLE_PERIOD,
            record_type="obligation",
            record_id=obligation.id,
            value=obligation.period,
            message=(
                f"Due {obligation.id} has a period label without a year and "
                f"month ({obligation.period!r}); no payments can be matched to it"
            ),
        )]

    def check_obligation(self, obligation: Obligation) -> ObligationCheck:
        """Run both obligation checks."""
        amount, amount_issues = self.check_obligation_amount(obligation)
        period, period_issues = self.check_obligation_period(obligation)
        return ObligationCheck(amount, period, amount_issues + period_issues)

    def check_payment_amount(
        self,
        payment: Payment,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        amount = coerce_amount(payment.amount)
        if amount is not None:
            return amount, []
        return None, [ValidationIssue(
            issue_type=IssueType.INVALID_AMOUNT,
            record_type="payment",
            record_id=payment.id,
            value=_as_text(payment.amount),
            message=(
                f"Payment {payment.id} has an invalid amount "
                f"({payment.amount!r}) and was left out of the totals"
            ),
        )]

    def check_payment_date(
        self,
        payment: Payment,
    ) -> tuple[Optional[date], list[ValidationIssue]]:
        paid_on = parse_payment_date(payment.date)
        if paid_on is not None:
            return paid_on, []
        return None, [ValidationIssue(
            issue_type=IssueType.INVALID_DATE,
            record_type="payment",
            record_id=payment.id,
            value=payment.date,
            message=(
                f"Payment {payment.id} has a date that is not YYYY-MM-DD "
                f"({payment.date!r}); it was skipped for period matching"
            ),
        )]

    def get_user_friendly_summary(
        self,
        diagnostics: ReconciliationDiagnostics,
    ) -> str:
        """
        Generate a user-friendly summary of the issues of a run.

        This is what we show to the treasurer next to the report.
        """
        if not diagnostics.has_issues:
            return "✅ All records were reconciled."

        symbol = get_settings().reconciliation.currency_symbol
        lines = ["⚠️ Some records need attention:"]

        headings = {
            IssueType.UNPARSABLE_PERIOD: "Dues with an unreadable period",
            IssueType.INVALID_DATE: "Payments with an invalid date",
            IssueType.INVALID_AMOUNT: f"Records with an invalid {symbol} amount",
            IssueType.AMBIGUOUS_PAYMENT: "Payments matching more than one resident",
        }
        for issue_type, heading in headings.items():
            issues = [i for i in diagnostics.issues if i.issue_type == issue_type]
            if not issues:
                continue
            lines.append("")
            lines.append(f"{heading} ({len(issues)}):")
            for issue in issues:
                lines.append(f"   • {issue.message}")

        lines.append("")
        lines.append("Totals are best-effort; please review the records above.")
        return "\n".join(lines)
