"""
Tests for Aidat

Test strategy:
1. Unit tests for individual components (models, matchers, validator)
2. Flow tests for the engine and the summary on in-memory snapshots
3. No storage, no network: the engine only sees what the test passes in
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from aidat.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BalanceResult,
    BalanceSummary,
    CanonicalPeriod,
    IssueType,
    Obligation,
    ObligationStatus,
    Payment,
    ReconciliationDiagnostics,
    ReconciliationRow,
    Resident,
    RowStatus,
    SummaryRow,
    ValidationIssue,
)


def _issue(issue_type=IssueType.INVALID_AMOUNT, record_type="payment", record_id=1):
    return ValidationIssue(
        issue_type=issue_type,
        record_type=record_type,
        record_id=record_id,
        message="test issue",
    )


class TestLedgerModels:
    """Tests for the input records."""

    def test_resident_strips_whitespace(self):
        resident = Resident(id=1, name="  Ahmet Yılmaz  ", apartment=" A5 ")
        assert resident.name == "Ahmet Yılmaz"
        assert resident.apartment == "A5"

    def test_obligation_defaults(self):
        obligation = Obligation(id=1, resident_id=1, period="Temmuz 2024", amount=200)
        assert obligation.status == ObligationStatus.UNPAID
        assert obligation.status.value == "Ödenmedi"

    def test_obligation_keeps_raw_amount(self):
        """Malformed amounts are accepted here and reported later."""
        obligation = Obligation(id=1, resident_id=1, period="Temmuz 2024", amount="abc")
        assert obligation.amount == "abc"

    def test_records_are_frozen(self):
        payment = Payment(id=1, date="2024-07-10", description="x", amount=10)
        with pytest.raises(ValidationError):
            payment.amount = 20

    def test_payment_requires_id(self):
        with pytest.raises(ValidationError):
            Payment(date="2024-07-10", description="x", amount=10)

    def test_canonical_period_str(self):
        assert str(CanonicalPeriod(2024, 7)) == "2024-07"


class TestReconciliationRow:
    """Tests for derived row status."""

    def _row(self, due, paid, period=CanonicalPeriod(2024, 7)):
        return ReconciliationRow(
            obligation_id=1,
            resident_id=1,
            period="Temmuz 2024",
            canonical_period=period,
            due_amount=Decimal(due),
            paid_amount=Decimal(paid),
        )

    def test_paid(self):
        assert self._row("200", "200").status == RowStatus.PAID

    def test_overpaid_is_paid_with_negative_outstanding(self):
        row = self._row("200", "250")
        assert row.status == RowStatus.PAID
        assert row.outstanding == Decimal("-50")

    def test_partial(self):
        assert self._row("200", "50").status == RowStatus.PARTIAL

    def test_unpaid(self):
        assert self._row("200", "0").status == RowStatus.UNPAID

    def test_unreconcilable(self):
        assert self._row("200", "0", period=None).status == RowStatus.UNRECONCILABLE


class TestDiagnostics:
    """Tests for ReconciliationDiagnostics."""

    def test_add_deduplicates_per_record(self):
        diagnostics = ReconciliationDiagnostics()
        assert diagnostics.add(_issue()) is True
        assert diagnostics.add(_issue()) is False
        assert diagnostics.invalid_amounts == 1

    def test_add_knows_issues_passed_at_construction(self):
        diagnostics = ReconciliationDiagnostics(issues=[_issue(record_id=3)])
        assert diagnostics.add(_issue(record_id=3)) is False
        assert diagnostics.add(_issue(record_id=4)) is True
        assert [issue.record_id for issue in diagnostics.issues] == [3, 4]

    def test_add_many_records(self):
        diagnostics = ReconciliationDiagnostics()
        for _ in range(2):
            for record_id in range(5000):
                diagnostics.add(_issue(record_id=record_id))
        assert diagnostics.invalid_amounts == 5000

    def test_same_record_different_issue_types(self):
        diagnostics = ReconciliationDiagnostics()
        diagnostics.add(_issue(IssueType.INVALID_AMOUNT))
        diagnostics.add(_issue(IssueType.INVALID_DATE))
        assert diagnostics.invalid_amounts == 1
        assert diagnostics.invalid_dates == 1
        assert diagnostics.skipped_records == 1

    def test_ambiguity_is_not_a_skip(self):
        diagnostics = ReconciliationDiagnostics()
        diagnostics.add(_issue(IssueType.AMBIGUOUS_PAYMENT))
        assert diagnostics.ambiguous_payments == 1
        assert diagnostics.skipped_records == 0

    def test_merged(self):
        first = ReconciliationDiagnostics(issues=[_issue(record_id=1)])
        second = ReconciliationDiagnostics(issues=[_issue(record_id=1), _issue(record_id=2)])
        merged = first.merged(second)
        assert merged.invalid_amounts == 2
        assert len(first.issues) == 1

    def test_counts(self):
        diagnostics = ReconciliationDiagnostics(issues=[
            _issue(IssueType.UNPARSABLE_PERIOD, record_type="obligation"),
        ])
        assert diagnostics.counts() == {
            "unparsable_periods": 1,
            "invalid_dates": 0,
            "invalid_amounts": 0,
            "ambiguous_payments": 0,
            "skipped_records": 1,
        }

    def test_issue_record_type_is_restricted(self):
        with pytest.raises(ValidationError):
            _issue(record_type="resident")


class TestBalanceModels:
    """Tests for the per-resident and summary models."""

    def test_has_debt(self):
        assert BalanceResult(resident_id=1, remaining=Decimal("10")).has_debt
        assert not BalanceResult(resident_id=1, remaining=Decimal("-10")).has_debt

    def test_summary_totals_and_debtors(self):
        summary = BalanceSummary(rows=[
            SummaryRow(
                resident_id=1, name="A", apartment="1",
                total_due=Decimal("100"), total_paid=Decimal("150"),
                remaining_balance=Decimal("-50"),
            ),
            SummaryRow(
                resident_id=2, name="B", apartment="2",
                total_due=Decimal("100"), total_paid=Decimal("40"),
                remaining_balance=Decimal("60"),
            ),
        ])
        assert summary.total_due == Decimal("200")
        assert summary.total_paid == Decimal("190")
        assert summary.total_remaining == Decimal("10")
        assert [row.resident_id for row in summary.debtors()] == [2]


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.SUMMARY_COMPLETED,
            description="Summary completed",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.AMOUNT_INVALID,
            description="Bad amount",
            entity_type="payment",
            entity_id=7,
            details={"amount": "abc"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "amount_invalid"
        assert log_dict["entity_id"] == 7
        assert log_dict["details"]["amount"] == "abc"

    def test_builder_period_unparsable(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.period_unparsable(
            obligation_id=3,
            label="garbage",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.PERIOD_UNPARSABLE
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_type == "obligation"
        assert event.entity_id == 3
        assert event.correlation_id == correlation_id

    def test_builder_payment_ambiguous(self):
        event = AuditEventBuilder.payment_ambiguous(payment_id=9, resident_ids=[1, 2])
        assert event.details["resident_ids"] == [1, 2]
        assert "2 residents" in event.description


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
