"""
Balance Summary

Rolls the per-resident balance of every resident into one report, ordered
by apartment code with a natural sort ("A2" before "A10").

The report also surfaces ambiguity: a payment whose description matches
several residents counts for each of them, and is listed in
`ambiguous_payments` so the treasurer can check it.
"""

import re
import unicodedata
from typing import Iterable, Optional, Union

from aidat.audit import AuditLogger
from aidat.matching.text import turkish_lower
from aidat.models.audit import AuditEventType
from aidat.models.ledger import Obligation, Payment, Resident
from aidat.models.reconciliation import (
    BalanceSummary,
    IssueType,
    ReconciliationDiagnostics,
    SummaryRow,
    ValidationIssue,
)
from aidat.reconciliation.engine import ReconciliationEngine, require_records


_DIGIT_RUNS = re.compile(r"([0-9]+)")

# Turkish collation order; q, w and x sit where the Latin alphabet puts them
_TURKISH_ALPHABET = "abcçdefgğhıijklmnoöpqrsştuüvwxyz"
_LETTER_RANK = {letter: rank for rank, letter in enumerate(_TURKISH_ALPHABET)}


def _collation_key(text: str) -> tuple[int, ...]:
    """Rank letters by the Turkish alphabet; other characters sort first."""
    return tuple(
        _LETTER_RANK.get(char, ord(char) - 0x110000)
        for char in text
    )


def natural_sort_key(
    code: Optional[str],
) -> tuple[tuple[int, Union[int, tuple[int, ...]]], ...]:
    """
    Sort key comparing embedded digit runs by numeric value.

    Case is ignored (Turkish casing); letters follow the Turkish alphabet,
    so "I" blocks sort between "H" and "İ". Digit runs sort before letters.

    Examples:
        >>> sorted(["A2", "A10", "A1"], key=natural_sort_key)
        ['A1', 'A2', 'A10']
        >>> sorted(["J1", "I1", "H1"], key=natural_sort_key)
        ['H1', 'I1', 'J1']
    """
    text = unicodedata.normalize("NFC", turkish_lower(code or "").strip())
    key: list[tuple[int, Union[int, tuple[int, ...]]]] = []
    for part in _DIGIT_RUNS.split(text):
        if not part:
            continue
        if _DIGIT_RUNS.fullmatch(part):
            key.append((0, int(part)))
        else:
            key.append((1, _collation_key(part)))
    return tuple(key)


class BalanceSummaryBuilder:
    """Builds the cross-resident balance report."""

    def __init__(self, engine: Optional[ReconciliationEngine] = None):
        self._engine = engine or ReconciliationEngine()

    def build(
        self,
        residents: Iterable[Resident],
        obligations: Iterable[Obligation],
        payments: Iterable[Payment],
        audit_logger: Optional[AuditLogger] = None,
    ) -> BalanceSummary:
        """
        One SummaryRow per resident, sorted by apartment code.

        Each row is the resident's coarse balance (every payment that
        mentions the resident counts, whatever its date).
        """
        resident_list = require_records(residents, Resident, "residents")
        obligation_list = require_records(obligations, Obligation, "obligations")
        payment_list = require_records(payments, Payment, "payments")

        prepared = self._engine.prepare_payments(payment_list)
        diagnostics = ReconciliationDiagnostics()
        # position in `prepared` -> IDs of the residents it counts for
        claimants: dict[int, list[int]] = {}
        rows = []

        for resident in resident_list:
            resident_diagnostics = ReconciliationDiagnostics()
            positions = self._engine.balance_positions(
                resident, prepared, resident_diagnostics
            )
            balance = self._engine.fold_balance(
                resident, obligation_list, prepared, resident_diagnostics, positions
            )
            for issue in balance.diagnostics.issues:
                diagnostics.add(issue)
            for position in positions:
                claimants.setdefault(position, []).append(resident.id)

            rows.append(SummaryRow(
                resident_id=resident.id,
                name=resident.name,
                apartment=resident.apartment,
                total_due=balance.total_due,
                total_paid=balance.total_paid,
                remaining_balance=balance.remaining,
            ))

        # Reported by payment ID; entries sharing an ID pool their residents
        ambiguous: dict[int, list[int]] = {}
        for position, resident_ids in claimants.items():
            if len(resident_ids) < 2:
                continue
            pooled = ambiguous.setdefault(prepared[position].payment.id, [])
            pooled.extend(r for r in resident_ids if r not in pooled)
        for payment_id, resident_ids in ambiguous.items():
            diagnostics.add(ValidationIssue(
                issue_type=IssueType.AMBIGUOUS_PAYMENT,
                record_type="payment",
                record_id=payment_id,
                severity="info",
                related_ids=resident_ids,
                message=(
                    f"Payment {payment_id} matches {len(resident_ids)} residents "
                    f"({', '.join(str(r) for r in resident_ids)}) and counts for each"
                ),
            ))

        rows.sort(key=lambda row: (natural_sort_key(row.apartment), row.resident_id))

        summary = BalanceSummary(
            rows=rows,
            diagnostics=diagnostics,
            ambiguous_payments=ambiguous,
        )

        audit = audit_logger or AuditLogger()
        audit.log_issues(diagnostics)
        audit.log_run_completed(
            AuditEventType.SUMMARY_COMPLETED,
            diagnostics,
            residents=len(rows),
            total_due=str(summary.total_due),
            total_paid=str(summary.total_paid),
        )
        return summary


def summarize_all(
    residents: Iterable[Resident],
    obligations: Iterable[Obligation],
    payments: Iterable[Payment],
) -> BalanceSummary:
    """Cross-resident report using the configured default engine."""
    return BalanceSummaryBuilder().build(residents, obligations, payments)
