"""
Aidat - Dues Reconciliation

Matches a freeform ledger of incoming payments against the dues of the
residents of a building, using nothing but payment descriptions and dates.

DESIGN PRINCIPLES:
1. Best effort, never silent: bad records are excluded AND reported
2. Pure: every call recomputes from the snapshot it is given
3. Permissive matching: ambiguity is surfaced, not resolved
4. Matching strategies are swappable
"""

from aidat.models import (
    BalanceResult,
    BalanceSummary,
    CanonicalPeriod,
    Obligation,
    ObligationStatus,
    Payment,
    PeriodReconciliation,
    ReconciliationDiagnostics,
    ReconciliationRow,
    Resident,
    RowStatus,
    SummaryRow,
)
from aidat.reconciliation import (
    BalanceSummaryBuilder,
    ReconciliationEngine,
    ReconciliationInputError,
    find_claimants,
    reconcile_balance,
    reconcile_period,
    summarize_all,
)

__version__ = "1.0.0"

__all__ = [
    "BalanceResult",
    "BalanceSummary",
    "BalanceSummaryBuilder",
    "CanonicalPeriod",
    "Obligation",
    "ObligationStatus",
    "Payment",
    "PeriodReconciliation",
    "ReconciliationDiagnostics",
    "ReconciliationEngine",
    "ReconciliationInputError",
    "ReconciliationRow",
    "Resident",
    "RowStatus",
    "SummaryRow",
    "find_claimants",
    "reconcile_balance",
    "reconcile_period",
    "summarize_all",
]
