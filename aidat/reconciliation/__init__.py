"""Reconciliation package: per-due, per-resident and cross-resident views."""

from aidat.reconciliation.engine import (
    PreparedPayment,
    ReconciliationEngine,
    ReconciliationInputError,
    find_claimants,
    reconcile_balance,
    reconcile_period,
)
from aidat.reconciliation.summary import (
    BalanceSummaryBuilder,
    natural_sort_key,
    summarize_all,
)

__all__ = [
    "BalanceSummaryBuilder",
    "PreparedPayment",
    "ReconciliationEngine",
    "ReconciliationInputError",
    "find_claimants",
    "natural_sort_key",
    "reconcile_balance",
    "reconcile_period",
    "summarize_all",
]
