"""
Data Models Package

This package contains all Pydantic models used by Aidat.
Snapshots passed in and reports handed back conform to these schemas.
"""

from aidat.models.ledger import (
    CanonicalPeriod,
    Obligation,
    ObligationStatus,
    Payment,
    RawAmount,
    Resident,
)
from aidat.models.reconciliation import (
    BalanceResult,
    BalanceSummary,
    IssueType,
    PeriodReconciliation,
    ReconciliationDiagnostics,
    ReconciliationRow,
    RowStatus,
    SummaryRow,
    ValidationIssue,
)
from aidat.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CanonicalPeriod",
    "Obligation",
    "ObligationStatus",
    "Payment",
    "RawAmount",
    "Resident",
    # Reconciliation models
    "BalanceResult",
    "BalanceSummary",
    "IssueType",
    "PeriodReconciliation",
    "ReconciliationDiagnostics",
    "ReconciliationRow",
    "RowStatus",
    "SummaryRow",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
