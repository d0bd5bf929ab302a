"""
Audit Models for Aidat

Every reconciliation run produces a small audit trail:
1. One event per data quality problem (unparsable period, bad date, ...)
2. One completion event with the run's counts

DESIGN DECISION: Audit events are plain data. aidat.audit.AuditLogger emits
them; these models only describe what happened.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Data quality
    PERIOD_UNPARSABLE = "period_unparsable"
    PAYMENT_DATE_INVALID = "payment_date_invalid"
    AMOUNT_INVALID = "amount_invalid"
    PAYMENT_AMBIGUOUS = "payment_ambiguous"

    # Runs
    PERIOD_RECONCILIATION_COMPLETED = "period_reconciliation_completed"
    BALANCE_RECONCILIATION_COMPLETED = "balance_reconciliation_completed"
    SUMMARY_COMPLETED = "summary_completed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every data quality issue and every finished run creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of record (e.g., 'obligation', 'payment', 'resident')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    # Correlation - all events of one run share it
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one reconciliation run"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.period_unparsable(7, "garbage", correlation_id)
        event = AuditEventBuilder.run_completed(event_type, 42, counts, correlation_id)
    """

    @staticmethod
    def period_unparsable(
        obligation_id: int,
        label: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERIOD_UNPARSABLE,
            severity=AuditSeverity.WARNING,
            entity_type="obligation",
            entity_id=obligation_id,
            correlation_id=correlation_id,
            description=f"Period label could not be parsed: {label!r}",
            details={"label": label},
        )

    @staticmethod
    def payment_date_invalid(
        payment_id: int,
        raw_date: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_DATE_INVALID,
            severity=AuditSeverity.WARNING,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment date is not an ISO calendar date: {raw_date!r}",
            details={"date": raw_date},
        )

    @staticmethod
    def amount_invalid(
        entity_type: str,
        entity_id: int,
        raw_amount: Any,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_INVALID,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Amount is not a non-negative number: {raw_amount!r}",
            details={"amount": str(raw_amount)},
        )

    @staticmethod
    def payment_ambiguous(
        payment_id: int,
        resident_ids: list[int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_AMBIGUOUS,
            severity=AuditSeverity.INFO,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment matches {len(resident_ids)} residents",
            details={"resident_ids": resident_ids},
        )

    @staticmethod
    def run_completed(
        event_type: AuditEventType,
        resident_id: Optional[int],
        counts: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type="resident" if resident_id is not None else None,
            entity_id=resident_id,
            correlation_id=correlation_id,
            description=f"{event_type.value.replace('_', ' ').capitalize()}",
            details=counts,
        )
