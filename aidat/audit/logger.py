"""
Audit Logger

DESIGN DECISION: Every reconciliation run leaves a structured trail:
1. One warning event per data quality issue
2. One completion event with the run's counts

The logger is synchronous: the engine has no suspension points and
logging must not introduce any. Events of one run share a correlation ID.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from aidat.config import get_settings
from aidat.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from aidat.models.reconciliation import (
    IssueType,
    ReconciliationDiagnostics,
    ValidationIssue,
)


def _configure_structlog(renderer: str = "json") -> None:
    final_processor = (
        structlog.dev.ConsoleRenderer()
        if renderer == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            final_processor,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
_configure_structlog()


def configure_logging(level: Optional[str] = None, renderer: Optional[str] = None) -> None:
    """
    Configure structlog and the stdlib root logger for an application.

    Defaults come from LoggingSettings (AIDAT_LOG_LEVEL, AIDAT_LOG_RENDERER).
    """
    log_settings = get_settings().logging
    level = level or log_settings.level
    renderer = renderer or log_settings.renderer

    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    logging.getLogger().setLevel(getattr(logging, level))
    _configure_structlog(renderer)


class AuditLogger:
    """
    Central audit logging service for reconciliation runs.

    Every event is logged locally through structlog. Events are also kept
    on the instance (`events`) so a caller can inspect one run's trail.
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        log_issues: Optional[bool] = None,
    ):
        """
        Initialize audit logger.

        Args:
            correlation_id: ID shared by all events of this run.
                           A new one is created if omitted.
            log_issues: Emit one event per data quality issue.
                       Defaults to AIDAT_LOG_ISSUES.
        """
        self.correlation_id = correlation_id or create_correlation_id()
        if log_issues is None:
            log_issues = get_settings().reconciliation.log_issues
        self._log_issues = log_issues
        self._logger = structlog.get_logger("aidat.audit")
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self.events.append(event)
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_issue(self, issue: ValidationIssue) -> None:
        """Log a single data quality issue."""
        if not self._log_issues:
            return

        if issue.issue_type == IssueType.UNPARSABLE_PERIOD:
            event = AuditEventBuilder.period_unparsable(
                obligation_id=issue.record_id,
                label=issue.value,
                correlation_id=self.correlation_id,
            )
        elif issue.issue_type == IssueType.INVALID_DATE:
            event = AuditEventBuilder.payment_date_invalid(
                payment_id=issue.record_id,
                raw_date=issue.value,
                correlation_id=self.correlation_id,
            )
        elif issue.issue_type == IssueType.INVALID_AMOUNT:
            event = AuditEventBuilder.amount_invalid(
                entity_type=issue.record_type,
                entity_id=issue.record_id,
                raw_amount=issue.value,
                correlation_id=self.correlation_id,
            )
        else:
            event = AuditEventBuilder.payment_ambiguous(
                payment_id=issue.record_id,
                resident_ids=issue.related_ids,
                correlation_id=self.correlation_id,
            )
        self.log(event)

    def log_issues(self, diagnostics: ReconciliationDiagnostics) -> None:
        for issue in diagnostics.issues:
            self.log_issue(issue)

    def log_run_completed(
        self,
        event_type: AuditEventType,
        diagnostics: ReconciliationDiagnostics,
        resident_id: Optional[int] = None,
        **extra: object,
    ) -> None:
        """Log the end of a run with its diagnostic counts."""
        counts: dict[str, object] = dict(diagnostics.counts())
        counts.update(extra)
        self.log(AuditEventBuilder.run_completed(
            event_type=event_type,
            resident_id=resident_id,
            counts=counts,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking the events of one run.
    """
    return uuid4()
