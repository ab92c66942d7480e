"""
Audit Logger

DESIGN DECISION: Every mutation of local ledger state is logged.
This provides:
1. Traceability from local entry to server confirmation
2. Debugging capability when storage or sync misbehaves
3. A history the UI can show ("saved offline", "synced")

The audit logger:
- Is synchronous, like the ledger store it observes
- Gracefully handles sink failures (never breaks a ledger operation)
- Always logs locally through structlog
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from money_notes.config import get_settings
from money_notes.models.audit import AuditEvent, AuditSeverity


def configure_logging(json_output: bool = True) -> None:
    """Configure structlog for local logging."""
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings().log_json)


class AuditSink(ABC):
    """
    Somewhere audit events are kept beyond the local log.

    Sinks are append-only - events are never deleted or modified.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> None:
        """Append an event. May raise; the logger absorbs failures."""
        pass


class InMemoryAuditSink(AuditSink):
    """Keeps events in a list, newest last."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type) -> list[AuditEvent]:
        return [e for e in self.events if e.event_type == event_type]


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional AuditSink (for history the UI can display)
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        """
        Initialize audit logger.

        Args:
            sink: Where to keep events. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("money_notes.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to the sink if one is configured.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink is None:
            return True

        try:
            self._sink.append_event(event)
            return True
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_sink_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False
