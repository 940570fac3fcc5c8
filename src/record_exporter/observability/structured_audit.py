"""
Structured Audit Logger - structlog Events for the Export Lifecycle.

Every event carries the export's correlation id and a stable ``event`` name
(``export_start``, ``record_skipped``, ``export_end``, ``anomaly``), so log
pipelines can follow one export from request to end of stream.

Usage:
    configure_structured_logging(use_json=True)
    coordinator = ExportCoordinator(store, forms, audit_logger=StructuredAuditLogger())
"""

from __future__ import annotations

import logging
import threading
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, TextIO

import structlog

_correlation_id: ContextVar[Optional[str]] = ContextVar(
    "export_correlation_id", default=None
)

_LEVELS = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARN": "warning",
    "WARNING": "warning",
    "ERROR": "error",
    "CRITICAL": "critical",
}

_END_LEVELS = {"FAILED": "error", "CANCELLED": "warning"}


def get_correlation_id() -> Optional[str]:
    """Correlation id of the export running in the current context."""
    return _correlation_id.get()


def configure_structured_logging(
    use_json: bool = True,
    log_level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structlog rendering for audit events.

    Args:
        use_json: One JSON object per line; console rendering otherwise
        log_level: Minimum level emitted
        stream: Output stream (stdout if None)
    """
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


class StructuredAuditLogger:
    """AuditLogger that emits structlog events and keeps a copy of each."""

    def __init__(self, logger_name: str = "record_exporter.audit") -> None:
        self._logger = structlog.get_logger(logger_name)
        self._lock = threading.Lock()
        self.events: List[Dict[str, Any]] = []

    def set_correlation_id(self, correlation_id: str) -> None:
        _correlation_id.set(correlation_id)
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def clear(self) -> None:
        """Drop retained events."""
        with self._lock:
            self.events.clear()

    def log_export_start(
        self,
        form_id: str,
        format_name: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit("info", "export_start", form_id=form_id, format=format_name, **(metadata or {}))

    def log_record_skipped(self, record_id: Optional[str], reason: str) -> None:
        self._emit("warning", "record_skipped", record_id=record_id, reason=reason)

    def log_export_end(
        self,
        state: str,
        records_written: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            _END_LEVELS.get(state, "info"),
            "export_end",
            state=state,
            records_written=records_written,
            duration_seconds=round(duration_seconds, 6),
            **(metadata or {}),
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        level = _LEVELS.get(severity.upper(), "warning")
        self._emit(level, "anomaly", message=message, **(context or {}))

    def _emit(self, level: str, event: str, **data: Any) -> None:
        data["correlation_id"] = get_correlation_id()
        with self._lock:
            self.events.append({"event": event, "level": level, **data})
        getattr(self._logger, level)(event, **data)
