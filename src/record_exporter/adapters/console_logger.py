"""
Console Audit Logger.

Writes export lifecycle events as single lines to a text stream (stderr by
default, since stdout may be carrying the export itself) and keeps them in
memory for inspection.
"""

from __future__ import annotations

import sys
import threading
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

_correlation_id: ContextVar[Optional[str]] = ContextVar(
    "console_audit_correlation_id", default=None
)


@dataclass(frozen=True)
class AuditEvent:
    """One audit trail entry."""

    kind: str
    level: str
    message: str
    correlation_id: Optional[str]
    fields: Dict[str, Any] = field(default_factory=dict)


class ConsoleAuditLogger:
    """Audit trail printed to a stream and retained in ``events``."""

    def __init__(self, verbose: bool = True, stream: Optional[TextIO] = None) -> None:
        """
        Initialize console logger.

        Args:
            verbose: Print every event. If False, only completions and anomalies.
            stream: Destination for printed lines (stderr if None)
        """
        self._verbose = verbose
        self._stream = stream
        self._lock = threading.Lock()
        self.events: List[AuditEvent] = []

    @property
    def skipped(self) -> List[str]:
        """Identifiers of skipped records, in the order they were skipped."""
        return [e.fields["record_id"] for e in self.events if e.kind == "record_skipped"]

    def set_correlation_id(self, correlation_id: str) -> None:
        _correlation_id.set(correlation_id)

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
        self._emit(
            "export_start",
            "INFO",
            f"Starting {format_name} export of form {form_id}",
            quiet=True,
            form_id=form_id,
            format=format_name,
            **(metadata or {}),
        )

    def log_record_skipped(self, record_id: Optional[str], reason: str) -> None:
        record_id = record_id or "<unknown>"
        self._emit(
            "record_skipped",
            "WARN",
            f"Skipped record {record_id}: {reason}",
            quiet=True,
            record_id=record_id,
            reason=reason,
        )

    def log_export_end(
        self,
        state: str,
        records_written: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit(
            "export_end",
            "INFO",
            f"Export {state.lower()}: {records_written} records written "
            f"({duration_seconds:.3f}s)",
            state=state,
            records_written=records_written,
            duration_seconds=duration_seconds,
            **(metadata or {}),
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emit("anomaly", severity, f"ANOMALY: {message}", **(context or {}))

    def _emit(
        self, kind: str, level: str, message: str, quiet: bool = False, **fields: Any
    ) -> None:
        correlation_id = _correlation_id.get()
        with self._lock:
            self.events.append(AuditEvent(kind, level, message, correlation_id, fields))
        if quiet and not self._verbose:
            return
        timestamp = datetime.now().strftime("%H:%M:%S")
        corr_id = correlation_id[:8] if correlation_id else "--------"
        print(
            f"[{timestamp}] [{corr_id}] [{level:5}] {message}",
            file=self._stream or sys.stderr,
        )
