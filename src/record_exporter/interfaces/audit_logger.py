"""
Audit Logger Protocol.

Tracks export lifecycle events for debugging and compliance. The audit
logger has no side effects on the export itself.

Design Notes:
    - Correlation ID propagation per export
    - Severity strings: DEBUG, INFO, WARNING, ERROR
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        ...

    def log_export_start(
        self, form_id: str, format_name: str, metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        ...

    def log_record_skipped(self, record_id: Optional[str], reason: str) -> None:
        ...

    def log_export_end(
        self,
        state: str,
        records_written: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...

    def log_anomaly(
        self, message: str, severity: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        ...
