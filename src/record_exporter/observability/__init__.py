"""
Observability Package - Structured Audit Logging.

    - StructuredAuditLogger: AuditLogger emitting structlog events
    - configure_structured_logging: JSON or console rendering setup

Correlation ids live in a context variable, so concurrent exports running in
separate threads never see each other's id.
"""

from record_exporter.observability.structured_audit import (
    StructuredAuditLogger,
    configure_structured_logging,
    get_correlation_id,
)

__all__ = [
    "StructuredAuditLogger",
    "configure_structured_logging",
    "get_correlation_id",
]
