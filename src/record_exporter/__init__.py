"""
Record Exporter - Streaming Bulk Export Pipeline.

Streams a potentially unbounded set of stored records through a chain of
per-record transformations and a format-specific encoder, writing output
incrementally instead of materializing the full result set in memory.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Pull-based cursor driving a backpressure-aware writer loop
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Core entities (ExportRequest, ExportSummary, Form, errors)
    - interfaces: Protocols for store, sink, encoder, forms, audit, metrics
    - query: Filter derivation and mandatory constraint injection
    - cursor: Lazy record cursor over a store-provided iterator
    - transform: Link injection and protected field redaction
    - encoders: JSON, NDJSON and CSV encoders plus their registry
    - hooks: Extension points invoked at named pipeline stages
    - pipeline: ExportCoordinator state machine
    - adapters: In-memory store, sinks, console logger, metrics
    - config: Configuration models and loaders
    - observability: structlog audit events

Example:
    >>> from record_exporter import ExportCoordinator, ExportRequest
    >>> coordinator = ExportCoordinator(store=store, forms=forms)
    >>> sink = BytesSink()
    >>> summary = coordinator.export(ExportRequest(form_id="5", owner_id="u1"), sink)
    >>> print(f"Exported {summary.records_written} records")

"""

import logging

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Record Exporter.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import record_exporter
        >>> record_exporter.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("record_exporter").setLevel(level)


from record_exporter.domain.entities import (  # noqa: E402
    ExportRequest,
    ExportState,
    ExportSummary,
    Form,
    ResultCode,
)
from record_exporter.pipeline.export_coordinator import ExportCoordinator  # noqa: E402

__all__ = [
    "ExportCoordinator",
    "ExportRequest",
    "ExportState",
    "ExportSummary",
    "Form",
    "ResultCode",
    "configure_logging",
]
