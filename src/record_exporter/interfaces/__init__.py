"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for all
external collaborators of the export pipeline. High-level modules depend on
these abstractions, not on concrete implementations.

Protocols:
    - RecordStore: Issues lazy cursors over matching records
    - OutputSink: Byte destination with backpressure and close semantics
    - Encoder: Format-specific serializer with framing
    - FormRepository: Form lookup
    - AuditLogger: Audit trail of export events
    - MetricsCollector: Performance metrics
"""

from record_exporter.interfaces.audit_logger import AuditLogger
from record_exporter.interfaces.encoder import Encoder
from record_exporter.interfaces.form_repository import FormRepository
from record_exporter.interfaces.metrics_collector import MetricsCollector
from record_exporter.interfaces.output_sink import OutputSink
from record_exporter.interfaces.record_store import RecordStore

__all__ = [
    "AuditLogger",
    "Encoder",
    "FormRepository",
    "MetricsCollector",
    "OutputSink",
    "RecordStore",
]
