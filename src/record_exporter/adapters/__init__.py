"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the interfaces defined in
the interfaces package.

Stores:
    - InMemoryRecordStore: List-backed store with paginated lazy cursors
    - MongoRecordStore: pymongo collection adapter

Forms:
    - InMemoryFormRepository: Dictionary-backed form lookup

Sinks:
    - BytesSink, FileSink, QueueSink

Loggers and Metrics:
    - ConsoleAuditLogger: Simple console output
    - InMemoryMetricsCollector: Simple in-memory collection
"""

from record_exporter.adapters.console_logger import AuditEvent, ConsoleAuditLogger
from record_exporter.adapters.memory_forms import InMemoryFormRepository
from record_exporter.adapters.memory_store import InMemoryRecordStore
from record_exporter.adapters.metrics_collector import InMemoryMetricsCollector
from record_exporter.adapters.mongo_store import MongoRecordStore
from record_exporter.adapters.sinks import BytesSink, FileSink, QueueSink

__all__ = [
    "AuditEvent",
    "BytesSink",
    "ConsoleAuditLogger",
    "FileSink",
    "InMemoryFormRepository",
    "InMemoryMetricsCollector",
    "InMemoryRecordStore",
    "MongoRecordStore",
    "QueueSink",
]
