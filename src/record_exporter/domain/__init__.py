"""
Domain Layer - Core Export Entities and Value Objects.

This package contains the core domain model for the Record Exporter.
Entities here are pure Python with no infrastructure dependencies
(except Pydantic for validation).

Entities:
    - Form: The owning collection of exported records
    - ExportRequest: Input for one export invocation
    - ExportSession: Transient state of one running export
    - ExportSummary: Outcome of a finished export

Value Objects:
    - ProtectedFieldSet: Field paths excluded from output in a context
    - ValueKind: Tagged classification of record values

Errors:
    - ExportError and its subclasses, each carrying a ResultCode
"""

from record_exporter.domain.entities import (
    ExportRequest,
    ExportSession,
    ExportState,
    ExportSummary,
    Form,
    ResultCode,
)
from record_exporter.domain.value_objects import (
    ProtectedFieldSet,
    Query,
    Record,
    ValueKind,
    classify_value,
)

__all__ = [
    "ExportRequest",
    "ExportSession",
    "ExportState",
    "ExportSummary",
    "Form",
    "ResultCode",
    "ProtectedFieldSet",
    "Query",
    "Record",
    "ValueKind",
    "classify_value",
]
