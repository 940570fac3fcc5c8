"""
Core Domain Entities.

This module defines the fundamental entities of the export domain: the form
that owns exported records, the request that triggers an export, the
transient session state, and the summary handed back to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from record_exporter.domain.value_objects import ProtectedFieldSet, Query


class ResultCode(str, Enum):
    """Outcome of an export as surfaced to the external caller."""

    OK = "OK"
    INVALID_FORMAT = "INVALID_FORMAT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CANCELLED = "CANCELLED"

    @property
    def http_status(self) -> int:
        """Transport-neutral status number for this code."""
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ResultCode.OK: 200,
    ResultCode.INVALID_FORMAT: 400,
    ResultCode.NOT_FOUND: 404,
    ResultCode.UNAUTHORIZED: 401,
    ResultCode.BAD_REQUEST: 400,
    ResultCode.INTERNAL_ERROR: 500,
    ResultCode.CANCELLED: 499,
}


class ExportState(str, Enum):
    """States of the export state machine."""

    IDLE = "IDLE"
    INITIALIZING = "INITIALIZING"
    STREAMING = "STREAMING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (ExportState.COMPLETED, ExportState.FAILED, ExportState.CANCELLED)


class Form(BaseModel):
    """The collection that owns exported records."""

    id: str = Field(..., description="Form identifier, used as the query scope")
    path: str = Field(default="", description="URL path alias of the form")
    title: str = Field(default="", description="Human readable title")
    components: List[Dict[str, Any]] = Field(
        default_factory=list, description="Nested component definitions"
    )
    protected_fields: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Context -> extra field paths hidden in that context",
    )

    model_config = {"frozen": True}


class ExportRequest(BaseModel):
    """Input for one export invocation."""

    form_id: str = Field(..., description="Target form/collection identifier")
    format: str = Field(default="json", description="Requested output format")
    raw_filter: Optional[Union[str, Dict[str, Any]]] = Field(
        default=None, description="Explicit caller filter override"
    )
    derived_filter: Dict[str, Any] = Field(
        default_factory=dict, description="Filter derived from request parameters"
    )
    is_privileged: bool = Field(
        default=False, description="Caller may read records of any owner"
    )
    owner_id: Optional[str] = Field(default=None, description="Caller identity")

    model_config = {"frozen": True}

    @property
    def normalized_format(self) -> str:
        return self.format.strip().lower()


@dataclass
class ExportSession:
    """Transient state of one export, created at request start."""

    request: ExportRequest
    correlation_id: str
    state: ExportState = ExportState.IDLE
    form: Optional[Form] = None
    query: Optional[Query] = None
    protected_fields: Optional[ProtectedFieldSet] = None
    encoder: Any = None
    cursor_open: bool = False
    sink_open: bool = True
    output_started: bool = False
    records_read: int = 0
    records_written: int = 0
    records_skipped: int = 0
    history: List[ExportState] = field(default_factory=list)

    def transition(self, new_state: ExportState) -> None:
        """Move to ``new_state``, recording the previous one."""
        if self.state.is_terminal:
            raise RuntimeError(
                f"Export {self.correlation_id} already finished in state {self.state.value}"
            )
        self.history.append(self.state)
        self.state = new_state


class ExportSummary(BaseModel):
    """Outcome of an export that did not raise."""

    correlation_id: str
    form_id: str
    format: str
    state: ExportState
    result_code: ResultCode
    records_read: int = 0
    records_written: int = 0
    records_skipped: int = 0
    duration_seconds: float = 0.0

    model_config = {"frozen": True}

    @property
    def cancelled(self) -> bool:
        return self.state == ExportState.CANCELLED
