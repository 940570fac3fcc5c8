"""
Base Encoder - Buffered Writes with Explicit Framing.

Subclasses implement ``_encode_record`` and may override ``_validate``,
``_preamble`` and ``_epilogue``. ``init`` only fills the in-memory buffer, so
a failed validation (or a veto after ``init``) leaves the sink untouched.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from record_exporter.config.models import EncodingConfig
from record_exporter.domain.entities import Form
from record_exporter.domain.errors import EncodingError, ExportError
from record_exporter.domain.value_objects import ProtectedFieldSet, Record
from record_exporter.interfaces.output_sink import OutputSink

logger = logging.getLogger(__name__)


class BaseEncoder(ABC):
    """Shared buffering and lifecycle for all encoders."""

    format_name: str = ""
    content_type: str = "application/octet-stream"
    file_extension: str = ""

    def __init__(
        self,
        form: Form,
        sink: OutputSink,
        config: Optional[EncodingConfig] = None,
        protected_fields: Optional[ProtectedFieldSet] = None,
    ) -> None:
        """
        Initialize encoder.

        Args:
            form: Form being exported
            sink: Destination for encoded bytes
            config: Encoding settings
            protected_fields: Paths that must not appear as output columns
        """
        self.form = form
        self.sink = sink
        self.config = config or EncodingConfig()
        self.protected_fields = protected_fields
        self.records_written = 0
        self.bytes_flushed = 0
        self._buffer = bytearray()
        self._initialized = False
        self._finished = False

    @property
    def output_started(self) -> bool:
        """True once any byte reached the sink."""
        return self.bytes_flushed > 0

    def init(self) -> None:
        if self._initialized:
            raise RuntimeError(f"{type(self).__name__} already initialized")
        self._validate()
        self._buffer.extend(self._preamble())
        self._initialized = True

    def write_record(self, record: Record) -> None:
        if not self._initialized or self._finished:
            raise EncodingError(
                f"{self.format_name} encoder is not accepting records",
                output_started=self.output_started,
            )
        try:
            payload = self._encode_record(record)
        except ExportError:
            raise
        except (TypeError, ValueError) as e:
            raise EncodingError(
                f"Cannot encode record as {self.format_name}: {e}",
                output_started=self.output_started,
            ) from e

        self._buffer.extend(payload)
        self.records_written += 1
        if len(self._buffer) >= self.config.flush_threshold_bytes:
            self.flush()

    def finish(self) -> None:
        if not self._initialized:
            raise EncodingError(f"{self.format_name} encoder was never initialized")
        if self._finished:
            return
        self._buffer.extend(self._epilogue())
        self.flush()
        self._finished = True
        self.sink.end()
        logger.debug(
            f"{self.format_name} encoder finished: {self.records_written} records, "
            f"{self.bytes_flushed} bytes"
        )

    def flush(self) -> None:
        """Hand buffered bytes to the sink; blocks under backpressure."""
        if not self._buffer:
            return
        chunk = bytes(self._buffer)
        self._buffer.clear()
        self.sink.write(chunk)
        self.bytes_flushed += len(chunk)

    def _validate(self) -> None:
        """Reject the export before any output. Raise EncoderInitError."""

    def _preamble(self) -> bytes:
        return b""

    def _epilogue(self) -> bytes:
        return b""

    @abstractmethod
    def _encode_record(self, record: Record) -> bytes:
        ...


def json_default(value: Any) -> Any:
    """``json.dumps`` fallback for common non-JSON scalar types."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
