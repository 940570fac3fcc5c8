"""
Encoder Protocol.

Each output format implements the same three-step contract. ``init`` may
reject the export before anything is written, so coordinators call it before
opening a cursor.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from record_exporter.domain.value_objects import Record


@runtime_checkable
class Encoder(Protocol):
    """Abstract interface for format encoders."""

    format_name: str
    content_type: str

    def init(self) -> None:
        """
        Prepare the preamble (header row, opening bracket).

        Raises:
            EncoderInitError: If the export cannot be encoded at all
        """
        ...

    def write_record(self, record: Record) -> None:
        """
        Encode one record with its framing.

        Raises:
            EncodingError: If a value cannot be serialized
        """
        ...

    def finish(self) -> None:
        """Write closing framing, flush, and signal end of stream."""
        ...
