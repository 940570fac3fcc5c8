"""
Output Sink Protocol.

A sink accepts byte chunks and distinguishes three endings:
    - ``end()``: the producer finished; the document is complete
    - ``abort(error)``: the producer failed; the document is truncated
    - ``closed``: the consumer went away before either of the above

Design Notes:
    - ``write`` may block while the sink's buffer is full (backpressure)
    - ``write`` raises SinkClosedError once the consumer has closed
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Abstract interface for an export destination."""

    @property
    def closed(self) -> bool:
        """True once the consumer closed the sink early."""
        ...

    def write(self, chunk: bytes) -> None:
        """Append a chunk, blocking until the sink has room for it."""
        ...

    def end(self) -> None:
        """Signal successful end of stream."""
        ...

    def abort(self, error: BaseException) -> None:
        """Signal that the stream terminated with ``error``."""
        ...
