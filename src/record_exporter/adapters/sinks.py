"""
Output Sinks.

    - BytesSink: Collects chunks in memory
    - FileSink: Writes chunks into a binary file object
    - QueueSink: Bounded hand-off to a consumer thread

QueueSink is the streaming adapter: the export runs in one thread, the
transport iterates the sink in another. ``write`` blocks while the queue is
full, so a slow consumer throttles the cursor instead of growing memory. When
the consumer calls ``close()`` the next ``write`` raises SinkClosedError and
the coordinator stops pulling records.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import BinaryIO, Iterator, List, Optional

from record_exporter.domain.errors import SinkClosedError

logger = logging.getLogger(__name__)

_END = object()


class BytesSink:
    """In-memory sink for tests and small exports."""

    def __init__(self) -> None:
        self.chunks: List[bytes] = []
        self.ended = False
        self.error: Optional[BaseException] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, chunk: bytes) -> None:
        if self._closed:
            raise SinkClosedError("Sink closed by consumer", output_started=bool(self.chunks))
        if self.ended or self.error is not None:
            raise RuntimeError("Write after end of stream")
        self.chunks.append(chunk)

    def end(self) -> None:
        self.ended = True

    def abort(self, error: BaseException) -> None:
        self.error = error

    def close(self) -> None:
        """Consumer-side close."""
        self._closed = True

    def getvalue(self) -> bytes:
        return b"".join(self.chunks)


class FileSink:
    """Sink writing into an open binary file object."""

    def __init__(self, fileobj: BinaryIO, close_on_end: bool = False) -> None:
        self.fileobj = fileobj
        self.close_on_end = close_on_end
        self.ended = False
        self.error: Optional[BaseException] = None
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        return bool(self.fileobj.closed) and not self.ended

    def write(self, chunk: bytes) -> None:
        if self.fileobj.closed:
            raise SinkClosedError(f"File closed after {self.bytes_written} bytes")
        self.fileobj.write(chunk)
        self.bytes_written += len(chunk)

    def end(self) -> None:
        self.fileobj.flush()
        self.ended = True
        if self.close_on_end:
            self.fileobj.close()

    def abort(self, error: BaseException) -> None:
        self.error = error
        if not self.fileobj.closed:
            self.fileobj.flush()
        logger.warning(f"Export to file aborted after {self.bytes_written} bytes: {error}")


class QueueSink:
    """Bounded producer/consumer sink with backpressure."""

    def __init__(
        self,
        max_pending_chunks: int = 16,
        poll_interval_seconds: float = 0.05,
    ) -> None:
        """
        Initialize sink.

        Args:
            max_pending_chunks: Chunks buffered before ``write`` blocks
            poll_interval_seconds: How often a blocked writer rechecks close
        """
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=max_pending_chunks)
        self._poll = poll_interval_seconds
        self._closed = threading.Event()
        self._finished = False
        self.error: Optional[BaseException] = None

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def write(self, chunk: bytes) -> None:
        if self._finished:
            raise RuntimeError("Write after end of stream")
        self._put(chunk)

    def end(self) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            self._put(_END)
        except SinkClosedError:
            logger.debug("Consumer closed before end of stream was delivered")

    def abort(self, error: BaseException) -> None:
        if self._finished:
            return
        self.error = error
        self._finished = True
        try:
            self._put(_END)
        except SinkClosedError:
            logger.debug("Consumer closed before failure was delivered")

    def close(self) -> None:
        """Consumer-side close, e.g. on client disconnect."""
        self._closed.set()

    def __iter__(self) -> Iterator[bytes]:
        """
        Consume chunks until end of stream.

        Raises:
            The producer's error if the export terminated abnormally
        """
        while not self.closed:
            item = self._queue.get()
            if item is _END:
                if self.error is not None:
                    raise self.error
                return
            yield item  # type: ignore[misc]

    def _put(self, item: object) -> None:
        while True:
            if self.closed:
                raise SinkClosedError("Sink closed by consumer")
            try:
                self._queue.put(item, timeout=self._poll)
                return
            except queue.Full:
                continue
