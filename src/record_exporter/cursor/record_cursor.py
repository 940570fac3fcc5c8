"""
Record Cursor - Pull-Based Wrapper over a Store Iterator.

The cursor holds at most one record in flight: ``next`` pulls a single record
from the underlying iterator and hands ownership to the caller. Whatever
prefetching happens is the driver's business.

Design Notes:
    - ``next`` returns None only at end of sequence, then closes the cursor
    - An empty document from the driver raises MalformedRecordError
    - ``close`` is idempotent; a failing driver close is logged, not raised
    - Driver read exceptions surface as StoreError
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Optional

from record_exporter.domain.errors import MalformedRecordError, StoreError
from record_exporter.domain.value_objects import Record

logger = logging.getLogger(__name__)


class RecordCursor:
    """Lazy, closeable sequence of raw records."""

    def __init__(self, source: Iterable[Record], name: str = "cursor") -> None:
        """
        Wrap a store-provided iterable.

        Args:
            source: Lazy iterable of records, optionally with ``close()``
            name: Label used in log messages
        """
        self._source = source
        self._iterator: Iterator[Record] = iter(source)
        self._name = name
        self._closed = False
        self._exhausted = False
        self.records_read = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def exhausted(self) -> bool:
        """True once the store reported end of sequence."""
        return self._exhausted

    def next(self) -> Optional[Record]:
        """
        Pull the next record.

        Returns:
            The next record, or None at end of sequence or after close

        Raises:
            StoreError: If the underlying driver fails
            MalformedRecordError: If the driver yields an empty document
        """
        if self._closed:
            return None

        try:
            record = next(self._iterator)
        except StopIteration:
            self._exhausted = True
            logger.debug(f"{self._name} exhausted after {self.records_read} records")
            self.close()
            return None
        except Exception as e:
            raise StoreError(f"{self._name} read failed: {e}", output_started=False) from e

        self.records_read += 1
        if record is None:
            raise MalformedRecordError(
                f"{self._name} yielded an empty document at position {self.records_read}"
            )
        return record

    def close(self) -> None:
        """Release the store-side cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        closer = _find_closer(self._source) or _find_closer(self._iterator)
        if closer is None:
            return
        try:
            closer()
        except Exception as e:
            logger.warning(f"{self._name} close failed: {e}")
            return
        logger.debug(f"{self._name} closed after {self.records_read} records")

    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.next()
            if record is None:
                return
            yield record

    def __enter__(self) -> "RecordCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _find_closer(obj: Any) -> Any:
    closer = getattr(obj, "close", None)
    return closer if callable(closer) else None
