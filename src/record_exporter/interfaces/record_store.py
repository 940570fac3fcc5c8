"""
Record Store Protocol.

The store executes the query; the pipeline only consumes the lazy iterator it
hands back. Drivers may prefetch a page server-side, but the iterator must not
materialize the full result set.

Design Notes:
    - Returned iterators may expose ``close()``; it is called on early exit
    - Query execution and indexing are the store's concern
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable

from record_exporter.domain.value_objects import Query, Record


@runtime_checkable
class RecordStore(Protocol):
    """Abstract interface for record access."""

    def open_cursor(self, query: Query) -> Iterator[Record]:
        """
        Issue ``query`` and return a lazy iterator over matching records.

        Args:
            query: Final filter document, constraints already injected

        Returns:
            Iterator yielding one record at a time in store order
        """
        ...
