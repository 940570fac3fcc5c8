"""
In-Memory Record Store.

A record store for development and testing. Evaluates Mongo-style filter
documents against stored records and yields matches page by page, the way a
server-side cursor would, so the pipeline never sees the full result set at
once.

Supported operators:
    $eq, $ne, $gt, $gte, $lt, $lte, $in, $nin, $exists, $regex, $and, $or
Dotted paths descend into nested mappings; a null constraint matches both an
explicit None and a missing field.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from record_exporter.domain.value_objects import Query, Record

logger = logging.getLogger(__name__)

_MISSING = object()


class InMemoryRecordStore:
    """List-backed store with lazy, paginated cursors."""

    def __init__(
        self,
        records: Optional[Sequence[Record]] = None,
        page_size: int = 100,
    ) -> None:
        """
        Initialize store.

        Args:
            records: Initial records, kept in insertion order
            page_size: Records fetched per simulated server round trip
        """
        self._records: List[Record] = [copy.deepcopy(r) for r in records or []]
        self.page_size = page_size
        self.queries: List[Query] = []
        self.records_served = 0
        self.pages_fetched = 0
        self.open_cursors = 0

    def insert(self, record: Record) -> None:
        self._records.append(copy.deepcopy(record))

    def __len__(self) -> int:
        return len(self._records)

    def open_cursor(self, query: Query) -> Iterator[Record]:
        """Return a lazy iterator over records matching ``query``."""
        self.queries.append(copy.deepcopy(query))
        return self._paginate(copy.deepcopy(query))

    def _paginate(self, query: Query) -> Iterator[Record]:
        self.open_cursors += 1
        try:
            position = 0
            while position < len(self._records):
                page = self._records[position:position + self.page_size]
                position += self.page_size
                self.pages_fetched += 1
                for record in page:
                    if matches(record, query):
                        self.records_served += 1
                        # Copies, so consumers may mutate freely
                        yield copy.deepcopy(record)
        finally:
            self.open_cursors -= 1


def matches(record: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Evaluate a filter document against one record."""
    for key, constraint in query.items():
        if key == "$and":
            if not all(matches(record, sub) for sub in constraint):
                return False
        elif key == "$or":
            if not any(matches(record, sub) for sub in constraint):
                return False
        elif not _match_field(_get_path(record, key), constraint):
            return False
    return True


def _get_path(record: Mapping[str, Any], path: str) -> Any:
    value: Any = record
    for segment in path.split("."):
        if not isinstance(value, Mapping) or segment not in value:
            return _MISSING
        value = value[segment]
    return value


def _match_field(value: Any, constraint: Any) -> bool:
    if isinstance(constraint, Mapping) and any(k.startswith("$") for k in constraint):
        return all(
            _apply_operator(op, value, operand) for op, operand in constraint.items()
        )
    return _equals(value, constraint)


def _equals(value: Any, expected: Any) -> bool:
    if expected is None:
        return value is _MISSING or value is None
    if value is _MISSING:
        return False
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _apply_operator(op: str, value: Any, operand: Any) -> bool:
    if op == "$eq":
        return _equals(value, operand)
    if op == "$ne":
        return not _equals(value, operand)
    if op == "$in":
        return any(_equals(value, item) for item in operand)
    if op == "$nin":
        return not any(_equals(value, item) for item in operand)
    if op == "$exists":
        return (value is not _MISSING) == bool(operand)
    if op == "$regex":
        return isinstance(value, str) and re.search(operand, value) is not None
    if op in _COMPARATORS:
        if value is _MISSING or value is None:
            return False
        try:
            return _COMPARATORS[op](value, operand)
        except TypeError:
            return False
    raise ValueError(f"Unsupported query operator: {op}")


_COMPARATORS: Dict[str, Any] = {
    "$gt": lambda a, b: a > b,
    "$gte": lambda a, b: a >= b,
    "$lt": lambda a, b: a < b,
    "$lte": lambda a, b: a <= b,
}
