"""
Value Objects for Domain Layer.

Records are dynamically shaped: no schema is known ahead of time, and values
may be scalars, nested records or sequences of records. ``classify_value``
gives every value an explicit tag so traversal code branches on kind rather
than probing attributes ad hoc.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Tuple


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# One stored record: field name -> value, insertion ordered
Record = Dict[str, Any]

# Store-native filter document: field name -> constraint
Query = Dict[str, Any]

# Request parameters as received from the transport layer
ParamsDict = Dict[str, str]


class ValueKind(str, Enum):
    """Tag for a value found inside a record."""

    SCALAR = "SCALAR"
    RECORD = "RECORD"
    SEQUENCE = "SEQUENCE"


def classify_value(value: Any) -> ValueKind:
    """Classify a record value as scalar, nested record or record sequence."""
    if isinstance(value, dict):
        return ValueKind.RECORD
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


@dataclass(frozen=True)
class ProtectedFieldSet:
    """
    Field paths that must never appear in output for one form and context.

    Paths are dotted and relative to the record root (``data.ssn``).
    Resolved once per export and shared read-only across records.
    """

    form_id: str
    context: str
    paths: FrozenSet[str] = field(default_factory=frozenset)

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.paths))

    def __len__(self) -> int:
        return len(self.paths)

    @property
    def split_paths(self) -> List[Tuple[str, ...]]:
        """Paths split into segments, in stable order."""
        return [tuple(p.split(".")) for p in sorted(self.paths)]
