"""
Request Parameter Filters.

Turns flat request parameters into a structured filter document:

    name=Joe            -> {"name": "Joe"}
    age__gte=21         -> {"age": {"$gte": 21}}
    status__ne=draft    -> {"status": {"$ne": "draft"}}
    tags__in=a,b        -> {"tags": {"$in": ["a", "b"]}}
    email__exists=true  -> {"email": {"$exists": True}}
    name__regex=^Jo     -> {"name": {"$regex": "^Jo"}}

Several operators on the same field are combined into one constraint.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from record_exporter.domain.value_objects import Query

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = {"ne", "gt", "gte", "lt", "lte"}
LIST_OPERATORS = {"in", "nin"}
DEFAULT_RESERVED = ("limit", "skip", "select", "sort", "populate", "format")
_NUMERIC = re.compile(r"^-?\d+(\.\d+)?([eE][-+]?\d+)?$")


def derive_filter(
    params: Mapping[str, Any],
    reserved: Optional[Iterable[str]] = None,
) -> Query:
    """
    Derive a structured filter from request parameters.

    Args:
        params: Flat request parameters
        reserved: Parameter names that never become constraints

    Returns:
        Filter document; unknown operator suffixes are treated as part of
        the field name
    """
    skip = set(DEFAULT_RESERVED if reserved is None else reserved)
    query: Query = {}

    for name, value in params.items():
        if name in skip:
            continue

        field, _, operator = name.rpartition("__")
        if not field or operator not in COMPARISON_OPERATORS | LIST_OPERATORS | {"exists", "regex"}:
            field, operator = name, ""

        if not operator:
            query[field] = value
            continue

        constraint = _build_constraint(operator, value)
        existing = query.get(field)
        if isinstance(existing, dict):
            existing.update(constraint)
        else:
            if existing is not None:
                logger.debug(f"Replacing equality on {field} with operator {operator}")
            query[field] = constraint

    return query


def _build_constraint(operator: str, value: Any) -> Dict[str, Any]:
    if operator in LIST_OPERATORS:
        items = value if isinstance(value, list) else str(value).split(",")
        return {f"${operator}": list(items)}
    if operator == "exists":
        return {"$exists": str(value).lower() in ("1", "true", "yes")}
    if operator == "regex":
        return {"$regex": str(value)}
    if operator == "ne":
        return {"$ne": value}
    return {f"${operator}": _coerce(value)}


def _coerce(value: Any) -> Union[str, int, float, Any]:
    """Turn numeric strings into numbers; leave everything else alone."""
    if not isinstance(value, str) or not _NUMERIC.match(value):
        return value
    if "." in value or "e" in value.lower():
        return float(value)
    return int(value)
