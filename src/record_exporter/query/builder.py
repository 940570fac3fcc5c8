"""
Query Builder - Merge Caller Filters and Inject Mandatory Constraints.

Resolution order:
    1. A well-formed raw filter replaces the derived filter
    2. A malformed raw filter is logged and ignored
    3. Scope is written unconditionally
    4. A "not deleted" constraint is added unless one is present
    5. Unprivileged callers get an owner equality constraint

No I/O; ``build`` and ``enforce`` never mutate their inputs.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Mapping, Optional, Union

from record_exporter.config.models import QueryConfig
from record_exporter.domain.errors import MissingIdentityError
from record_exporter.domain.value_objects import Query

logger = logging.getLogger(__name__)

RawFilter = Union[str, bytes, Mapping[str, Any], None]


class QueryBuilder:
    """Builds the final store query for one export."""

    def __init__(self, config: Optional[QueryConfig] = None) -> None:
        self.config = config or QueryConfig()

    def build(
        self,
        raw_filter: RawFilter,
        derived_filter: Optional[Mapping[str, Any]],
        scope_id: str,
        is_privileged: bool,
        owner_id: Optional[str],
    ) -> Query:
        """
        Build the final query.

        Args:
            raw_filter: Explicit caller filter, as a mapping or JSON text
            derived_filter: Filter derived from request parameters
            scope_id: Owning form identifier, always enforced
            is_privileged: Skip the owner restriction when True
            owner_id: Caller identity used for the owner restriction

        Returns:
            New query dictionary with all mandatory constraints

        Raises:
            MissingIdentityError: Unprivileged call without owner_id
        """
        query = self._parse_raw_filter(raw_filter)
        if query is None:
            query = copy.deepcopy(dict(derived_filter or {}))
        return self.enforce(query, scope_id, is_privileged, owner_id)

    def enforce(
        self,
        query: Mapping[str, Any],
        scope_id: str,
        is_privileged: bool,
        owner_id: Optional[str],
    ) -> Query:
        """Re-apply scope, soft-delete and owner constraints to ``query``."""
        result: Query = dict(query)
        result[self.config.scope_field] = scope_id

        if self.config.deleted_field not in result:
            result[self.config.deleted_field] = {"$eq": None}

        if not is_privileged:
            if owner_id is None:
                raise MissingIdentityError(
                    "Owner identity is required for unprivileged exports",
                    field="owner_id",
                )
            result[self.config.owner_field] = owner_id

        return result

    def _parse_raw_filter(self, raw_filter: RawFilter) -> Optional[Query]:
        """Return the raw filter as a fresh dict, or None if absent or malformed."""
        if raw_filter is None:
            return None

        if isinstance(raw_filter, Mapping):
            return copy.deepcopy(dict(raw_filter))

        try:
            parsed = json.loads(raw_filter)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed raw filter: {e}")
            return None

        if not isinstance(parsed, dict):
            logger.warning(
                f"Ignoring raw filter of type {type(parsed).__name__}, expected an object"
            )
            return None

        return parsed
