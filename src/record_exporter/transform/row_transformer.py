"""
Row Transformer - Link Injection and Redaction.

For each record:
    1. Walk values in insertion order, parents before children
    2. Give every nested record that carries an identity and a collection
       a ``url`` attribute computed by the link resolver
    3. Keep descending into nested records and sequences
    4. Remove protected fields

Records are caller data, so nesting depth is unbounded in principle. The walk
is capped at ``max_depth`` levels and rejects reference cycles; both raise
MalformedRecordError instead of exhausting the interpreter stack.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Set

from record_exporter.config.models import TransformConfig
from record_exporter.domain.entities import Form
from record_exporter.domain.errors import ExportError, MalformedRecordError, TransformError
from record_exporter.domain.value_objects import (
    ProtectedFieldSet,
    Record,
    ValueKind,
    classify_value,
)
from record_exporter.forms.protected_fields import redact, resolve_protected_fields

logger = logging.getLogger(__name__)

LinkResolverFn = Callable[[Any, Any, Form, Record], str]


class RowTransformer:
    """Applies link injection and redaction to one record at a time."""

    def __init__(
        self,
        config: Optional[TransformConfig] = None,
        context: str = "export",
    ) -> None:
        """
        Initialize transformer.

        Args:
            config: Transform settings (depth cap, field names)
            context: Context used when protected fields must be resolved here
        """
        self.config = config or TransformConfig()
        self.context = context

    def transform(
        self,
        record: Record,
        form: Form,
        link_resolver: LinkResolverFn,
        protected_fields: Optional[ProtectedFieldSet] = None,
    ) -> Record:
        """
        Transform ``record`` in place and return it.

        Args:
            record: Raw record; ownership passes to this call
            form: Form the record belongs to
            link_resolver: Computes the url of a linked record
            protected_fields: Pre-resolved set; resolved from ``form`` if None

        Returns:
            The same record, linked and redacted

        Raises:
            MalformedRecordError: Non-mapping record, cycle, or depth cap hit
            TransformError: Link resolution failed
        """
        if classify_value(record) is not ValueKind.RECORD:
            raise MalformedRecordError(
                f"Expected a record mapping, got {type(record).__name__}"
            )

        self._visit(record, form, link_resolver, depth=0, ancestors=set())

        protected = protected_fields
        if protected is None:
            protected = resolve_protected_fields(form, self.context)
        return redact(record, protected)

    def _visit(
        self,
        value: Any,
        form: Form,
        link_resolver: LinkResolverFn,
        depth: int,
        ancestors: Set[int],
    ) -> None:
        kind = classify_value(value)
        if kind is ValueKind.SCALAR:
            return

        if depth > self.config.max_depth:
            raise MalformedRecordError(
                f"Record nesting exceeds max depth {self.config.max_depth}"
            )

        marker = id(value)
        if marker in ancestors:
            raise MalformedRecordError("Record contains a reference cycle")
        ancestors.add(marker)

        children = list(value.values()) if kind is ValueKind.RECORD else list(value)
        for child in children:
            if self._is_linkable(child):
                self._attach_url(child, form, link_resolver)
            self._visit(child, form, link_resolver, depth + 1, ancestors)

        ancestors.discard(marker)

    def _is_linkable(self, value: Any) -> bool:
        if classify_value(value) is not ValueKind.RECORD:
            return False
        return bool(value.get(self.config.identity_field)) and (
            value.get(self.config.collection_field) is not None
        )

    def _attach_url(self, field: Record, form: Form, link_resolver: LinkResolverFn) -> None:
        identity = field[self.config.identity_field]
        collection_id = field[self.config.collection_field]
        try:
            url = link_resolver(collection_id, identity, form, field)
        except ExportError:
            raise
        except Exception as e:
            raise TransformError(
                f"Link resolution failed for {collection_id}/{identity}: {e}"
            ) from e
        field[self.config.url_field] = url
