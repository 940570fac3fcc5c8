"""
Protected Field Resolution and Redaction.

A component flagged ``protected`` never leaves the store in any context.
Forms may also list extra record-root paths per context in
``Form.protected_fields``. Both are resolved once per export into an
immutable ProtectedFieldSet.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from record_exporter.domain.entities import Form
from record_exporter.domain.value_objects import ProtectedFieldSet, Record
from record_exporter.forms.components import iter_components

logger = logging.getLogger(__name__)


def resolve_protected_fields(form: Form, context: str) -> ProtectedFieldSet:
    """
    Resolve the protected paths of ``form`` for ``context``.

    Args:
        form: Form whose components are inspected
        context: Output context, e.g. "export"

    Returns:
        ProtectedFieldSet with record-root paths such as ``data.ssn``
    """
    paths = {
        f"data.{path}"
        for component, path in iter_components(form.components)
        if component.get("protected")
    }
    paths.update(form.protected_fields.get(context, []))

    if paths:
        logger.debug(f"Form {form.id}: {len(paths)} protected fields for {context}")
    return ProtectedFieldSet(form_id=form.id, context=context, paths=frozenset(paths))


def redact(record: Record, protected: ProtectedFieldSet) -> Record:
    """Remove every protected path from ``record`` in place and return it."""
    for segments in protected.split_paths:
        _remove_path(record, segments)
    return record


def _remove_path(value: Any, segments: Sequence[str]) -> None:
    if isinstance(value, list):
        for item in value:
            _remove_path(item, segments)
        return

    if not isinstance(value, dict):
        return

    head = segments[0]
    if len(segments) == 1:
        value.pop(head, None)
    elif head in value:
        _remove_path(value[head], segments[1:])
