"""
Hook Registry - Extension Points Invoked at Named Pipeline Stages.

Stages:
    alter_export(query, form, encoder)
        Called once per export before any record is read. May mutate the
        query or encoder in place, or raise VetoError to reject the export.
    alter_field_url(default_url, form, field) -> str | None
        Called per linked field. Returning None keeps the current url.
    alter_query(query) -> Query | None
        Called once, right before the cursor is opened. Returning None keeps
        the query as mutated in place.

Usage:
    hooks = HookRegistry()

    @hooks.on_alter_field_url
    def use_alias(url, form, field):
        return url.replace("/form/", "/project/main/form/")

Scope and owner constraints are re-applied after these hooks run, so a hook
can narrow an export but never widen it.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from record_exporter.domain.entities import Form
from record_exporter.domain.errors import ExportError, VetoError
from record_exporter.domain.value_objects import Query, Record

logger = logging.getLogger(__name__)

ExportAlterHook = Callable[[Query, Form, Any], None]
FieldUrlHook = Callable[[str, Form, Record], Optional[str]]
QueryAlterHook = Callable[[Query], Optional[Query]]


class HookRegistry:
    """Thread-safe registry of extension callbacks."""

    def __init__(self) -> None:
        self._export_hooks: List[ExportAlterHook] = []
        self._field_url_hooks: List[FieldUrlHook] = []
        self._query_hooks: List[QueryAlterHook] = []
        self._lock = RLock()

    def on_alter_export(self, callback: ExportAlterHook) -> ExportAlterHook:
        """Register an ``alter_export`` callback. Usable as a decorator."""
        with self._lock:
            self._export_hooks.append(callback)
        logger.info(f"Registered alter_export hook: {_name(callback)}")
        return callback

    def on_alter_field_url(self, callback: FieldUrlHook) -> FieldUrlHook:
        """Register an ``alter_field_url`` callback. Usable as a decorator."""
        with self._lock:
            self._field_url_hooks.append(callback)
        logger.info(f"Registered alter_field_url hook: {_name(callback)}")
        return callback

    def on_alter_query(self, callback: QueryAlterHook) -> QueryAlterHook:
        """Register an ``alter_query`` callback. Usable as a decorator."""
        with self._lock:
            self._query_hooks.append(callback)
        logger.info(f"Registered alter_query hook: {_name(callback)}")
        return callback

    def alter_export(self, query: Query, form: Form, encoder: Any) -> None:
        """
        Run every ``alter_export`` callback in registration order.

        Raises:
            VetoError: A callback vetoed the export or failed
        """
        for hook in self._snapshot(self._export_hooks):
            try:
                hook(query, form, encoder)
            except ExportError:
                raise
            except Exception as e:
                logger.warning(f"alter_export hook {_name(hook)} rejected export: {e}")
                raise VetoError(str(e) or type(e).__name__) from e

    def alter_field_url(self, url: str, form: Form, field: Record) -> str:
        for hook in self._snapshot(self._field_url_hooks):
            result = hook(url, form, field)
            if result is not None:
                url = result
        return url

    def alter_query(self, query: Query) -> Query:
        for hook in self._snapshot(self._query_hooks):
            result = hook(query)
            if result is not None:
                query = result
        return query

    def counts(self) -> Dict[str, int]:
        """Number of callbacks registered per stage."""
        with self._lock:
            return {
                "alter_export": len(self._export_hooks),
                "alter_field_url": len(self._field_url_hooks),
                "alter_query": len(self._query_hooks),
            }

    def clear(self) -> None:
        with self._lock:
            self._export_hooks.clear()
            self._field_url_hooks.clear()
            self._query_hooks.clear()

    def _snapshot(self, hooks: List[Any]) -> List[Any]:
        with self._lock:
            return list(hooks)


def _name(callback: Any) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
