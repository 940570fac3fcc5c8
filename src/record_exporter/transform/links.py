"""
Link Resolver.

Builds ``<api_host><path>`` for a referenced record. The default path comes
from the configured template; the ``alter_field_url`` hook may substitute
another one before it is resolved against the API host.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import urljoin

from record_exporter.domain.entities import Form
from record_exporter.domain.value_objects import Record

if TYPE_CHECKING:
    from record_exporter.hooks.registry import HookRegistry

DEFAULT_PATH_TEMPLATE = "/form/{form}/submission/{id}"


class LinkResolver:
    """Callable computing the ``url`` attribute of linked records."""

    def __init__(
        self,
        api_host: str,
        path_template: str = DEFAULT_PATH_TEMPLATE,
        hooks: Optional["HookRegistry"] = None,
    ) -> None:
        self.api_host = api_host
        self.path_template = path_template
        self.hooks = hooks

    def default_path(self, collection_id: Any, identity: Any) -> str:
        return self.path_template.format(form=collection_id, id=identity)

    def __call__(
        self,
        collection_id: Any,
        identity: Any,
        form: Form,
        field: Record,
    ) -> str:
        path = self.default_path(collection_id, identity)
        if self.hooks is not None:
            path = self.hooks.alter_field_url(path, form, field)
        return urljoin(self.api_host, path)
