"""
Form Repository Protocol.

Loads the form that scopes an export. Returning ``None`` means the form does
not exist; raising means the lookup itself failed or was refused.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from record_exporter.domain.entities import Form


@runtime_checkable
class FormRepository(Protocol):
    """Abstract interface for form lookup."""

    def load_form(self, form_id: str) -> Optional[Form]:
        ...
