"""
In-Memory Form Repository.

Dictionary-backed FormRepository for development and testing.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from record_exporter.domain.entities import Form


class InMemoryFormRepository:
    """Form lookup over a fixed set of forms."""

    def __init__(self, forms: Optional[Iterable[Form]] = None) -> None:
        self._forms: Dict[str, Form] = {}
        for form in forms or []:
            self.add(form)
        self.lookups = 0

    def add(self, form: Form) -> None:
        """Register a form under its id and, if set, its path."""
        self._forms[form.id] = form
        if form.path:
            self._forms[form.path] = form

    def load_form(self, form_id: str) -> Optional[Form]:
        self.lookups += 1
        return self._forms.get(form_id)
