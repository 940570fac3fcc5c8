"""
Forms Package - Form Schema Helpers.

    - iter_components: Walk nested components with their data paths
    - input_fields: Data-bearing components in display order
    - resolve_protected_fields: Build the ProtectedFieldSet for a context
"""

from record_exporter.forms.components import input_fields, iter_components
from record_exporter.forms.protected_fields import redact, resolve_protected_fields

__all__ = ["input_fields", "iter_components", "redact", "resolve_protected_fields"]
