"""
Hooks Package - Extension Points.

    - HookRegistry: Ordered callbacks for the named pipeline stages
      ``alter_export``, ``alter_field_url`` and ``alter_query``
"""

from record_exporter.hooks.registry import HookRegistry

__all__ = ["HookRegistry"]
