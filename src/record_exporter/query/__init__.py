"""
Query Package - Filter Resolution.

    - derive_filter: Request parameters -> structured filter
    - QueryBuilder: Raw/derived filter merge plus mandatory constraints

The builder is the only access-control enforcement point in the pipeline.
Scope and owner constraints are written last, after every caller-supplied
or hook-supplied change, so they cannot be overridden.
"""

from record_exporter.query.builder import QueryBuilder
from record_exporter.query.params import derive_filter

__all__ = ["QueryBuilder", "derive_filter"]
