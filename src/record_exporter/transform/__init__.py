"""
Transform Package - Per-Record Transformation.

    - LinkResolver: Builds the canonical URL of a referenced record
    - RowTransformer: Link injection followed by protected field redaction

Transformation runs sequentially, one record at a time, in cursor order.
"""

from record_exporter.transform.links import LinkResolver
from record_exporter.transform.row_transformer import RowTransformer

__all__ = ["LinkResolver", "RowTransformer"]
