"""
Cursor Package - Lazy Record Access.

    - RecordCursor: pull-based ``next``/``close`` wrapper over the lazy
      iterator a RecordStore returns
"""

from record_exporter.cursor.record_cursor import RecordCursor

__all__ = ["RecordCursor"]
