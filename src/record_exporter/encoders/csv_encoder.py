"""
CSV Encoder.

Columns are fixed at ``init`` from the form: the configured metadata columns
(``_id``, ``created``, ``modified``) followed by every input component that
is not protected, in display order. Cell rendering:

    - None            -> empty cell
    - bool            -> true / false
    - linked record   -> its url
    - other mappings  -> compact JSON
    - sequences       -> compact JSON of the rendered items
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime, time
from typing import Any, List, Sequence, Tuple

from record_exporter.domain.errors import EncoderInitError
from record_exporter.domain.value_objects import Record, ValueKind, classify_value
from record_exporter.encoders.base import BaseEncoder, json_default
from record_exporter.forms.components import input_fields

Column = Tuple[str, Tuple[str, ...]]


class CsvEncoder(BaseEncoder):
    """Encodes records as CSV rows under a header derived from the form."""

    format_name = "csv"
    content_type = "text/csv"
    file_extension = "csv"

    url_field = "url"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.columns: List[Column] = []

    def _validate(self) -> None:
        data_columns = self._data_columns()
        if not data_columns:
            raise EncoderInitError(
                f"Form {self.form.id} has no exportable fields for CSV export"
            )
        metadata_columns = [
            (name, (name,)) for name in self.config.csv_metadata_columns
        ]
        self.columns = metadata_columns + data_columns

    def _data_columns(self) -> List[Column]:
        columns: List[Column] = []
        for component, path in input_fields(self.form.components):
            record_path = f"data.{path}"
            if self.protected_fields is not None and record_path in self.protected_fields:
                continue
            if component.get("protected"):
                continue
            header = component.get("label") or path
            columns.append((header, tuple(record_path.split("."))))
        return columns

    def _preamble(self) -> bytes:
        return self._row([header for header, _ in self.columns])

    def _encode_record(self, record: Record) -> bytes:
        return self._row(
            [self._render(_lookup(record, segments)) for _, segments in self.columns]
        )

    def _row(self, cells: Sequence[str]) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(
            buffer, delimiter=self.config.csv_delimiter, lineterminator="\r\n"
        )
        writer.writerow(cells)
        return buffer.getvalue().encode("utf-8")

    def _render(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()

        kind = classify_value(value)
        if kind is ValueKind.RECORD:
            if value.get(self.url_field):
                return str(value[self.url_field])
            return json.dumps(value, default=json_default, separators=(",", ":"))
        if kind is ValueKind.SEQUENCE:
            items = [self._render(item) for item in value]
            return json.dumps(items, separators=(",", ":"))
        return str(value)


def _lookup(value: Any, segments: Sequence[str]) -> Any:
    """Follow ``segments`` through mappings, mapping over sequences."""
    for index, segment in enumerate(segments):
        if isinstance(value, list):
            return [_lookup(item, segments[index:]) for item in value]
        if not isinstance(value, dict):
            return None
        value = value.get(segment)
    return value
