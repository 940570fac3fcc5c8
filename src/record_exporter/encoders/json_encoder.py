"""
JSON Encoders.

JsonEncoder writes a single array: ``[`` then records separated by commas,
then ``]``. Zero records still produce a well-formed ``[]``.
NdjsonEncoder writes one document per line with no framing.
"""

from __future__ import annotations

import json
from typing import Any

from record_exporter.domain.value_objects import Record
from record_exporter.encoders.base import BaseEncoder, json_default


def dumps(record: Any) -> str:
    return json.dumps(
        record,
        default=json_default,
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )


class JsonEncoder(BaseEncoder):
    """Encodes records as one JSON array."""

    format_name = "json"
    content_type = "application/json"
    file_extension = "json"

    def _preamble(self) -> bytes:
        return b"["

    def _encode_record(self, record: Record) -> bytes:
        encoded = dumps(record).encode("utf-8")
        if self.records_written:
            return b"," + encoded
        return encoded

    def _epilogue(self) -> bytes:
        return b"]"


class NdjsonEncoder(BaseEncoder):
    """Encodes records as newline-delimited JSON."""

    format_name = "ndjson"
    content_type = "application/x-ndjson"
    file_extension = "ndjson"

    def _encode_record(self, record: Record) -> bytes:
        return dumps(record).encode("utf-8") + b"\n"
