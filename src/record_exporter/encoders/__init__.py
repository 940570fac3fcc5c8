"""
Encoders Package - Format-Specific Serializers.

    - BaseEncoder: Buffered writer shared by all formats
    - JsonEncoder: One JSON array
    - NdjsonEncoder: One JSON document per line
    - CsvEncoder: Header row plus one row per record
    - EncoderRegistry: Case-insensitive format name -> encoder factory

Encoders own their framing. Output is buffered up to the configured flush
threshold, so memory stays bounded no matter how many records are written.
"""

from record_exporter.encoders.base import BaseEncoder
from record_exporter.encoders.csv_encoder import CsvEncoder
from record_exporter.encoders.json_encoder import JsonEncoder, NdjsonEncoder
from record_exporter.encoders.registry import EncoderRegistry

__all__ = [
    "BaseEncoder",
    "CsvEncoder",
    "EncoderRegistry",
    "JsonEncoder",
    "NdjsonEncoder",
]
