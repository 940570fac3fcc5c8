"""
Encoder Registry - Format Name to Encoder Factory.

Format names are matched case-insensitively. The registry is consulted before
any store access, so an unknown format is rejected without side effects.

Usage:
    registry = EncoderRegistry()
    registry.register("xlsx", XlsxEncoder)
    encoder = registry.create("CSV", form, sink, config, protected_fields)
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Dict, List, Optional

from record_exporter.config.models import EncodingConfig
from record_exporter.domain.entities import Form
from record_exporter.domain.errors import InvalidFormatError
from record_exporter.domain.value_objects import ProtectedFieldSet
from record_exporter.encoders.csv_encoder import CsvEncoder
from record_exporter.encoders.json_encoder import JsonEncoder, NdjsonEncoder
from record_exporter.interfaces.encoder import Encoder
from record_exporter.interfaces.output_sink import OutputSink

logger = logging.getLogger(__name__)

EncoderFactory = Callable[..., Encoder]


class EncoderRegistry:
    """Thread-safe registry of output formats."""

    def __init__(self, register_defaults: bool = True) -> None:
        self._factories: Dict[str, EncoderFactory] = {}
        self._lock = RLock()
        if register_defaults:
            self.register("json", JsonEncoder)
            self.register("ndjson", NdjsonEncoder)
            self.register("csv", CsvEncoder)

    def register(
        self,
        name: str,
        factory: EncoderFactory,
        replace: bool = False,
    ) -> None:
        """
        Register an encoder factory.

        Args:
            name: Format name (case-insensitive)
            factory: Callable ``(form, sink, config, protected_fields)``
            replace: Allow overriding an existing registration

        Raises:
            ValueError: If the format is registered and replace is False
        """
        key = _normalize(name)
        with self._lock:
            if key in self._factories and not replace:
                raise ValueError(
                    f"Format '{key}' is already registered. Pass replace=True to override."
                )
            self._factories[key] = factory
        logger.debug(f"Registered encoder for format: {key}")

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._factories.pop(_normalize(name), None) is not None

    def has_format(self, name: Optional[str]) -> bool:
        if name is None:
            return False
        with self._lock:
            return _normalize(name) in self._factories

    def formats(self) -> List[str]:
        with self._lock:
            return sorted(self._factories)

    def content_type(self, name: str) -> str:
        """Content type advertised by the encoder registered under ``name``."""
        with self._lock:
            factory = self._factories.get(_normalize(name))
        if factory is None:
            raise InvalidFormatError(name)
        return getattr(factory, "content_type", "application/octet-stream")

    def create(
        self,
        name: str,
        form: Form,
        sink: OutputSink,
        config: Optional[EncodingConfig] = None,
        protected_fields: Optional[ProtectedFieldSet] = None,
    ) -> Encoder:
        """
        Instantiate the encoder for ``name``.

        Raises:
            InvalidFormatError: If no encoder is registered under ``name``
        """
        with self._lock:
            factory = self._factories.get(_normalize(name))
        if factory is None:
            raise InvalidFormatError(name)
        return factory(form, sink, config, protected_fields)


def _normalize(name: str) -> str:
    return name.strip().lower()
