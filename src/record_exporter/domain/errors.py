"""
Export Error Taxonomy.

Errors raised before streaming begins are fully recoverable: nothing has been
written and the caller can send a clean error response. Errors raised after
streaming begins leave a truncated document at the sink; ``output_started``
tells the two apart. A truncated export is a legitimate failure mode, not
something to paper over by buffering the whole result.
"""

from __future__ import annotations

from typing import Optional

from record_exporter.domain.entities import ResultCode


class ExportError(Exception):
    """Base class for all export failures."""

    result_code: ResultCode = ResultCode.INTERNAL_ERROR

    def __init__(self, message: str, output_started: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.output_started = output_started


class ConfigurationError(ExportError):
    """Invalid export configuration detected before any work is done."""

    result_code = ResultCode.BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidFormatError(ConfigurationError):
    """Requested format has no registered encoder."""

    result_code = ResultCode.INVALID_FORMAT

    def __init__(self, format_name: str) -> None:
        super().__init__(f"Unknown format: {format_name}", field="format")
        self.format_name = format_name


class MissingIdentityError(ConfigurationError):
    """Unprivileged export requested without a caller identity."""

    result_code = ResultCode.UNAUTHORIZED


class FormNotFoundError(ExportError):
    """Target form does not exist."""

    result_code = ResultCode.NOT_FOUND


class FormLoadError(ExportError):
    """Form repository refused or failed to load the target form."""

    result_code = ResultCode.UNAUTHORIZED


class VetoError(ExportError):
    """An ``alter_export`` hook rejected the export."""

    result_code = ResultCode.BAD_REQUEST


class EncoderInitError(ExportError):
    """Encoder could not prepare its preamble for this form."""

    result_code = ResultCode.BAD_REQUEST


class TransformError(ExportError):
    """A single record could not be transformed."""


class MalformedRecordError(TransformError):
    """Record shape is invalid, cyclic, or nested beyond the depth cap."""


class EncodingError(ExportError):
    """Encoder could not serialize a value."""


class StoreError(ExportError):
    """Record store failed to open or read a cursor."""


class SinkClosedError(ExportError):
    """The sink consumer went away before the export finished."""

    result_code = ResultCode.CANCELLED
