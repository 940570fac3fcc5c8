"""
Export API: request plumbing around the ExportCoordinator.

Reads the requested format, the ``x-query`` override header and the request
parameters, resolves the caller identity, and turns every outcome into an
ExportResponse instead of an exception. HTTP routing and authentication stay
with the transport layer.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from record_exporter.domain.entities import ExportRequest, ExportSummary, ResultCode
from record_exporter.domain.errors import ExportError
from record_exporter.interfaces.output_sink import OutputSink
from record_exporter.pipeline.export_coordinator import ExportCoordinator
from record_exporter.query.params import derive_filter

logger = logging.getLogger(__name__)

QUERY_HEADER = "x-query"


class ExportResponse(BaseModel):
    """Transport-neutral outcome of an export call."""

    code: ResultCode
    message: str = ""
    content_type: Optional[str] = None
    output_started: bool = False
    summary: Optional[ExportSummary] = None

    @property
    def status(self) -> int:
        return self.code.http_status

    @property
    def ok(self) -> bool:
        return self.code == ResultCode.OK


def export_form(
    coordinator: ExportCoordinator,
    form_id: str,
    params: Mapping[str, Any],
    headers: Mapping[str, str],
    user: Optional[Mapping[str, Any]],
    sink: OutputSink,
    is_admin: bool = False,
    skip_owner_filter: bool = False,
) -> ExportResponse:
    """
    Export the records of one form into ``sink``.

    Args:
        coordinator: Configured export coordinator
        form_id: Target form identifier or path
        params: Request query parameters
        headers: Request headers (matched case-insensitively)
        user: Authenticated user document, must carry ``_id``
        sink: Output destination
        is_admin: Caller is an administrator
        skip_owner_filter: Caller owns the project and may read all records

    Returns:
        ExportResponse describing the outcome
    """
    if not user or user.get("_id") is None:
        return ExportResponse(
            code=ResultCode.UNAUTHORIZED, message="Missing user identity"
        )

    format_name = str(
        params.get("format") or coordinator.config.global_settings.default_format
    ).lower()
    if not coordinator.encoders.has_format(format_name):
        return ExportResponse(code=ResultCode.INVALID_FORMAT, message="Unknown format")

    # The builder prefers a well-formed header and falls back to the parameters
    raw_filter = _header(headers, QUERY_HEADER)
    derived = derive_filter(params, coordinator.config.query.reserved_params)

    request = ExportRequest(
        form_id=form_id,
        format=format_name,
        raw_filter=raw_filter,
        derived_filter=derived,
        is_privileged=is_admin or skip_owner_filter,
        owner_id=str(user["_id"]),
    )

    try:
        summary = coordinator.export(request, sink)
    except ExportError as e:
        return ExportResponse(
            code=e.result_code, message=e.message, output_started=e.output_started
        )
    except Exception as e:
        logger.exception(f"Unexpected export failure for form {form_id}")
        return ExportResponse(
            code=ResultCode.INTERNAL_ERROR,
            message=str(e),
        )

    return ExportResponse(
        code=summary.result_code,
        content_type=coordinator.encoders.content_type(format_name),
        summary=summary,
    )


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None
