"""
Request Validator - Validate Export Requests.

Validates requests before any expensive work:
    - Format has a registered encoder
    - Form identifier is present
    - Unprivileged callers carry an identity

Checks run in that order and the first failure is raised, so an unknown
format is always reported as INVALID_FORMAT.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from record_exporter.domain.entities import ExportRequest
from record_exporter.domain.errors import (
    ConfigurationError,
    InvalidFormatError,
    MissingIdentityError,
)

if TYPE_CHECKING:
    from record_exporter.encoders.registry import EncoderRegistry

logger = logging.getLogger(__name__)


class RequestValidator:
    """Validates export requests before processing."""

    def validate(self, request: ExportRequest, registry: "EncoderRegistry") -> None:
        """
        Validate an export request.

        Args:
            request: The export request to validate
            registry: Registry of available formats

        Raises:
            InvalidFormatError: Unknown format
            ConfigurationError: Missing form identifier
            MissingIdentityError: Unprivileged request without owner
        """
        if not registry.has_format(request.format):
            logger.error(
                f"Request validation failed: unknown format {request.format!r}, "
                f"supported: {', '.join(registry.formats())}"
            )
            raise InvalidFormatError(request.format)

        if not request.form_id.strip():
            logger.error("Request validation failed: empty form id")
            raise ConfigurationError("Form identifier is required", field="form_id")

        if not request.is_privileged and not request.owner_id:
            logger.error("Request validation failed: missing owner identity")
            raise MissingIdentityError(
                "Owner identity is required for unprivileged exports", field="owner_id"
            )

        logger.debug(
            f"Request validated: form={request.form_id}, format={request.normalized_format}"
        )
