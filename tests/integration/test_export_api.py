"""
Integration Tests for the export_form entry point.

Tests cover:
    - Identity, format and filter plumbing from request to coordinator
    - Result codes and status numbers for every outcome
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator

import pytest

from record_exporter.adapters.memory_store import InMemoryRecordStore
from record_exporter.adapters.sinks import BytesSink
from record_exporter.api.export_api import ExportResponse, export_form
from record_exporter.domain.entities import ResultCode
from record_exporter.domain.errors import VetoError
from record_exporter.hooks.registry import HookRegistry
from record_exporter.pipeline.export_coordinator import ExportCoordinator

USER = {"_id": "u1", "email": "ada@example.com"}


def exported_ids(sink: BytesSink) -> list:
    return [record["_id"] for record in json.loads(sink.getvalue())]


class TestExportApi:
    """Test cases for export_form."""

    def test_default_json_export(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: Authenticated user, no format parameter
        EXPECTED: OK with JSON content type and the user's records
        """
        # Act
        response = export_form(coordinator, "5", {}, {}, USER, sink)

        # Assert
        assert isinstance(response, ExportResponse)
        assert response.ok
        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.summary is not None
        assert response.summary.records_written == 2
        assert exported_ids(sink) == ["r1", "r5"]

    def test_form_path_alias(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: Form addressed by its path instead of its id
        EXPECTED: Same export, scoped to the form id
        """
        # Act
        response = export_form(coordinator, "customer", {}, {}, USER, sink)

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r1", "r5"]

    def test_missing_user(
        self, coordinator: ExportCoordinator, sink: BytesSink, record_store: InMemoryRecordStore
    ) -> None:
        """
        SCENARIO: No authenticated user
        EXPECTED: UNAUTHORIZED, store untouched
        """
        # Act
        response = export_form(coordinator, "5", {}, {}, None, sink)

        # Assert
        assert response.code == ResultCode.UNAUTHORIZED
        assert response.status == 401
        assert record_store.queries == []

    def test_unknown_format(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: format=XML
        EXPECTED: INVALID_FORMAT with status 400
        """
        # Act
        response = export_form(coordinator, "5", {"format": "XML"}, {}, USER, sink)

        # Assert
        assert response.code == ResultCode.INVALID_FORMAT
        assert response.status == 400
        assert sink.chunks == []

    def test_format_case_insensitive(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: format=CSV
        EXPECTED: CSV export with text/csv content type
        """
        # Act
        response = export_form(coordinator, "5", {"format": "CSV"}, {}, USER, sink)

        # Assert
        assert response.ok
        assert response.content_type == "text/csv"
        assert sink.getvalue().startswith(b"_id,created,modified")

    def test_parameters_become_filter(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: data.name parameter alongside reserved paging parameters
        EXPECTED: Only the matching record exported
        """
        # Act
        response = export_form(
            coordinator, "5", {"data.name": "Dee", "limit": "10"}, {}, USER, sink, is_admin=True
        )

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r5"]

    def test_query_header_replaces_parameters(
        self, coordinator: ExportCoordinator, sink: BytesSink
    ) -> None:
        """
        SCENARIO: X-Query header present together with a parameter filter
        EXPECTED: Header filter wins, parameters ignored
        """
        # Arrange
        headers = {"X-Query": json.dumps({"data.name": "Bob"})}

        # Act
        response = export_form(
            coordinator, "5", {"data.name": "Ada"}, headers, USER, sink, is_admin=True
        )

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r2"]

    def test_malformed_query_header(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: X-Query header with invalid JSON
        EXPECTED: Header ignored, export still succeeds
        """
        # Act
        response = export_form(coordinator, "5", {}, {"x-query": "{oops"}, USER, sink)

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r1", "r5"]

    def test_malformed_query_header_falls_back_to_parameters(
        self, coordinator: ExportCoordinator, sink: BytesSink
    ) -> None:
        """
        SCENARIO: Invalid X-Query header sent together with a parameter filter
        EXPECTED: Header ignored, parameter filter selects the records
        """
        # Act
        response = export_form(
            coordinator, "5", {"data.name": "Dee"}, {"x-query": "{oops"}, USER, sink, is_admin=True
        )

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r5"]

    @pytest.mark.parametrize(
        "flags",
        [{"is_admin": True}, {"skip_owner_filter": True}],
    )
    def test_privileged_callers_see_all_owners(
        self, coordinator: ExportCoordinator, sink: BytesSink, flags: Dict[str, bool]
    ) -> None:
        """
        SCENARIO: Admin or project owner
        EXPECTED: Records of every owner exported
        """
        # Act
        response = export_form(coordinator, "5", {}, {}, USER, sink, **flags)

        # Assert
        assert response.ok
        assert exported_ids(sink) == ["r1", "r2", "r5"]

    def test_form_not_found(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: Unknown form
        EXPECTED: NOT_FOUND with status 404
        """
        # Act
        response = export_form(coordinator, "missing", {}, {}, USER, sink)

        # Assert
        assert response.code == ResultCode.NOT_FOUND
        assert response.status == 404

    def test_veto(
        self, coordinator: ExportCoordinator, hooks: HookRegistry, sink: BytesSink
    ) -> None:
        """
        SCENARIO: alter_export hook vetoes
        EXPECTED: BAD_REQUEST with the veto message
        """
        # Arrange
        def deny(query: Any, form: Any, encoder: Any) -> None:
            raise VetoError("Export window closed")

        hooks.on_alter_export(deny)

        # Act
        response = export_form(coordinator, "5", {}, {}, USER, sink)

        # Assert
        assert response.code == ResultCode.BAD_REQUEST
        assert response.message == "Export window closed"
        assert not response.output_started

    def test_store_failure(self, coordinator: ExportCoordinator, sink: BytesSink) -> None:
        """
        SCENARIO: Store cursor fails mid-stream after output was flushed
        EXPECTED: INTERNAL_ERROR with output_started set
        """
        # Arrange
        def broken_cursor(query: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
            yield {"_id": "x1", "form": "5", "data": {}}
            raise ConnectionError("connection reset")

        coordinator.store.open_cursor = broken_cursor  # type: ignore[method-assign]
        coordinator.config.encoding.flush_threshold_bytes = 1

        # Act
        response = export_form(coordinator, "5", {}, {}, USER, sink)

        # Assert
        assert response.code == ResultCode.INTERNAL_ERROR
        assert response.status == 500
        assert response.output_started
        assert sink.error is not None
