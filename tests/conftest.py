"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from record_exporter.adapters.console_logger import ConsoleAuditLogger
from record_exporter.adapters.memory_forms import InMemoryFormRepository
from record_exporter.adapters.memory_store import InMemoryRecordStore
from record_exporter.adapters.metrics_collector import InMemoryMetricsCollector
from record_exporter.adapters.sinks import BytesSink
from record_exporter.config.models import ExportConfig
from record_exporter.domain.entities import Form
from record_exporter.hooks.registry import HookRegistry
from record_exporter.pipeline.export_coordinator import ExportCoordinator

API_HOST = "https://api.example.com"


def make_record(
    record_id: str,
    owner: str = "u1",
    form: str = "5",
    data: Optional[Dict[str, Any]] = None,
    deleted: Any = None,
) -> Dict[str, Any]:
    """Build a stored record in the shape the store returns."""
    record: Dict[str, Any] = {
        "_id": record_id,
        "form": form,
        "owner": owner,
        "created": "2024-01-01T00:00:00Z",
        "modified": "2024-01-02T00:00:00Z",
        "data": data if data is not None else {"name": f"Customer {record_id}"},
    }
    if deleted is not None:
        record["deleted"] = deleted
    return record


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def export_config() -> ExportConfig:
    """Default configuration with an explicit host and no retry delay."""
    return ExportConfig.model_validate(
        {
            "global": {"api_host": API_HOST},
            "resilience": {"max_attempts": 2, "base_delay_seconds": 0},
        }
    )


@pytest.fixture
def sample_form() -> Form:
    """Customer form with layout, tree, resource and protected components."""
    return Form(
        id="5",
        path="customer",
        title="Customer",
        components=[
            {"key": "name", "label": "Name", "input": True},
            {"key": "email", "label": "Email", "input": True},
            {"key": "ssn", "label": "SSN", "input": True, "protected": True},
            {
                "key": "panel1",
                "input": False,
                "components": [{"key": "phone", "label": "Phone", "input": True}],
            },
            {"key": "manager", "label": "Manager", "input": True, "type": "resource"},
            {
                "key": "items",
                "label": "Items",
                "input": True,
                "tree": True,
                "components": [
                    {"key": "product", "label": "Product", "input": True},
                    {"key": "cost", "label": "Cost", "input": True, "protected": True},
                ],
            },
        ],
    )


@pytest.fixture
def sample_records() -> List[Dict[str, Any]]:
    """Records of form 5 and one foreign form, across two owners."""
    return [
        make_record("r1", owner="u1", data={"name": "Ada", "email": "ada@example.com", "ssn": "111"}),
        make_record("r2", owner="u2", data={"name": "Bob", "email": "bob@example.com", "ssn": "222"}),
        make_record("r3", owner="u1", data={"name": "Cy", "ssn": "333"}, deleted="2024-02-01"),
        make_record("r4", owner="u1", form="9", data={"name": "Other form"}),
        make_record(
            "r5",
            owner="u1",
            data={
                "name": "Dee",
                "manager": {"_id": "42", "form": "7", "data": {"name": "Boss"}},
            },
        ),
    ]


@pytest.fixture
def record_store(sample_records: List[Dict[str, Any]]) -> InMemoryRecordStore:
    return InMemoryRecordStore(sample_records, page_size=2)


@pytest.fixture
def form_repository(sample_form: Form) -> InMemoryFormRepository:
    return InMemoryFormRepository([sample_form])


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def sink() -> BytesSink:
    return BytesSink()


@pytest.fixture
def coordinator(
    record_store: InMemoryRecordStore,
    form_repository: InMemoryFormRepository,
    export_config: ExportConfig,
    hooks: HookRegistry,
    console_logger: ConsoleAuditLogger,
    metrics_collector: InMemoryMetricsCollector,
) -> ExportCoordinator:
    """Fully wired coordinator over the in-memory adapters."""
    return ExportCoordinator(
        store=record_store,
        forms=form_repository,
        config=export_config,
        hooks=hooks,
        audit_logger=console_logger,
        metrics_collector=metrics_collector,
    )
