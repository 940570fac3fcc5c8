"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class OnRecordError(str, Enum):
    """What to do when a single record fails to transform."""

    SKIP = "skip"
    ABORT = "abort"


class GlobalConfig(BaseModel):
    """Global configuration settings."""

    api_host: str = Field(default="http://localhost:3001")
    default_format: str = Field(default="json")
    protected_context: str = Field(default="export")


class QueryConfig(BaseModel):
    """Field names used when injecting mandatory query constraints."""

    scope_field: str = Field(default="form")
    owner_field: str = Field(default="owner")
    deleted_field: str = Field(default="deleted")
    reserved_params: List[str] = Field(
        default_factory=lambda: ["limit", "skip", "select", "sort", "populate", "format"]
    )


class TransformConfig(BaseModel):
    """Configuration for per-record transformation."""

    max_depth: int = Field(default=32, ge=1, le=512)
    on_record_error: OnRecordError = Field(default=OnRecordError.SKIP)
    identity_field: str = Field(default="_id")
    collection_field: str = Field(default="form")
    url_field: str = Field(default="url")
    link_path_template: str = Field(default="/form/{form}/submission/{id}")

    @field_validator("link_path_template")
    @classmethod
    def _template_has_placeholders(cls, value: str) -> str:
        if "{form}" not in value or "{id}" not in value:
            raise ValueError("link_path_template must contain {form} and {id}")
        return value


class EncodingConfig(BaseModel):
    """Configuration shared by encoders."""

    flush_threshold_bytes: int = Field(default=64 * 1024, ge=1)
    csv_delimiter: str = Field(default=",", min_length=1, max_length=1)
    csv_metadata_columns: List[str] = Field(
        default_factory=lambda: ["_id", "created", "modified"]
    )


class SinkConfig(BaseModel):
    """Configuration for queue-backed sinks."""

    max_pending_chunks: int = Field(default=16, ge=1)
    poll_interval_seconds: float = Field(default=0.05, gt=0)


class ResilienceConfig(BaseModel):
    """Retry settings for form loading and cursor opening."""

    max_attempts: int = Field(default=3, ge=1)
    base_delay_seconds: float = Field(default=0.5, ge=0)
    max_delay_seconds: float = Field(default=10.0, ge=0)


class ExportConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    global_settings: GlobalConfig = Field(
        default_factory=GlobalConfig,
        alias="global",
    )
    query: QueryConfig = Field(default_factory=QueryConfig)
    transform: TransformConfig = Field(default_factory=TransformConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    sink: SinkConfig = Field(default_factory=SinkConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)

    model_config = {"populate_by_name": True}
