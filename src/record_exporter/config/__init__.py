"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of the Record Exporter:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Configuration profiles and environment overrides

Configuration Structure:
    - ExportConfig: Root configuration object
    - GlobalConfig: API host, default format, protected context
    - QueryConfig: Field names used for mandatory constraints
    - TransformConfig: Link injection and record error policy
    - EncodingConfig: Flush threshold and CSV layout
    - SinkConfig: Queue-backed sink sizing
    - ResilienceConfig: Retry settings for pre-stream access
"""

from record_exporter.config.loader import ConfigLoader, load_config
from record_exporter.config.models import (
    EncodingConfig,
    ExportConfig,
    GlobalConfig,
    OnRecordError,
    QueryConfig,
    ResilienceConfig,
    SinkConfig,
    TransformConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "EncodingConfig",
    "ExportConfig",
    "GlobalConfig",
    "OnRecordError",
    "QueryConfig",
    "ResilienceConfig",
    "SinkConfig",
    "TransformConfig",
]
