"""
Configuration Loader - YAML Files, Profiles and Environment Overrides.

Layers, lowest precedence first:
    1. Model defaults
    2. The YAML file (``config/default.yaml`` when no path is given)
    3. An optional profile from ``config/profiles/<name>.yaml``
    4. ``RECORD_EXPORTER__<SECTION>__<KEY>`` environment variables

Environment values are parsed as YAML scalars, so ``"false"`` becomes a
bool and ``"1024"`` an int before pydantic validates the result.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from record_exporter.config.models import ExportConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "RECORD_EXPORTER__"
DEFAULT_CONFIG = Path("config") / "default.yaml"
PROFILE_DIR = Path("config") / "profiles"


class ConfigLoader:
    """Builds a validated ExportConfig from layered sources."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Directory that relative paths and profiles resolve against
            environ: Environment to read overrides from (``os.environ`` if None)
        """
        self._base_path = Path(base_path) if base_path is not None else Path(".")
        self._environ = os.environ if environ is None else environ

    def load(
        self,
        config_path: Union[str, Path, None] = None,
        profile: Optional[str] = None,
    ) -> ExportConfig:
        """
        Load configuration.

        Args:
            config_path: YAML file; ``config/default.yaml`` if None
            profile: Optional profile name merged over the file

        Returns:
            Validated ExportConfig

        Raises:
            FileNotFoundError: If an explicit file or the profile is missing
            ValidationError: If the merged values are invalid
        """
        if config_path is None:
            path = self._base_path / DEFAULT_CONFIG
            layers = [self._read_yaml(path)] if path.exists() else []
        else:
            path = self._resolve(config_path)
            layers = [self._read_yaml(path)]

        if profile:
            layers.append(self._read_yaml(self._profile_path(profile)))

        layers.append(self.environment_overrides())

        merged: Dict[str, Any] = {}
        for layer in layers:
            merged = deep_merge(merged, layer)
        logger.debug(
            f"Loaded export config from {path}"
            + (f" with profile {profile}" if profile else "")
        )
        return ExportConfig.model_validate(merged)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> ExportConfig:
        """Validate a configuration mapping; environment overrides do not apply."""
        return ExportConfig.model_validate(config_dict)

    def environment_overrides(self) -> Dict[str, Any]:
        """Nested mapping built from ``RECORD_EXPORTER__`` variables."""
        overrides: Dict[str, Any] = {}
        for name, raw in self._environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            keys = [k.lower() for k in name[len(ENV_PREFIX):].split("__") if k]
            if not keys:
                continue
            node = overrides
            for key in keys[:-1]:
                node = node.setdefault(key, {})
            node[keys[-1]] = yaml.safe_load(raw) if raw != "" else ""
            logger.debug(f"Config override from environment: {'.'.join(keys)}")
        return overrides

    def _resolve(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p

    def _profile_path(self, profile: str) -> Path:
        path = self._base_path / PROFILE_DIR / f"{profile}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return path

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
        return data


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``overlay`` merged in; nested mappings merge key by key."""
    result = dict(base)
    for key, value in overlay.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def load_config(
    config_path: Union[str, Path, None] = None,
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> ExportConfig:
    """Convenience wrapper around ``ConfigLoader(base_path).load``."""
    return ConfigLoader(base_path=base_path).load(config_path, profile)
