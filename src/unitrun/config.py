"""YAML run configuration and its validation."""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from unitrun.core.discovery import DiscoveryOptions
from unitrun.core.models import Tolerance
from unitrun.errors import ConfigError

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("terminal", "json")

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "discovery": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "file_pattern": {"type": "string", "minLength": 1},
                "test_prefix": {"type": "string", "minLength": 1},
                "setup": {"type": "string", "minLength": 1},
                "teardown": {"type": "string", "minLength": 1},
            },
        },
        "tolerance": {
            "oneOf": [
                {"type": "number", "exclusiveMinimum": 0},
                {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "abs": {"type": "number", "minimum": 0},
                        "rel": {"type": "number", "minimum": 0},
                    },
                },
            ]
        },
        "report": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "format": {"enum": list(REPORT_FORMATS)},
                "path": {"type": ["string", "null"]},
                "color": {"type": "boolean"},
            },
        },
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class RunConfig:
    """Settings for a single run; CLI flags override file values."""

    discovery: DiscoveryOptions = field(default_factory=DiscoveryOptions)
    tolerance: Tolerance = field(default_factory=Tolerance)
    report_format: str = "terminal"
    report_path: Optional[str] = None
    color: bool = True

    def override(self, **changes: Any) -> "RunConfig":
        """Return a copy with every non-``None`` value in ``changes`` applied."""

        discovery_changes = {
            key: changes.pop(key)
            for key in ("file_pattern", "test_prefix")
            if key in changes
        }
        discovery_changes = {k: v for k, v in discovery_changes.items() if v is not None}
        updates = {key: value for key, value in changes.items() if value is not None}
        if discovery_changes:
            updates["discovery"] = dataclasses.replace(self.discovery, **discovery_changes)
        return dataclasses.replace(self, **updates)


def load_config(path: str | Path) -> RunConfig:
    """Load and validate a YAML configuration file."""

    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    config = parse_config(raw)
    logger.debug("Loaded configuration from %s", config_path)
    return config


def parse_config(raw: Any) -> RunConfig:
    if not isinstance(raw, Mapping):
        raise ConfigError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigError(f"Config schema validation failed: {messages}")
    return RunConfig(
        discovery=_parse_discovery(raw.get("discovery") or {}),
        tolerance=_parse_tolerance(raw.get("tolerance")),
        **_parse_report(raw.get("report") or {}),
    )


def _parse_discovery(raw: Mapping[str, Any]) -> DiscoveryOptions:
    defaults = DiscoveryOptions()
    return DiscoveryOptions(
        file_pattern=str(raw.get("file_pattern", defaults.file_pattern)),
        test_prefix=str(raw.get("test_prefix", defaults.test_prefix)),
        setup_name=str(raw.get("setup", defaults.setup_name)),
        teardown_name=str(raw.get("teardown", defaults.teardown_name)),
    )


def _parse_tolerance(raw: Any) -> Tolerance:
    if raw is None:
        return Tolerance()
    if isinstance(raw, (int, float)):
        return Tolerance.uniform(float(raw))
    return Tolerance.from_mapping(raw)


def _parse_report(raw: Mapping[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if "format" in raw:
        values["report_format"] = raw["format"]
    if "path" in raw:
        values["report_path"] = raw["path"]
    if "color" in raw:
        values["color"] = bool(raw["color"])
    return values
