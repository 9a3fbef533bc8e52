from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_BACKUP_KEEP,
    DEFAULT_REPORT_DIRECTORY,
    BackupConfig,
    EditorConfig,
)

"""Config loader.

Responsibilities:
- Load the YAML config (config/editor.yml by default)
- Validate it against config_schema.json shipped next to this module
- Apply defaults (report_directory=./logs, backup enabled, max_keep=10)
"""

DEFAULT_CONFIG_PATH = Path("config/editor.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: if the schema file is missing or not valid JSON, or the
            config fails validation (missing required keys, wrong types,
            unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> EditorConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top level must be a mapping")

    _validate_config_schema(data)

    backup_raw = data.get("backup") or {}
    backup = BackupConfig(
        enabled=backup_raw.get("enabled", True),
        max_keep=backup_raw.get("max_keep", DEFAULT_BACKUP_KEEP),
    )
    return EditorConfig(
        genotype_directory=data["genotype_directory"],
        report_directory=data.get("report_directory", DEFAULT_REPORT_DIRECTORY),
        backup=backup,
    )


def default_config() -> EditorConfig:
    """Configuration used by the single-file commands when no config file exists."""
    return EditorConfig(genotype_directory=None)
