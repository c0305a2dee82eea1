"""Configuration loading.

Looks for, in order, walking up from the project directory:

1. ``.semver-release.toml`` (settings at the top level)
2. ``pyproject.toml`` (settings under ``[tool.semver-release]``)

When neither exists, or pyproject.toml has no such section, defaults
are used. Release rules can also come from a standalone JSON file::

    {"rules": [{"type": "feat", "release": "minor"}]}
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from semver_release.config.models import SemverReleaseConfig
from semver_release.core.rules import ReleaseRuleTable
from semver_release.exceptions import ConfigNotFoundError, ConfigValidationError

CONFIG_FILENAME = ".semver-release.toml"
PYPROJECT_FILENAME = "pyproject.toml"
TOOL_SECTION = "semver-release"


def find_config_file(start: Path | None = None) -> Path:
    """Find the nearest configuration file.

    Args:
        start: Directory to start searching from (defaults to cwd)

    Returns:
        Path to .semver-release.toml or pyproject.toml

    Raises:
        ConfigNotFoundError: If no configuration file exists up to the root
    """
    current = (start or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        for filename in (CONFIG_FILENAME, PYPROJECT_FILENAME):
            candidate = directory / filename
            if candidate.is_file():
                return candidate

    raise ConfigNotFoundError(
        f"No {CONFIG_FILENAME} or {PYPROJECT_FILENAME} found in {current} or its parents"
    )


def load_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(data: dict[str, Any], path: Path | None = None) -> dict[str, Any]:
    """Return the semver-release settings from parsed TOML.

    A pyproject.toml keeps them under [tool.semver-release]; a
    .semver-release.toml keeps them at the top level.
    """
    if path is not None and path.name == CONFIG_FILENAME:
        return data
    section = data.get("tool", {}).get(TOOL_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigValidationError(f"[tool.{TOOL_SECTION}] must be a table")
    return section


def load_config(path: Path | None = None) -> SemverReleaseConfig:
    """Load and validate configuration.

    Args:
        path: Project directory or configuration file; defaults to cwd

    Returns:
        Validated configuration (defaults when nothing is configured)

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    if path is not None and path.is_file():
        config_path = path
    else:
        try:
            config_path = find_config_file(path)
        except ConfigNotFoundError:
            return SemverReleaseConfig()

    settings = extract_tool_config(load_toml(config_path), config_path)

    try:
        return SemverReleaseConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {config_path}:\n{e}") from e


def load_rules_file(path: Path) -> ReleaseRuleTable:
    """Load release rules from a JSON file.

    Args:
        path: JSON file of the form {"rules": [{"type": ..., "release": ...}]}

    Returns:
        Validated rule table

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid JSON or is malformed
        ConfigError: If the rules themselves are invalid
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Rules file not found: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    rules = data.get("rules") if isinstance(data, dict) else None
    if not isinstance(rules, list):
        raise ConfigValidationError(f'{path} must contain a "rules" list')

    pairs: list[tuple[str, str]] = []
    for rule in rules:
        if not isinstance(rule, dict) or "type" not in rule or "release" not in rule:
            raise ConfigValidationError(
                f'Each rule in {path} needs a "type" and a "release" key, got {rule!r}'
            )
        pairs.append((rule["type"], rule["release"]))

    return ReleaseRuleTable.build(pairs)
