"""Configuration management for semver-release."""

from __future__ import annotations

from semver_release.config.loader import load_config, load_rules_file
from semver_release.config.models import (
    CommitsConfig,
    ProjectConfig,
    RulesConfig,
    SemverReleaseConfig,
    TaggerConfig,
    VersionConfig,
)

__all__ = [
    "CommitsConfig",
    "ProjectConfig",
    "RulesConfig",
    "SemverReleaseConfig",
    "TaggerConfig",
    "VersionConfig",
    "load_config",
    "load_rules_file",
]
