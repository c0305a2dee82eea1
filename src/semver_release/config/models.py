"""Configuration models for semver-release.

Read from ``[tool.semver-release]`` in pyproject.toml or from the top
level of a ``.semver-release.toml`` file. Every field has a default, so
an empty configuration is valid.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, field_validator

from semver_release.core.commits import DEFAULT_SKIP_RELEASE_PATTERNS
from semver_release.core.engine import ReleaseTarget
from semver_release.core.rules import ReleaseRuleTable
from semver_release.core.version import validate_build_metadata, validate_prerelease

_PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*\Z")


class RulesConfig(BaseModel):
    """Commit types that trigger each bump magnitude.

    Breaking changes always trigger a major bump and need no rule.
    """

    model_config = ConfigDict(extra="forbid")

    major: list[str] = Field(default_factory=list)
    minor: list[str] = Field(default_factory=lambda: ["feat", "perf"])
    patch: list[str] = Field(default_factory=lambda: ["fix"])

    def to_table(self) -> ReleaseRuleTable:
        """Build the validated rule table.

        Raises:
            ConfigError: If a type is unknown, repeated, or no rule is given
        """
        return ReleaseRuleTable.from_mapping(
            {"major": self.major, "minor": self.minor, "patch": self.patch}
        )


class TaggerConfig(BaseModel):
    """Identity recorded on the annotated tags created for releases."""

    model_config = ConfigDict(extra="forbid")

    name: str = "Semver Release"
    email: str = "semver-release@release.ci"


class VersionConfig(BaseModel):
    """Version and tag naming settings."""

    model_config = ConfigDict(extra="forbid")

    tag_prefix: str = "v"
    prerelease: str | None = None
    build_metadata: str | None = None

    @field_validator("prerelease")
    @classmethod
    def check_prerelease(cls, value: str | None) -> str | None:
        return validate_prerelease(value) if value else None

    @field_validator("build_metadata")
    @classmethod
    def check_build_metadata(cls, value: str | None) -> str | None:
        return validate_build_metadata(value) if value else None


class ProjectConfig(BaseModel):
    """A separately versioned project of a monorepo.

    Its releases are tagged "<name>-<tag_prefix><version>" and only the
    commits touching its path count towards them.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    path: str

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not _PROJECT_NAME_PATTERN.match(value):
            raise ValueError(f"Invalid project name: {value!r}")
        return value

    @field_validator("path")
    @classmethod
    def normalize_path(cls, value: str) -> str:
        path = PurePosixPath(value.strip())
        if not value.strip() or path.is_absolute() or ".." in path.parts:
            raise ValueError(f"Project path must be relative to the repository root: {value!r}")
        return str(path)


class CommitsConfig(BaseModel):
    """Commit filtering settings."""

    model_config = ConfigDict(extra="forbid")

    skip_release_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SKIP_RELEASE_PATTERNS)
    )


class SemverReleaseConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    remote: str = "origin"
    push: bool = False

    rules: RulesConfig = Field(default_factory=RulesConfig)
    tagger: TaggerConfig = Field(default_factory=TaggerConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    projects: list[ProjectConfig] = Field(default_factory=list)

    @field_validator("projects")
    @classmethod
    def unique_project_names(cls, value: list[ProjectConfig]) -> list[ProjectConfig]:
        seen: set[str] = set()
        for project in value:
            if project.name in seen:
                raise ValueError(f"Duplicate project name: {project.name!r}")
            seen.add(project.name)
        return value

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix

    @property
    def rule_table(self) -> ReleaseRuleTable:
        return self.rules.to_table()

    @property
    def is_monorepo(self) -> bool:
        return bool(self.projects)

    def release_targets(self, tag_prefix: str | None = None) -> list[ReleaseTarget]:
        """What to release: every configured project, or the whole repository.

        Args:
            tag_prefix: Overrides the configured tag prefix
        """
        prefix = self.effective_tag_prefix if tag_prefix is None else tag_prefix
        if not self.projects:
            return [ReleaseTarget.repository(prefix)]
        return [ReleaseTarget.project(p.name, p.path, prefix) for p in self.projects]
