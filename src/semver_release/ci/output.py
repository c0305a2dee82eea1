"""Output for CI pipelines.

Two formats are supported:

- GitHub Actions step outputs, appended to the file named by
  ``$GITHUB_OUTPUT`` (``SEMVER`` and ``NEW_RELEASE`` keys, prefixed with
  ``<PROJECT>_`` for monorepo projects)
- a JSON document describing the release, for any other consumer
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from semver_release.logging import get_logger

if TYPE_CHECKING:
    from semver_release.core.engine import DerivationResult

log = get_logger(__name__)

GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


def _output_key(project: str) -> str:
    return re.sub(r"[^A-Za-z0-9]", "_", project).upper()


def write_github_output(
    result: DerivationResult,
    prefix: str = "",
    *,
    project: str | None = None,
    path: Path | None = None,
) -> Path | None:
    """Append the release outputs to the GitHub Actions output file.

    Args:
        result: Derivation result to report
        prefix: Tag prefix prepended to the version
        project: Monorepo project name, used to prefix the keys
        path: Output file; defaults to $GITHUB_OUTPUT

    Returns:
        The file written to, or None when no output file is configured
    """
    if path is None:
        env_path = os.environ.get(GITHUB_OUTPUT_ENV)
        if not env_path:
            return None
        path = Path(env_path)

    key_prefix = f"{_output_key(project)}_" if project else ""
    content = (
        f"{key_prefix}SEMVER={result.tag_name(prefix)}\n"
        f"{key_prefix}NEW_RELEASE={str(result.released).lower()}\n"
    )
    with path.open("a", encoding="utf-8") as f:
        f.write(content)

    log.debug("wrote github output", path=str(path))
    return path


class ReleaseOutput(BaseModel):
    """One computed release."""

    new_release: bool
    version: str
    tag: str
    previous_version: str
    message: str
    project: str | None = None


class ReleaseSummary(BaseModel):
    total_count: int = 0
    release_count: int = 0
    has_releases: bool = False


class JsonOutput(BaseModel):
    """JSON document listing computed releases and a summary."""

    summary: ReleaseSummary = Field(default_factory=ReleaseSummary)
    releases: list[ReleaseOutput] = Field(default_factory=list)

    def add_release(
        self,
        result: DerivationResult,
        prefix: str = "",
        project: str | None = None,
    ) -> ReleaseOutput:
        """Record a derivation result and refresh the summary."""
        if result.released:
            message = f"new release found: {result.baseline.version} -> {result.version}"
        else:
            message = "no new release"

        release = ReleaseOutput(
            new_release=result.released,
            version=str(result.version),
            tag=result.tag_name(prefix),
            previous_version=str(result.baseline.version),
            message=message,
            project=project,
        )
        self.releases.append(release)
        self._finalize()
        return release

    def _finalize(self) -> None:
        release_count = sum(1 for release in self.releases if release.new_release)
        self.summary = ReleaseSummary(
            total_count=len(self.releases),
            release_count=release_count,
            has_releases=release_count > 0,
        )

    def render(self) -> str:
        return self.model_dump_json(indent=2)
