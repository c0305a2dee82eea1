"""CI integration for semver-release."""

from __future__ import annotations

from semver_release.ci.output import JsonOutput, ReleaseOutput, ReleaseSummary, write_github_output

__all__ = ["JsonOutput", "ReleaseOutput", "ReleaseSummary", "write_github_output"]
