"""Version control access for semver-release."""

from __future__ import annotations

from semver_release.vcs.git import Commit, GitRepository

__all__ = ["Commit", "GitRepository"]
