"""Core version derivation logic for semver-release.

This module contains the fundamental building blocks:
- Semantic version parsing, bumping and precedence
- Release rules mapping commit types to bumps
- Conventional commit classification
- Release tag scanning
- History replay
"""

from __future__ import annotations

from semver_release.core.commits import (
    ParsedCommit,
    classify,
    filter_skip_release_commits,
    parse_commits,
)
from semver_release.core.engine import (
    AppliedBump,
    DerivationResult,
    ReleaseTarget,
    compute_next_version,
    compute_releases,
    derive,
    tag_release,
)
from semver_release.core.rules import COMMIT_TYPES, ReleaseRule, ReleaseRuleTable
from semver_release.core.tags import BaselineTag, TagRecord, find_baseline
from semver_release.core.version import BumpType, Version, compare, parse_version

__all__ = [
    # Rules
    "COMMIT_TYPES",
    # Engine
    "AppliedBump",
    # Tags
    "BaselineTag",
    # Version
    "BumpType",
    "DerivationResult",
    # Commits
    "ParsedCommit",
    "ReleaseRule",
    "ReleaseRuleTable",
    "ReleaseTarget",
    "TagRecord",
    "Version",
    "classify",
    "compare",
    "compute_next_version",
    "compute_releases",
    "derive",
    "filter_skip_release_commits",
    "find_baseline",
    "parse_commits",
    "parse_version",
    "tag_release",
]
