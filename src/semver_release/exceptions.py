"""Exception hierarchy for semver-release.

All errors raised by the package derive from SemverReleaseError so
callers can catch everything from one place.
"""

from __future__ import annotations


class SemverReleaseError(Exception):
    """Base class for all semver-release errors."""


class VersionParseError(SemverReleaseError, ValueError):
    """A string does not satisfy the semantic version grammar."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(SemverReleaseError):
    """Configuration is missing or invalid."""


class ConfigNotFoundError(ConfigError):
    """A configuration file could not be found."""


class ConfigValidationError(ConfigError):
    """A configuration file was found but its content is invalid."""


class InvalidCommitTypeError(ConfigError):
    """A release rule names a commit type outside the known vocabulary."""


class InvalidReleaseTypeError(ConfigError):
    """A release rule names a bump other than major, minor or patch."""


class DuplicateReleaseRuleError(ConfigError):
    """Two release rules share the same commit type."""


class NoReleaseRulesError(ConfigError):
    """A rule table was built from an empty list of rules."""


# =============================================================================
# Git
# =============================================================================


class GitError(SemverReleaseError):
    """A git command failed."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr

    def __str__(self) -> str:
        base = super().__str__()
        if self.stderr:
            return f"{base}\n{self.stderr.strip()}"
        return base


class TagExistsError(GitError):
    """The tag to create already exists in the repository."""
