"""Conventional commit parsing.

Parses commit messages following the Conventional Commits specification:
https://www.conventionalcommits.org/

Format: <type>[(scope)][!]: <description>

    [optional body]

    [optional footer(s)]

A commit is breaking when "!" precedes the colon or when the literal
"BREAKING CHANGE" appears anywhere in the message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semver_release.core.rules import COMMIT_TYPES

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from semver_release.vcs.git import Commit

BREAKING_CHANGE_TOKEN = "BREAKING CHANGE"

SHORT_DESCRIPTION_LENGTH = 50

DEFAULT_SKIP_RELEASE_PATTERNS: tuple[str, ...] = (
    "[skip release]",
    "[release skip]",
    "[no release]",
)

CONVENTIONAL_COMMIT_PATTERN = re.compile(
    rf"^(?P<type>{'|'.join(sorted(COMMIT_TYPES))})"
    r"(?:\((?P<scope>[\w\-./\\]+)\))?"
    r"(?P<breaking>!)?"
    r": (?P<description>[^\n]*\S[^\n]*)",
    re.ASCII,
)


def shorten(text: str, length: int = SHORT_DESCRIPTION_LENGTH) -> str:
    """Truncate text to `length` characters, ending with "..." when cut."""
    if len(text) > length:
        return f"{text[: length - 3]}..."
    return text


@dataclass(frozen=True)
class ParsedCommit:
    """A commit message classified against the conventional format.

    Attributes:
        sha: Commit hash (empty when classifying a bare message)
        message: Full original message
        commit_type: Conventional type, or None if the message is not conventional
        scope: Optional scope in parentheses
        is_breaking: Whether the commit is a breaking change
        description: Description after the colon (first line of the message
            when not conventional)
    """

    sha: str
    message: str
    commit_type: str | None
    scope: str | None
    is_breaking: bool
    description: str

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def short_description(self) -> str:
        return shorten(self.description)

    @classmethod
    def from_message(cls, message: str, sha: str = "") -> ParsedCommit:
        """Classify a raw commit message.

        Args:
            message: Full commit message, including body and footers
            sha: Commit hash, kept for reporting

        Returns:
            ParsedCommit; commit_type is None when the message does not
            follow the conventional format
        """
        match = CONVENTIONAL_COMMIT_PATTERN.match(message)

        if match is None:
            first_line = message.strip().split("\n", 1)[0].strip()
            return cls(
                sha=sha,
                message=message,
                commit_type=None,
                scope=None,
                is_breaking=False,
                description=first_line,
            )

        is_breaking = match.group("breaking") is not None or BREAKING_CHANGE_TOKEN in message

        return cls(
            sha=sha,
            message=message,
            commit_type=match.group("type"),
            scope=match.group("scope"),
            is_breaking=is_breaking,
            description=match.group("description").strip(),
        )

    @classmethod
    def from_commit(cls, commit: Commit) -> ParsedCommit:
        """Classify a commit record from the repository."""
        return cls.from_message(commit.message, commit.sha)


def classify(message: str, sha: str = "") -> ParsedCommit:
    """Classify a single commit message, see ParsedCommit.from_message()."""
    return ParsedCommit.from_message(message, sha)


def parse_commits(commits: Iterable[Commit]) -> list[ParsedCommit]:
    """Classify a sequence of commits, preserving order."""
    return [ParsedCommit.from_commit(commit) for commit in commits]


def filter_skip_release_commits(
    commits: Sequence[Commit],
    patterns: Iterable[str],
) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers are matched case-insensitively anywhere in the message.

    Args:
        commits: Commits to filter
        patterns: Markers such as "[skip release]"

    Returns:
        Commits without any marker, in original order
    """
    lowered = [pattern.lower() for pattern in patterns if pattern]
    if not lowered:
        return list(commits)

    return [
        commit
        for commit in commits
        if not any(pattern in commit.message.lower() for pattern in lowered)
    ]
