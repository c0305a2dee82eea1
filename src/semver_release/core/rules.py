"""Release rules: which commit types trigger which version bump.

A ReleaseRuleTable is built once per run, validated eagerly, and never
changes afterwards. Looking up a commit type that has no rule returns
None, meaning the commit does not trigger a release on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from semver_release.core.version import BumpType
from semver_release.exceptions import (
    DuplicateReleaseRuleError,
    InvalidCommitTypeError,
    InvalidReleaseTypeError,
    NoReleaseRulesError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

COMMIT_TYPES: frozenset[str] = frozenset(
    {
        "build",
        "chore",
        "ci",
        "docs",
        "feat",
        "fix",
        "perf",
        "refactor",
        "revert",
        "style",
        "test",
    }
)

DEFAULT_RULES: tuple[tuple[str, BumpType], ...] = (
    ("feat", BumpType.MINOR),
    ("perf", BumpType.MINOR),
    ("fix", BumpType.PATCH),
)


@dataclass(frozen=True)
class ReleaseRule:
    """Maps one commit type to a bump magnitude."""

    commit_type: str
    bump: BumpType


def _coerce_bump(value: BumpType | str) -> BumpType:
    if isinstance(value, BumpType):
        return value
    try:
        return BumpType(value)
    except ValueError as e:
        raise InvalidReleaseTypeError(
            f"Invalid release type {value!r}, expected one of: major, minor, patch"
        ) from e


class ReleaseRuleTable:
    """Ordered, immutable collection of release rules.

    Use ReleaseRuleTable.build() or ReleaseRuleTable.default() rather
    than the constructor, so rules are always validated.
    """

    __slots__ = ("_lookup", "_rules")

    def __init__(self, rules: tuple[ReleaseRule, ...]) -> None:
        self._rules = rules
        self._lookup = {rule.commit_type: rule.bump for rule in rules}

    @classmethod
    def build(cls, rules: Iterable[tuple[str, BumpType | str]]) -> ReleaseRuleTable:
        """Build a validated rule table.

        Args:
            rules: Ordered (commit_type, bump) pairs; bump may be a
                BumpType or its string value

        Returns:
            A new ReleaseRuleTable

        Raises:
            InvalidCommitTypeError: If a commit type is not a known type
            InvalidReleaseTypeError: If a bump is not major, minor or patch
            DuplicateReleaseRuleError: If a commit type appears twice
            NoReleaseRulesError: If no rules are given
        """
        validated: list[ReleaseRule] = []
        seen: set[str] = set()

        for commit_type, bump in rules:
            if commit_type not in COMMIT_TYPES:
                raise InvalidCommitTypeError(
                    f"Invalid commit type {commit_type!r}, "
                    f"expected one of: {', '.join(sorted(COMMIT_TYPES))}"
                )
            release_type = _coerce_bump(bump)
            if commit_type in seen:
                raise DuplicateReleaseRuleError(
                    f"Duplicate release rule for commit type {commit_type!r}"
                )
            seen.add(commit_type)
            validated.append(ReleaseRule(commit_type, release_type))

        if not validated:
            raise NoReleaseRulesError("No release rules found")

        return cls(tuple(validated))

    @classmethod
    def default(cls) -> ReleaseRuleTable:
        """The table used when no rules are configured."""
        return cls.build(DEFAULT_RULES)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> ReleaseRuleTable:
        """Build a table from a {"minor": ["feat"], "patch": ["fix"]} mapping.

        Rules are ordered major, minor, patch, then by list order.
        Unknown magnitudes raise InvalidReleaseTypeError.
        """
        for key in mapping:
            _coerce_bump(key)

        pairs = [
            (commit_type, bump)
            for bump in BumpType
            for commit_type in mapping.get(bump.value, ())
        ]
        return cls.build(pairs)

    def to_mapping(self) -> dict[str, list[str]]:
        """Return the rules as a magnitude -> commit types mapping."""
        mapping: dict[str, list[str]] = {}
        for rule in self._rules:
            mapping.setdefault(rule.bump.value, []).append(rule.commit_type)
        return mapping

    def lookup(self, commit_type: str | None) -> BumpType | None:
        """Return the bump for a commit type, or None if it triggers no release."""
        if commit_type is None:
            return None
        return self._lookup.get(commit_type)

    @property
    def rules(self) -> tuple[ReleaseRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[ReleaseRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, commit_type: object) -> bool:
        return commit_type in self._lookup

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReleaseRuleTable):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        rules = ", ".join(f"{r.commit_type}->{r.bump.value}" for r in self._rules)
        return f"ReleaseRuleTable({rules})"
