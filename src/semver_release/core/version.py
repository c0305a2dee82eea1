"""Semantic version model.

Implements SemVer 2.0.0 (https://semver.org): strict parsing, canonical
rendering, bump arithmetic and precedence.

Versions are immutable. Every bump returns a new Version with prerelease
and build metadata cleared, since a bumped version is always a release.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from semver_release.exceptions import VersionParseError

_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_ID = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"^(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?\Z"
)

_PRERELEASE_PATTERN = re.compile(rf"^{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*\Z")
_BUILD_PATTERN = re.compile(rf"^{_BUILD_ID}(?:\.{_BUILD_ID})*\Z")


class BumpType(Enum):
    """Magnitude of a version bump."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """A semantic version number.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
        prerelease: Dot-separated prerelease identifiers (e.g. "rc.1")
        build_metadata: Dot-separated build metadata identifiers
    """

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build_metadata: str | None = None

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise VersionParseError(f"{name} must be a non-negative integer, got {value!r}")
        if self.prerelease is not None:
            validate_prerelease(self.prerelease)
        if self.build_metadata is not None:
            validate_build_metadata(self.build_metadata)

    # -------------------------------------------------------------------------
    # Parsing and rendering
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a version string.

        Args:
            text: Version string such as "1.2.3", "1.0.0-rc.1" or "1.0.0+build.5"

        Returns:
            Parsed Version

        Raises:
            VersionParseError: If the string is not a valid semantic version
        """
        match = SEMVER_PATTERN.match(text)
        if match is None:
            raise VersionParseError(f"Invalid semantic version: {text!r}")

        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=match.group("prerelease"),
            build_metadata=match.group("build"),
        )

    def render(self) -> str:
        """Render the canonical MAJOR.MINOR.PATCH[-PRERELEASE][+METADATA] form."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build_metadata:
            text += f"+{self.build_metadata}"
        return text

    def __str__(self) -> str:
        return self.render()

    # -------------------------------------------------------------------------
    # Prerelease accessors
    # -------------------------------------------------------------------------

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def prerelease_label(self) -> str | None:
        """First prerelease identifier ("rc" for "1.0.0-rc.2")."""
        if self.prerelease is None:
            return None
        return self.prerelease.split(".", 1)[0]

    @property
    def prerelease_number(self) -> int | None:
        """Trailing numeric prerelease identifier (2 for "1.0.0-rc.2")."""
        if self.prerelease is None:
            return None
        identifiers = self.prerelease.split(".")
        if len(identifiers) < 2 or not identifiers[-1].isdigit():
            return None
        return int(identifiers[-1])

    # -------------------------------------------------------------------------
    # Bumping
    # -------------------------------------------------------------------------

    def bump_major(self) -> Version:
        return Version(self.major + 1, 0, 0)

    def bump_minor(self) -> Version:
        return Version(self.major, self.minor + 1, 0)

    def bump_patch(self) -> Version:
        return Version(self.major, self.minor, self.patch + 1)

    def bump(self, bump_type: BumpType) -> Version:
        """Return the version bumped by the given magnitude.

        Args:
            bump_type: Magnitude of the bump

        Returns:
            New Version with prerelease and build metadata cleared
        """
        if bump_type is BumpType.MAJOR:
            return self.bump_major()
        if bump_type is BumpType.MINOR:
            return self.bump_minor()
        return self.bump_patch()

    def is_zero(self) -> bool:
        """Whether this is 0.0.0, i.e. nothing has been released yet."""
        return self.major == self.minor == self.patch == 0

    def with_prerelease(self, prerelease: str | None) -> Version:
        """Return a copy with the given prerelease identifiers."""
        return replace(self, prerelease=prerelease or None)

    def with_build_metadata(self, build_metadata: str | None) -> Version:
        """Return a copy with the given build metadata."""
        return replace(self, build_metadata=build_metadata or None)

    # -------------------------------------------------------------------------
    # Precedence
    # -------------------------------------------------------------------------

    def compare(self, other: Version) -> int:
        """Compare precedence with another version, see compare()."""
        return compare(self, other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return compare(self, other) >= 0


def _compare_identifier(a: str, b: str) -> int:
    a_numeric = a.isdigit()
    b_numeric = b.isdigit()

    if a_numeric and b_numeric:
        a_value, b_value = int(a), int(b)
    elif a_numeric:
        return -1
    elif b_numeric:
        return 1
    else:
        a_value, b_value = a, b

    return (a_value > b_value) - (a_value < b_value)


def _compare_prerelease(a: str | None, b: str | None) -> int:
    if a == b:
        return 0
    # A release outranks any prerelease of the same core version
    if a is None:
        return 1
    if b is None:
        return -1

    a_ids = a.split(".")
    b_ids = b.split(".")
    for a_id, b_id in zip(a_ids, b_ids, strict=False):
        result = _compare_identifier(a_id, b_id)
        if result:
            return result

    return (len(a_ids) > len(b_ids)) - (len(a_ids) < len(b_ids))


def compare(a: Version, b: Version) -> int:
    """Compare two versions by SemVer precedence.

    Build metadata never participates in the comparison.

    Args:
        a: First version
        b: Second version

    Returns:
        -1 if a has lower precedence, 1 if higher, 0 if equal
    """
    a_core = (a.major, a.minor, a.patch)
    b_core = (b.major, b.minor, b.patch)
    if a_core != b_core:
        return 1 if a_core > b_core else -1

    return _compare_prerelease(a.prerelease, b.prerelease)


def parse_version(text: str) -> Version:
    """Parse a version string, see Version.parse()."""
    return Version.parse(text)


def validate_prerelease(value: str) -> str:
    """Check dot-separated prerelease identifiers, e.g. "rc.1".

    Returns:
        The value, unchanged

    Raises:
        VersionParseError: If an identifier is empty, has a leading zero or
            uses characters outside [0-9A-Za-z-]
    """
    if not _PRERELEASE_PATTERN.match(value):
        raise VersionParseError(f"Invalid prerelease: {value!r}")
    return value


def validate_build_metadata(value: str) -> str:
    """Check dot-separated build metadata identifiers, e.g. "build.5"."""
    if not _BUILD_PATTERN.match(value):
        raise VersionParseError(f"Invalid build metadata: {value!r}")
    return value
