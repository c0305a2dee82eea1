"""Locate the current release among a repository's tags.

The baseline is the tag carrying the highest-precedence semantic version.
Tags that do not parse as a version are ignored. When no tag qualifies,
a synthetic 0.0.0 baseline at HEAD is returned so the whole history is
replayed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from semver_release.core.version import Version, compare
from semver_release.exceptions import VersionParseError
from semver_release.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

log = get_logger(__name__)


@dataclass(frozen=True)
class TagRecord:
    """A tag as listed by the repository.

    Attributes:
        name: Tag name without the refs/tags/ prefix
        commit_hash: Commit the tag points to
        timestamp: When the tag was created, if known
    """

    name: str
    commit_hash: str
    timestamp: datetime | None = None


@dataclass(frozen=True)
class BaselineTag:
    """The release that history replay starts from.

    Attributes:
        version: Version of the release
        commit_hash: Commit the release tag points to (HEAD when synthetic)
        timestamp: When the tag was created, if known
        tag_name: Name of the tag, None for the synthetic 0.0.0 baseline
    """

    version: Version
    commit_hash: str
    timestamp: datetime | None = None
    tag_name: str | None = None

    @property
    def is_synthetic(self) -> bool:
        return self.tag_name is None

    @classmethod
    def initial(cls, head: str) -> BaselineTag:
        """The 0.0.0 baseline used before the first release."""
        return cls(version=Version(0, 0, 0), commit_hash=head)


def parse_tag_version(name: str, prefix: str = "") -> Version:
    """Parse the version carried by a tag name.

    Args:
        name: Tag name, e.g. "v1.2.3"
        prefix: Prefix expected before the version, e.g. "v"

    Returns:
        The parsed Version

    Raises:
        VersionParseError: If the name lacks the prefix or the rest is not a version
    """
    if not name.startswith(prefix):
        raise VersionParseError(f"Tag {name!r} does not start with prefix {prefix!r}")
    return Version.parse(name[len(prefix) :])


def _is_later(a: datetime | None, b: datetime | None) -> bool:
    if a is None:
        return False
    if b is None:
        return True
    return a > b


def find_baseline(
    tags: Iterable[TagRecord],
    head: str | Callable[[], str],
    *,
    prefix: str = "",
) -> BaselineTag:
    """Select the tag with the highest semantic version.

    Ties (names differing only in build metadata) go to the most recently
    created tag, then to the first one seen.

    Args:
        tags: All repository tags, in any order
        head: HEAD commit hash, or a callable resolving it; only used when
            no tag carries a version
        prefix: Prefix expected before the version in tag names

    Returns:
        The selected BaselineTag, or a synthetic 0.0.0 baseline at HEAD
    """
    best: TagRecord | None = None
    best_version: Version | None = None

    for tag in tags:
        try:
            version = parse_tag_version(tag.name, prefix)
        except VersionParseError:
            log.debug("ignoring non-version tag", tag=tag.name)
            continue

        if best_version is None:
            best, best_version = tag, version
            continue

        order = compare(version, best_version)
        if order > 0 or (order == 0 and _is_later(tag.timestamp, best.timestamp)):
            best, best_version = tag, version

    if best is None or best_version is None:
        head_sha = head() if callable(head) else head
        log.info("no release tag found, starting from 0.0.0", head=head_sha[:7])
        return BaselineTag.initial(head_sha)

    log.info("found latest release tag", tag=best.name, version=str(best_version))
    return BaselineTag(
        version=best_version,
        commit_hash=best.commit_hash,
        timestamp=best.timestamp,
        tag_name=best.name,
    )
