"""Version derivation.

Replays the commits made since the baseline release, oldest first, and
folds each one into the working version:

- not conventional: no change
- breaking: major bump, regardless of the rule table
- type with a rule: bump by the rule's magnitude
- type without a rule: no change

The result carries the final version and whether any bump happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from semver_release.core.commits import ParsedCommit, filter_skip_release_commits
from semver_release.core.tags import BaselineTag, TagRecord, find_baseline
from semver_release.core.version import BumpType, Version
from semver_release.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from semver_release.config.models import TaggerConfig
    from semver_release.core.rules import ReleaseRuleTable
    from semver_release.vcs.git import Commit, GitRepository

log = get_logger(__name__)


class RepositoryReader(Protocol):
    """What the engine needs from a repository."""

    def get_head_sha(self) -> str: ...

    def list_tags(self) -> list[TagRecord]: ...

    def get_commits_since(
        self, baseline: BaselineTag, paths: Sequence[str] = ()
    ) -> list[Commit]: ...


@dataclass(frozen=True)
class ReleaseTarget:
    """Something released on its own: the whole repository or one project.

    Attributes:
        name: Project name, None for the whole repository
        tag_prefix: Prefix of this target's release tags, e.g. "api-v"
        paths: Paths whose commits count for this target, empty for all
    """

    name: str | None
    tag_prefix: str
    paths: tuple[str, ...] = ()

    @classmethod
    def repository(cls, tag_prefix: str = "") -> ReleaseTarget:
        return cls(name=None, tag_prefix=tag_prefix)

    @classmethod
    def project(cls, name: str, path: str, tag_prefix: str = "") -> ReleaseTarget:
        """A monorepo project tagged "<name>-<tag_prefix><version>"."""
        return cls(name=name, tag_prefix=f"{name}-{tag_prefix}", paths=(path,))


@dataclass(frozen=True)
class AppliedBump:
    """One version transition caused by a commit."""

    commit: ParsedCommit
    bump: BumpType
    version: Version


@dataclass(frozen=True)
class DerivationResult:
    """Outcome of replaying history on top of a baseline.

    Attributes:
        version: Final version
        released: Whether at least one commit bumped the version
        baseline: Release the replay started from
        bumps: Every transition, in the order applied
    """

    version: Version
    released: bool
    baseline: BaselineTag
    bumps: tuple[AppliedBump, ...] = ()

    @property
    def release_commit(self) -> str | None:
        """Hash of the last commit that bumped the version."""
        if not self.bumps:
            return None
        return self.bumps[-1].commit.sha

    def tag_name(self, prefix: str = "") -> str:
        return f"{prefix}{self.version}"


def _to_parsed(commit: Commit | ParsedCommit | str) -> ParsedCommit:
    if isinstance(commit, ParsedCommit):
        return commit
    if isinstance(commit, str):
        return ParsedCommit.from_message(commit)
    return ParsedCommit.from_commit(commit)


def derive(
    baseline: BaselineTag,
    commits: Iterable[Commit | ParsedCommit | str],
    rules: ReleaseRuleTable,
) -> DerivationResult:
    """Compute the version that follows the baseline.

    Args:
        baseline: Release to start from
        commits: Commits made since the baseline, oldest first
        rules: Release rules mapping commit types to bumps

    Returns:
        DerivationResult with the final version and the applied bumps
    """
    version = baseline.version
    bumps: list[AppliedBump] = []

    for item in commits:
        commit = _to_parsed(item)
        if not commit.is_conventional:
            continue

        if commit.is_breaking:
            bump: BumpType | None = BumpType.MAJOR
        else:
            bump = rules.lookup(commit.commit_type)
            if bump is None:
                continue

        version = version.bump(bump)
        bumps.append(AppliedBump(commit=commit, bump=bump, version=version))
        log.info(
            "version bumped",
            sha=commit.short_sha,
            bump=bump.value,
            breaking=commit.is_breaking,
            commit=commit.short_description,
            version=str(version),
        )

    return DerivationResult(
        version=version,
        released=bool(bumps),
        baseline=baseline,
        bumps=tuple(bumps),
    )


def compute_next_version(
    repo: RepositoryReader,
    rules: ReleaseRuleTable,
    *,
    tag_prefix: str = "",
    paths: Sequence[str] = (),
    skip_release_patterns: Iterable[str] = (),
    prerelease: str | None = None,
    build_metadata: str | None = None,
) -> DerivationResult:
    """Compute the next version of a repository.

    Finds the latest release tag, reads the commits made since, drops
    commits carrying a skip-release marker and replays the rest.

    Args:
        repo: Repository to read tags and history from
        rules: Validated release rules
        tag_prefix: Prefix of release tag names, e.g. "v"
        paths: Only replay commits touching these paths (all when empty)
        skip_release_patterns: Markers that exclude a commit from the replay
        prerelease: Prerelease identifiers attached to a new release
        build_metadata: Build metadata attached to the final version

    Returns:
        DerivationResult for the repository's current HEAD

    Raises:
        GitError: If the repository cannot be read
    """
    baseline = find_baseline(repo.list_tags(), repo.get_head_sha, prefix=tag_prefix)
    commits = repo.get_commits_since(baseline, paths)
    log.debug("read history", baseline=str(baseline.version), commits=len(commits))

    commits = filter_skip_release_commits(commits, skip_release_patterns)
    result = derive(baseline, commits, rules)

    version = result.version
    if result.released and prerelease:
        version = version.with_prerelease(prerelease)
    if build_metadata:
        version = version.with_build_metadata(build_metadata)

    if version != result.version:
        result = DerivationResult(
            version=version,
            released=result.released,
            baseline=result.baseline,
            bumps=result.bumps,
        )

    if result.released:
        log.info("new release", previous=str(baseline.version), version=str(result.version))
    else:
        log.info("no release needed", version=str(result.version))
    return result


def compute_releases(
    repo: RepositoryReader,
    rules: ReleaseRuleTable,
    targets: Sequence[ReleaseTarget],
    *,
    skip_release_patterns: Iterable[str] = (),
    prerelease: str | None = None,
    build_metadata: str | None = None,
) -> list[tuple[ReleaseTarget, DerivationResult]]:
    """Compute the next version of every release target independently.

    Each target has its own tag prefix, so its baseline is found among
    its own tags only, and only commits touching its paths are replayed.

    Returns:
        (target, result) pairs in the order the targets were given
    """
    patterns = tuple(skip_release_patterns)
    results: list[tuple[ReleaseTarget, DerivationResult]] = []
    for target in targets:
        with structlog.contextvars.bound_contextvars(project=target.name):
            result = compute_next_version(
                repo,
                rules,
                tag_prefix=target.tag_prefix,
                paths=target.paths,
                skip_release_patterns=patterns,
                prerelease=prerelease,
                build_metadata=build_metadata,
            )
        results.append((target, result))
    return results


def tag_release(
    repo: GitRepository,
    result: DerivationResult,
    *,
    tagger: TaggerConfig,
    prefix: str = "",
    push: bool = False,
    remote: str = "origin",
) -> str | None:
    """Create (and optionally push) the tag for a derived release.

    Args:
        repo: Repository to tag
        result: Derivation result; nothing happens unless it is a release
        tagger: Identity recorded on the annotated tag
        prefix: Tag name prefix, e.g. "v"
        push: Whether to push the tag after creating it
        remote: Remote to push to

    Returns:
        The created tag name, or None when there was nothing to release

    Raises:
        TagExistsError: If the tag already exists
        GitError: If creating or pushing the tag fails
    """
    if not result.released:
        return None

    name = result.tag_name(prefix)
    repo.create_tag(name, message=str(result.version), tagger=tagger)
    if push:
        repo.push_tag(name, remote=remote)
    return name
