"""Git repository access through the git executable.

GitRepository is the collaborator the version engine reads tags and
history from, and the one that creates and pushes release tags. Every
git invocation goes through _run() so failures surface as GitError.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from semver_release.core.tags import TagRecord
from semver_release.exceptions import GitError, TagExistsError
from semver_release.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semver_release.config.models import TaggerConfig
    from semver_release.core.tags import BaselineTag

log = get_logger(__name__)

# Separators are emitted by git from %x00 / %x1e placeholders; argv cannot hold NUL
_FIELD_SEP = "\x00"
_RECORD_SEP = "\x1e"


@dataclass
class Commit:
    """A commit as read from the repository history."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime


def _parse_date(value: str) -> datetime | None:
    value = value.strip()
    if not value:
        return None
    return datetime.fromisoformat(value)


class GitRepository:
    """A local git working copy.

    Args:
        path: Any directory inside the repository

    Raises:
        GitError: If path is not inside a git repository
    """

    def __init__(self, path: Path | str | None = None) -> None:
        start = Path(path) if path is not None else Path.cwd()
        if not start.is_dir():
            raise GitError(f"Not a directory: {start}")
        self.path = Path(self._run(["rev-parse", "--show-toplevel"], cwd=start))

    def _run(
        self,
        args: list[str],
        *,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> str:
        """Run a git command and return its stripped stdout.

        Raises:
            GitError: If git is missing or the command exits non-zero
        """
        command = ["git", *args]
        log.debug("running git", args=args)
        try:
            result = subprocess.run(
                command,
                cwd=cwd or self.path,
                capture_output=True,
                text=True,
                check=True,
                env={**os.environ, **env} if env else None,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {' '.join(args)} failed with exit code {e.returncode}",
                stderr=e.stderr,
            ) from e
        return result.stdout.strip()

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def get_head_sha(self) -> str:
        """Return the commit hash HEAD points to."""
        return self._run(["rev-parse", "HEAD"])

    def is_dirty(self) -> bool:
        """Whether the working tree has uncommitted changes."""
        return bool(self._run(["status", "--porcelain"]))

    def list_tags(self) -> list[TagRecord]:
        """List all tags with the commit they point to and their creation date.

        Annotated tags are peeled to their target commit. Order follows
        git's refname ordering and carries no meaning.
        """
        fmt = "%00".join(
            [
                "%(refname:strip=2)",
                "%(objectname)",
                "%(*objectname)",
                "%(creatordate:iso-strict)",
            ]
        )
        output = self._run(["for-each-ref", f"--format={fmt}", "refs/tags"])

        tags: list[TagRecord] = []
        for line in output.splitlines():
            if not line:
                continue
            name, object_sha, peeled_sha, created = line.split(_FIELD_SEP)
            tags.append(
                TagRecord(
                    name=name,
                    commit_hash=peeled_sha or object_sha,
                    timestamp=_parse_date(created),
                )
            )
        return tags

    def tag_exists(self, name: str) -> bool:
        try:
            self._run(["rev-parse", "--verify", "--quiet", f"refs/tags/{name}"])
        except GitError:
            return False
        return True

    def get_commits(
        self,
        revision_range: str = "HEAD",
        paths: Sequence[str] = (),
    ) -> list[Commit]:
        """Return commits in a revision range, oldest first.

        Args:
            revision_range: Any range git log accepts, e.g. "abc123..HEAD"
            paths: Only return commits touching these paths, relative to the
                repository root
        """
        fmt = "%x00".join(["%H", "%an", "%ae", "%aI", "%B"]) + "%x1e"
        args = ["log", "--reverse", "--topo-order", f"--format={fmt}", revision_range]
        if paths:
            args += ["--", *paths]
        output = self._run(args)

        commits: list[Commit] = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, author_name, author_email, date, message = record.split(_FIELD_SEP, 4)
            commits.append(
                Commit(
                    sha=sha,
                    message=message.strip(),
                    author_name=author_name,
                    author_email=author_email,
                    date=datetime.fromisoformat(date),
                )
            )
        return commits

    def get_commits_since(
        self, baseline: BaselineTag, paths: Sequence[str] = ()
    ) -> list[Commit]:
        """Return commits reachable from HEAD but not from the baseline, oldest first.

        A synthetic baseline (no release tag yet) yields the whole history.
        """
        if baseline.is_synthetic:
            return self.get_commits("HEAD", paths)
        return self.get_commits(f"{baseline.commit_hash}..HEAD", paths)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def create_tag(
        self,
        name: str,
        message: str,
        tagger: TaggerConfig,
        sha: str | None = None,
    ) -> None:
        """Create an annotated tag.

        Args:
            name: Tag name, e.g. "v1.2.3"
            message: Tag annotation
            tagger: Identity recorded as the tagger
            sha: Commit to tag, defaults to HEAD

        Raises:
            TagExistsError: If the tag already exists
            GitError: If tag creation fails
        """
        if self.tag_exists(name):
            raise TagExistsError(f"Tag {name!r} already exists")

        args = ["tag", "--annotate", name, "--message", message]
        if sha:
            args.append(sha)

        self._run(
            args,
            env={
                "GIT_COMMITTER_NAME": tagger.name,
                "GIT_COMMITTER_EMAIL": tagger.email,
            },
        )
        log.info("created tag", tag=name)

    def push_tag(self, name: str, remote: str = "origin") -> None:
        """Push a single tag to a remote."""
        self._run(["push", remote, f"refs/tags/{name}"])
        log.info("pushed tag", tag=name, remote=remote)
