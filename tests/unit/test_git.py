"""Tests for GitRepository against real git repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from conftest import run_git

from semver_release.config.models import TaggerConfig
from semver_release.core.engine import compute_next_version, tag_release
from semver_release.core.rules import ReleaseRuleTable
from semver_release.core.tags import BaselineTag, find_baseline
from semver_release.core.version import Version
from semver_release.exceptions import GitError, TagExistsError
from semver_release.vcs.git import GitRepository

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


class TestGitRepository:
    """Tests for reading from a repository."""

    def test_not_a_repository(self, tmp_path: Path, git_env: None):
        """A directory outside any repository raises GitError."""
        with pytest.raises(GitError):
            GitRepository(tmp_path / "missing")

    def test_git_not_installed(self, tmp_path: Path):
        """A missing git executable raises GitError."""
        with (
            patch("subprocess.run", side_effect=FileNotFoundError("git")),
            pytest.raises(GitError, match="not found"),
        ):
            GitRepository(tmp_path)

    def test_head_sha(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """get_head_sha() returns the current commit."""
        sha = commit_to("chore: init")

        assert GitRepository(temp_git_repo).get_head_sha() == sha

    def test_commits_oldest_first(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """The whole history is returned oldest first with full messages."""
        first = commit_to("chore: init")
        second = commit_to("feat: add thing\n\nBREAKING CHANGE: removed other thing")

        repo = GitRepository(temp_git_repo)
        commits = repo.get_commits_since(BaselineTag.initial(repo.get_head_sha()))

        assert [c.sha for c in commits] == [first, second]
        assert commits[1].message == "feat: add thing\n\nBREAKING CHANGE: removed other thing"
        assert commits[0].author_name == "Test Author"

    def test_commits_since_tag(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Only commits after the baseline tag are returned."""
        tagged = commit_to("feat: first")
        after = commit_to("fix: second")

        repo = GitRepository(temp_git_repo)
        baseline = BaselineTag(Version(1, 0, 0), tagged, tag_name="v1.0.0")

        assert [c.sha for c in repo.get_commits_since(baseline)] == [after]

    def test_commits_filtered_by_path(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Only commits touching the given paths are returned."""
        commit_to("chore: init")
        (temp_git_repo / "api").mkdir()
        (temp_git_repo / "web").mkdir()
        (temp_git_repo / "api" / "main.py").write_text("x")
        run_git(temp_git_repo, "add", "api")
        api = commit_to("feat(api): endpoint")
        (temp_git_repo / "web" / "index.html").write_text("x")
        run_git(temp_git_repo, "add", "web")
        commit_to("fix(web): layout")

        repo = GitRepository(temp_git_repo)
        baseline = BaselineTag.initial(repo.get_head_sha())

        assert [c.sha for c in repo.get_commits_since(baseline, ["api"])] == [api]
        assert len(repo.get_commits_since(baseline)) == 3

    def test_list_tags_annotated_and_lightweight(
        self,
        temp_git_repo: Path,
        commit_to: Callable[[str], str],
    ):
        """Tags are listed with the commit they point to."""
        first = commit_to("chore: init")
        run_git(temp_git_repo, "tag", "-a", "v1.0.0", "-m", "1.0.0")
        second = commit_to("fix: a")
        run_git(temp_git_repo, "tag", "nightly")

        tags = {tag.name: tag for tag in GitRepository(temp_git_repo).list_tags()}

        assert tags["v1.0.0"].commit_hash == first
        assert tags["nightly"].commit_hash == second
        assert tags["v1.0.0"].timestamp is not None

    def test_is_dirty(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Untracked files make the working tree dirty."""
        commit_to("chore: init")
        repo = GitRepository(temp_git_repo)

        assert not repo.is_dirty()
        (temp_git_repo / "new.txt").write_text("x")
        assert repo.is_dirty()


class TestGitTagging:
    """Tests for creating tags."""

    def test_create_tag_with_identity(
        self,
        temp_git_repo: Path,
        commit_to: Callable[[str], str],
    ):
        """An annotated tag records the configured tagger."""
        sha = commit_to("feat: a")
        repo = GitRepository(temp_git_repo)

        repo.create_tag("v0.1.0", "0.1.0", TaggerConfig(name="Bot", email="bot@example.com"))

        assert repo.tag_exists("v0.1.0")
        assert run_git(temp_git_repo, "rev-list", "-n", "1", "v0.1.0") == sha
        tagger = run_git(
            temp_git_repo, "for-each-ref", "--format=%(taggername) %(taggeremail)", "refs/tags"
        )
        assert tagger == "Bot <bot@example.com>"

    def test_create_existing_tag(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Creating a tag twice raises TagExistsError."""
        commit_to("feat: a")
        repo = GitRepository(temp_git_repo)
        repo.create_tag("v0.1.0", "0.1.0", TaggerConfig())

        with pytest.raises(TagExistsError):
            repo.create_tag("v0.1.0", "0.1.0", TaggerConfig())

    def test_push_to_missing_remote(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Pushing to an unknown remote raises GitError with stderr."""
        commit_to("feat: a")
        repo = GitRepository(temp_git_repo)
        repo.create_tag("v0.1.0", "0.1.0", TaggerConfig())

        with pytest.raises(GitError) as exc_info:
            repo.push_tag("v0.1.0", remote="nowhere")
        assert exc_info.value.stderr

    def test_push_to_bare_remote(
        self,
        tmp_path: Path,
        temp_git_repo: Path,
        commit_to: Callable[[str], str],
    ):
        """A tag is pushed to a remote repository."""
        remote = tmp_path / "remote.git"
        run_git(tmp_path, "init", "--bare", "--quiet", str(remote))
        run_git(temp_git_repo, "remote", "add", "origin", str(remote))
        commit_to("feat: a")

        repo = GitRepository(temp_git_repo)
        repo.create_tag("v0.1.0", "0.1.0", TaggerConfig())
        repo.push_tag("v0.1.0")

        assert run_git(remote, "tag", "--list") == "v0.1.0"


class TestEndToEnd:
    """Version derivation on a real repository."""

    def test_release_cycle(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """Derive, tag, then derive again from the new tag."""
        rules = ReleaseRuleTable.default()
        commit_to("chore: init")
        commit_to("feat: first feature")
        commit_to("fix: first fix")
        repo = GitRepository(temp_git_repo)

        first = compute_next_version(repo, rules, tag_prefix="v")
        assert first.version == Version(0, 1, 1)
        assert first.baseline.is_synthetic

        assert tag_release(repo, first, tagger=TaggerConfig(), prefix="v") == "v0.1.1"

        unchanged = compute_next_version(repo, rules, tag_prefix="v")
        assert not unchanged.released
        assert unchanged.version == Version(0, 1, 1)

        commit_to("feat!: new api")
        commit_to("docs: explain new api")
        second = compute_next_version(repo, rules, tag_prefix="v")
        assert second.version == Version(1, 0, 0)
        assert second.baseline.tag_name == "v0.1.1"

    def test_spec_tag_set(self, temp_git_repo: Path, commit_to: Callable[[str], str]):
        """The highest of several release tags is the baseline."""
        for name in ("2.0.0", "2.0.1", "3.0.0", "2.5.0", "0.0.2", "0.0.1", "0.1.0", "1.0.0"):
            commit_to(f"chore: prepare {name}")
            run_git(temp_git_repo, "tag", "-a", name, "-m", name)

        repo = GitRepository(temp_git_repo)
        baseline = find_baseline(repo.list_tags(), repo.get_head_sha)

        assert baseline.tag_name == "3.0.0"
