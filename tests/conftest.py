"""Shared fixtures for semver-release tests."""

from __future__ import annotations

import os
import shutil
import subprocess
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from semver_release.vcs.git import Commit

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def make_commit(message: str, sha: str = "abc1234def") -> Commit:
    """Build a commit record with fixed author data."""
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat: add user authentication", sha="feat123")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix(core): handle empty config", sha="fix4567")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit("feat!: redesign configuration format", sha="brk8901")


@pytest.fixture
def sample_commits() -> list[Commit]:
    """A realistic history, oldest first."""
    return [
        make_commit("chore: initial commit", sha="a000001"),
        make_commit("feat(api): add endpoint", sha="a000002"),
        make_commit("docs: describe endpoint", sha="a000003"),
        make_commit("fix(api): handle null response", sha="a000004"),
        make_commit("Merge branch 'feature'", sha="a000005"),
        make_commit("refactor!: drop legacy client", sha="a000006"),
        make_commit("perf: cache lookups", sha="a000007"),
    ]


# =============================================================================
# Git repositories
# =============================================================================

def run_git(repo: Path, *args: str) -> str:
    """Run a git command in a test repository."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate git from user configuration and give it a fixed identity."""
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test Author")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "author@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test Author")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "author@test.com")
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)


@pytest.fixture
def temp_git_repo(tmp_path: Path, git_env: None) -> Path:
    """An empty git repository."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "--quiet")
    return repo


@pytest.fixture
def commit_to(temp_git_repo: Path) -> Callable[[str], str]:
    """Return a helper that creates an empty commit and returns its sha."""

    def _commit(message: str) -> str:
        run_git(temp_git_repo, "commit", "--allow-empty", "--quiet", "-m", message)
        return run_git(temp_git_repo, "rev-parse", "HEAD")

    return _commit


@pytest.fixture
def temp_git_repo_with_pyproject(temp_git_repo: Path) -> Path:
    """A git repository with a pyproject.toml configuring semver-release."""
    (temp_git_repo / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.semver-release]
remote = "upstream"

[tool.semver-release.rules]
minor = ["feat"]
patch = ["fix", "perf"]

[tool.semver-release.version]
tag_prefix = "v"
"""
    )
    run_git(temp_git_repo, "add", "pyproject.toml")
    run_git(temp_git_repo, "commit", "--quiet", "-m", "chore: add pyproject")
    return temp_git_repo
