"""Command-line interface for semver-release."""

from __future__ import annotations

from semver_release.cli.main import app

__all__ = ["app"]
