"""Tests for the release rule table."""

from __future__ import annotations

import pytest

from semver_release.core.rules import COMMIT_TYPES, ReleaseRule, ReleaseRuleTable
from semver_release.core.version import BumpType
from semver_release.exceptions import (
    ConfigError,
    DuplicateReleaseRuleError,
    InvalidCommitTypeError,
    InvalidReleaseTypeError,
    NoReleaseRulesError,
)


class TestReleaseRuleTableBuild:
    """Tests for ReleaseRuleTable.build()."""

    def test_build_from_pairs(self):
        """Build a table from (type, bump) pairs, keeping order."""
        table = ReleaseRuleTable.build([("fix", "patch"), ("feat", BumpType.MINOR)])

        assert table.rules == (
            ReleaseRule("fix", BumpType.PATCH),
            ReleaseRule("feat", BumpType.MINOR),
        )
        assert len(table) == 2

    def test_major_rules_allowed(self):
        """A commit type may map to a major bump."""
        table = ReleaseRuleTable.build([("refactor", "major")])

        assert table.lookup("refactor") is BumpType.MAJOR

    def test_duplicate_type_rejected(self):
        """Two rules for the same commit type are a configuration error."""
        with pytest.raises(DuplicateReleaseRuleError):
            ReleaseRuleTable.build([("fix", "patch"), ("fix", "minor")])

    def test_unknown_commit_type_rejected(self):
        """Commit types outside the vocabulary are rejected."""
        with pytest.raises(InvalidCommitTypeError, match="feature"):
            ReleaseRuleTable.build([("feature", "minor")])

    def test_unknown_release_type_rejected(self):
        """Bumps other than major/minor/patch are rejected."""
        with pytest.raises(InvalidReleaseTypeError, match="prerelease"):
            ReleaseRuleTable.build([("feat", "prerelease")])

    def test_empty_rules_rejected(self):
        """An empty rule list is rejected."""
        with pytest.raises(NoReleaseRulesError):
            ReleaseRuleTable.build([])

    def test_errors_are_config_errors(self):
        """All rule errors share the ConfigError base."""
        for bad in ([("fix", "patch"), ("fix", "patch")], [("nope", "patch")], [("fix", "x")]):
            with pytest.raises(ConfigError):
                ReleaseRuleTable.build(bad)


class TestReleaseRuleTableLookup:
    """Tests for lookup() and the default table."""

    def test_default_table(self):
        """Default rules: feat and perf are minor, fix is patch."""
        table = ReleaseRuleTable.default()

        assert table.lookup("feat") is BumpType.MINOR
        assert table.lookup("perf") is BumpType.MINOR
        assert table.lookup("fix") is BumpType.PATCH

    @pytest.mark.parametrize("commit_type", sorted(COMMIT_TYPES - {"feat", "perf", "fix"}))
    def test_default_table_other_types_absent(self, commit_type: str):
        """Other known types trigger no release by default."""
        assert ReleaseRuleTable.default().lookup(commit_type) is None

    def test_lookup_unknown_and_none(self):
        """lookup() is total: unknown types and None give None."""
        table = ReleaseRuleTable.default()

        assert table.lookup("whatever") is None
        assert table.lookup(None) is None

    def test_contains(self):
        """Membership tests commit types."""
        table = ReleaseRuleTable.default()

        assert "feat" in table
        assert "docs" not in table


class TestReleaseRuleTableMapping:
    """Tests for from_mapping() and to_mapping()."""

    def test_from_mapping_orders_by_magnitude(self):
        """Rules are ordered major, minor, patch."""
        table = ReleaseRuleTable.from_mapping(
            {"patch": ["fix", "revert"], "minor": ["feat"], "major": ["refactor"]}
        )

        assert [rule.commit_type for rule in table] == ["refactor", "feat", "fix", "revert"]

    def test_from_mapping_duplicate_across_magnitudes(self):
        """A type listed under two magnitudes is a duplicate."""
        with pytest.raises(DuplicateReleaseRuleError):
            ReleaseRuleTable.from_mapping({"minor": ["feat"], "patch": ["feat"]})

    def test_from_mapping_unknown_magnitude(self):
        """Unknown magnitude keys are rejected."""
        with pytest.raises(InvalidReleaseTypeError):
            ReleaseRuleTable.from_mapping({"huge": ["feat"]})

    def test_to_mapping(self):
        """to_mapping() groups commit types by magnitude."""
        assert ReleaseRuleTable.default().to_mapping() == {
            "minor": ["feat", "perf"],
            "patch": ["fix"],
        }

    def test_equality(self):
        """Tables with the same rules compare equal."""
        assert ReleaseRuleTable.default() == ReleaseRuleTable.from_mapping(
            {"minor": ["feat", "perf"], "patch": ["fix"]}
        )
