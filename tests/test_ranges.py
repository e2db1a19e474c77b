"""Tests for npm range satisfaction."""

from __future__ import annotations

import pytest

from shrinkwrap_audit.parsers.ranges import satisfies


class TestSatisfies:
    @pytest.mark.parametrize(
        ("version", "expr"),
        [
            ("1.0.4", "<1.0.5"),
            ("1.2.3", "1.2.3"),
            ("1.2.3", "=1.2.3"),
            ("1.5.0", ">=1.0.0 <2.0.0"),
            ("1.5.0", ">= 1.0.0 < 2.0.0"),
            ("4.2.0", "<1.0.0 || >=4.0.0 <5.0.0"),
            ("1.9.9", "^1.2.0"),
            ("1.2.9", "~1.2.0"),
            ("4.7.1", "4.x"),
            ("1.5.0", "1.2.3 - 2.0.0"),
            ("0.0.1", "*"),
            ("3.0.0", ""),
            ("0.2.5", "^0.2.3"),
            ("0.0.3", "^0.0.3"),
            ("1.2.0", "~1.2"),
            ("2.9.0", "1 - 2"),
            ("1.3.0", ">1.2.x"),
            ("1.1.9", "<=1.1.x"),
            ("1.0.0", "~> 1.0.0"),
        ],
    )
    def test_matching_ranges(self, version, expr):
        assert satisfies(version, expr)

    @pytest.mark.parametrize(
        ("version", "expr"),
        [
            ("1.0.5", "<1.0.5"),
            ("2.0.0", ">=1.0.0 <2.0.0"),
            ("2.0.0", "^1.2.0"),
            ("1.3.0", "~1.2.0"),
            ("3.9.9", "<1.0.0 || >=4.0.0 <5.0.0"),
            ("5.0.0", "4.x"),
            ("2.0.1", "1.2.3 - 2.0.0"),
            ("0.3.0", "^0.2.3"),
            ("0.0.4", "^0.0.3"),
            ("3.0.0", "1 - 2"),
            ("1.2.9", ">1.2.x"),
            ("1.0.0", "<1.x"),
            ("1.0.0", ">*"),
        ],
    )
    def test_non_matching_ranges(self, version, expr):
        assert not satisfies(version, expr)

    def test_prerelease_excluded_from_plain_range(self):
        assert not satisfies("1.5.0-beta.1", ">=1.0.0 <2.0.0")

    def test_prerelease_included_when_comparator_shares_tuple(self):
        assert satisfies("1.0.0-beta.2", ">=1.0.0-beta.1")

    def test_prerelease_precedence(self):
        assert satisfies("1.0.0-alpha", "<1.0.0-alpha.1")
        assert not satisfies("1.0.0-rc.1", "<1.0.0-beta")

    def test_prerelease_below_release_bound_is_excluded(self):
        assert not satisfies("1.0.0-beta", "<1.0.0")
        assert not satisfies("2.0.0-rc.1", "^1.2.0")

    def test_prerelease_gate_applies_per_comparator_set(self):
        assert satisfies("1.0.0-beta.2", "<0.5.0 || >=1.0.0-beta.1 <1.0.0")
        assert not satisfies("1.0.0-beta.2", "<0.5.0 || >=0.9.0 <1.0.0")

    def test_prerelease_excluded_from_star(self):
        assert not satisfies("1.0.0-beta", "*")

    def test_leading_v_in_installed_version(self):
        assert satisfies("v1.0.4", "<1.0.5")

    def test_invalid_version_never_matches(self):
        assert not satisfies("github:user/repo#abc123", "*")

    def test_invalid_range_never_matches(self):
        assert not satisfies("1.0.0", ">=not-a-version")
