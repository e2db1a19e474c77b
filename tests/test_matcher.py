"""Tests for advisory matching and finding assembly."""

from __future__ import annotations

from shrinkwrap_audit.matcher import advisories_for, match
from shrinkwrap_audit.models import Advisory, Finding, InstalledPackage
from shrinkwrap_audit.parsers.shrinkwrap import flatten
from shrinkwrap_audit.report import aggregate, assemble


def _advisories(document):
    return [Advisory.from_dict(entry) for entry in document["results"]]


class TestMatch:
    def test_left_pad_scenario(self):
        advisories = [
            Advisory(module_name="left-pad", vulnerable_versions="<1.0.5", id=42, title="ReDoS")
        ]
        tree = {
            "left-pad@1.0.4": InstalledPackage("left-pad", "1.0.4", ("app",)),
            "right-pad@2.0.0": InstalledPackage("right-pad", "2.0.0", ("app",)),
        }

        matches = match(tree, advisories)
        findings = assemble(tree, matches, "")

        assert findings == [
            Finding(
                module="left-pad",
                version="1.0.4",
                title="ReDoS",
                path=("app",),
                advisory="https://requiresafe.com/advisories/42",
                line=0,
            )
        ]

    def test_name_must_match_exactly(self):
        package = InstalledPackage("left-pad-extra", "1.0.0", ())
        advisory = Advisory(module_name="left-pad", vulnerable_versions="*", id=1, title="t")

        assert advisories_for(package, [advisory]) == []

    def test_prerelease_above_vulnerable_bound_is_not_reported(self):
        tree = {"a@1.0.0-rc.1": InstalledPackage("a", "1.0.0-rc.1", ("app",))}
        advisories = [Advisory(module_name="a", vulnerable_versions="<1.0.0-beta", id=7, title="t")]

        assert match(tree, advisories) == []

    def test_only_vulnerable_packages_are_kept(self, shrinkwrap_tree, advisories_document):
        tree = flatten(shrinkwrap_tree)
        advisories = _advisories(advisories_document)

        matches = match(tree, advisories)

        assert [package.key for package, _ in matches] == [
            "left-pad@1.0.4",
            "qs@4.0.0",
            "hawk@3.1.0",
        ]
        assert [advisory.id for advisory in matches[1][1]] == [28, 29]


class TestAssemble:
    def test_one_row_per_advisory_in_tree_order(
        self, shrinkwrap_tree, shrinkwrap_text, advisories_document
    ):
        tree = flatten(shrinkwrap_tree)
        findings = assemble(
            tree,
            match(tree, _advisories(advisories_document)),
            shrinkwrap_text,
            "https://advisories.example.test/",
        )

        assert [(f.module, f.version, f.advisory, f.line) for f in findings] == [
            ("left-pad", "1.0.4", "https://advisories.example.test/42", 5),
            ("qs", "4.0.0", "https://advisories.example.test/28", 13),
            ("qs", "4.0.0", "https://advisories.example.test/29", 13),
            ("hawk", "3.1.0", "https://advisories.example.test/77", 17),
        ]
        assert findings[1].path == findings[2].path == ("app@1.0.0", "request@2.60.0")

    def test_assembly_is_idempotent(self, shrinkwrap_tree, shrinkwrap_text, advisories_document):
        tree = flatten(shrinkwrap_tree)
        advisories = _advisories(advisories_document)

        first = assemble(tree, match(tree, advisories), shrinkwrap_text)
        second = assemble(tree, match(tree, advisories), shrinkwrap_text)

        assert first == second

    def test_aggregate_totals(self):
        findings = [
            Finding("qs", "4.0.0", "a", ("app",), "https://x/28", 13),
            Finding("qs", "4.0.0", "b", ("app",), "https://x/29", 13),
        ]

        report = aggregate(findings)

        assert report["hasFindings"] is True
        assert report["totals"] == {"findings": 2, "packages": 1}
        assert report["findings"][0] == {
            "module": "qs",
            "version": "4.0.0",
            "title": "a",
            "path": ["app"],
            "advisory": "https://x/28",
            "line": 13,
        }

    def test_aggregate_empty(self):
        assert aggregate([])["hasFindings"] is False
