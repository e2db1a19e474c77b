"""Finding assembly and schema-friendly output."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .locator import find_line
from .models import Advisory, Finding, InstalledPackage

DEFAULT_ADVISORY_URL = "https://requiresafe.com/advisories/"


def assemble(
    tree: Mapping[str, InstalledPackage],
    matches: Iterable[tuple[InstalledPackage, list[Advisory]]],
    shrinkwrap_text: str,
    advisory_url_base: str = DEFAULT_ADVISORY_URL,
) -> list[Finding]:
    """Expand matches into one Finding per (package, advisory).

    ``path`` comes from the flattened tree entry for the package and ``line``
    from the raw lockfile text; both are shared by every row of one package.
    """
    findings: list[Finding] = []
    for package, advisories in matches:
        path = tree[package.key].parents
        line = find_line(shrinkwrap_text, package.name, package.version)
        for advisory in advisories:
            findings.append(
                Finding(
                    module=package.name,
                    version=package.version,
                    title=advisory.title,
                    path=path,
                    advisory=f"{advisory_url_base}{advisory.id}",
                    line=line,
                )
            )
    return findings


def aggregate(findings: list[Finding]) -> dict[str, Any]:
    """Wrap findings in a report envelope with totals and top-level flags."""

    packages = {(finding.module, finding.version) for finding in findings}

    report: dict[str, Any] = {
        "version": "1",
        "hasFindings": bool(findings),
        "findings": [finding.to_dict() for finding in findings],
        "totals": {
            "findings": len(findings),
            "packages": len(packages),
        },
    }

    return report
