"""Match installed packages against advisories."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import Advisory, InstalledPackage
from .parsers.ranges import satisfies


def advisories_for(package: InstalledPackage, advisories: Iterable[Advisory]) -> list[Advisory]:
    """Return the advisories affecting ``package``, in dataset order."""
    return [
        advisory
        for advisory in advisories
        if advisory.module_name == package.name
        and satisfies(package.version, advisory.vulnerable_versions)
    ]


def match(
    tree: Mapping[str, InstalledPackage],
    advisories: Iterable[Advisory],
) -> list[tuple[InstalledPackage, list[Advisory]]]:
    """Pair each vulnerable package with its matching advisories.

    Packages without a matching advisory are dropped. The result follows the
    iteration order of ``tree``.
    """
    advisories = list(advisories)
    matches: list[tuple[InstalledPackage, list[Advisory]]] = []
    for package in tree.values():
        found = advisories_for(package, advisories)
        if found:
            matches.append((package, found))
    return matches
