"""Flatten an npm shrinkwrap / package-lock tree into unique installed packages."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from typing import Any

from ..errors import TreeTraversalError
from ..models import InstalledPackage

logger = logging.getLogger(__name__)

_NODE_MODULES = "node_modules/"


def _root_chain(shrinkwrap: Mapping[str, Any]) -> tuple[str, ...]:
    name = shrinkwrap.get("name")
    version = shrinkwrap.get("version")
    if isinstance(name, str) and name:
        if isinstance(version, str) and version:
            return (f"{name}@{version}",)
        return (name,)
    return ()


def _prefer(candidate: tuple[str, ...], current: tuple[str, ...]) -> bool:
    # Shortest chain wins, then the lexicographically smallest one.
    return (len(candidate), candidate) < (len(current), current)


def _record(
    results: dict[str, InstalledPackage], name: str, version: str, parents: tuple[str, ...]
) -> str:
    key = f"{name}@{version}"
    existing = results.get(key)
    if existing is None or _prefer(parents, existing.parents):
        results[key] = InstalledPackage(name=name, version=version, parents=parents)
    return key


def _children(node: Mapping[str, Any], owner: str) -> Mapping[str, Any]:
    children = node.get("dependencies")
    if children is None:
        return {}
    if not isinstance(children, Mapping):
        raise TreeTraversalError(f"'dependencies' of {owner} must be an object")
    return children


def _flatten_dependencies(
    shrinkwrap: Mapping[str, Any], root: tuple[str, ...]
) -> dict[str, InstalledPackage]:
    """Walk the nested v1 ``dependencies`` tree breadth-first."""

    results: dict[str, InstalledPackage] = {}
    visited: set[int] = {id(shrinkwrap)}
    queue: deque[tuple[Mapping[str, Any], tuple[str, ...], str]] = deque(
        [(shrinkwrap, root, "<root>")]
    )

    while queue:
        node, parents, owner = queue.popleft()
        for name, child in _children(node, owner).items():
            if not isinstance(child, Mapping):
                raise TreeTraversalError(f"Dependency '{name}' of {owner} must be an object")
            version = child.get("version")
            if not isinstance(version, str) or not version:
                raise TreeTraversalError(f"Dependency '{name}' of {owner} has no version")

            key = _record(results, str(name), version, parents)

            # A node already expanded (shared or cyclic reference) is a leaf.
            if id(child) in visited:
                continue
            visited.add(id(child))
            queue.append((child, parents + (key,), key))

    return results


def _location_names(location: str) -> list[str]:
    # "node_modules/a/node_modules/@s/b" -> ["a", "@s/b"]
    return [segment.rstrip("/") for segment in location.split(_NODE_MODULES)[1:]]


def _flatten_packages(
    packages: Mapping[str, Any], root: tuple[str, ...]
) -> dict[str, InstalledPackage]:
    """Derive ancestry from the v2+ ``packages`` map's nested node_modules paths."""

    entries: list[tuple[str, Mapping[str, Any]]] = []
    for location, meta in packages.items():
        if not isinstance(meta, Mapping):
            raise TreeTraversalError(f"Package entry '{location}' must be an object")
        if not isinstance(location, str) or _NODE_MODULES not in location:
            continue
        if meta.get("link"):
            continue
        entries.append((location, meta))

    # Stable sort keeps file order within one nesting depth.
    entries.sort(key=lambda item: len(_location_names(item[0])))

    keys_by_location: dict[str, str] = {}
    results: dict[str, InstalledPackage] = {}

    for location, meta in entries:
        names = _location_names(location)
        version = meta.get("version")
        if not isinstance(version, str) or not version:
            raise TreeTraversalError(f"Package entry '{location}' has no version")

        parents = list(root)
        prefix = location[: location.index(_NODE_MODULES)]
        for ancestor in names[:-1]:
            prefix = f"{prefix}{_NODE_MODULES}{ancestor}"
            ancestor_key = keys_by_location.get(prefix)
            if ancestor_key is None:
                raise TreeTraversalError(
                    f"Package entry '{location}' is nested under unknown '{prefix}'"
                )
            parents.append(ancestor_key)
            prefix = f"{prefix}/"

        name = meta.get("name") if isinstance(meta.get("name"), str) else names[-1]
        keys_by_location[location] = _record(results, name, version, tuple(parents))

    return results


def flatten(shrinkwrap: Any) -> dict[str, InstalledPackage]:
    """Return ``name@version`` -> InstalledPackage for every resolved dependency.

    Supports the nested v1 ``dependencies`` tree and, when that is absent, the
    v2+ ``packages`` map. Each key appears once; its ``parents`` is the shortest
    ancestor chain found (lexicographically smallest among equals), root first.

    Raises:
        TreeTraversalError: If the lockfile does not have the expected shape.
    """
    if not isinstance(shrinkwrap, Mapping):
        raise TreeTraversalError("Shrinkwrap must be a JSON object")

    root = _root_chain(shrinkwrap)
    packages = shrinkwrap.get("packages")

    if shrinkwrap.get("dependencies") is None and isinstance(packages, Mapping):
        results = _flatten_packages(packages, root)
    else:
        results = _flatten_dependencies(shrinkwrap, root)

    logger.debug("Flattened shrinkwrap into %d unique packages", len(results))
    return results
