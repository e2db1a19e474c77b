"""npm semver range handling built atop semantic_version.

Supported expressions are whatever npm accepts in an advisory's
``vulnerable_versions`` field:
- exact versions (e.g., "1.2.3", "=1.2.3", "v1.2.3")
- comparator sets split by spaces, e.g., ">=1.0.0 <2.0.0" or ">= 1.0.0 < 2.0.0"
- alternation with "||"
- caret ^x.y.z, tilde ~x.y.z, x-ranges (1.x, 1.2.*) and hyphen ranges ("1.2.3 - 2.0.0")

Every expression is desugared into sets of primitive comparators
(``<``, ``<=``, ``>``, ``>=``, ``=``). Pre-release versions only satisfy a set
when one of its comparators names a pre-release on the same major.minor.patch
tuple, as npm does.
"""

from __future__ import annotations

import logging
import operator
import re
from collections.abc import Callable
from functools import lru_cache
from typing import TypeAlias

from semantic_version import Version

logger = logging.getLogger(__name__)

Comparator: TypeAlias = tuple[str, Version]
ComparatorSet: TypeAlias = tuple[Comparator, ...]

_PARTIAL = (
    r"(?:v|=)?\s*(\d+|[xX*])"
    r"(?:\.(\d+|[xX*])(?:\.(\d+|[xX*])(?:-?([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?)?)?"
)
_PARTIAL_RE = re.compile(r"^" + _PARTIAL + r"$")
_COMPARATOR_RE = re.compile(r"^(<=|>=|<|>|=|~>|~|\^)?\s*" + _PARTIAL + r"$")
_HYPHEN = re.compile(r"\s+-\s+")
_OPERATOR_GAP = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")

_OPERATORS: dict[str, Callable[[Version, Version], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}

# 0.0.0-0 is the lowest version there is.
_NEVER: list[Comparator] = [("<", Version("0.0.0-0"))]


def _version(major: int, minor: int = 0, patch: int = 0, prerelease: str | None = None) -> Version:
    text = f"{major}.{minor}.{patch}"
    if prerelease:
        text = f"{text}-{prerelease}"
    return Version(text)


def _is_x(part: str | None) -> bool:
    return part is None or part in ("x", "X", "*")


def _x_bounds(op: str, low: Version, high: Version) -> list[Comparator]:
    if op in ("", "="):
        return [(">=", low), ("<", high)]
    if op == ">":
        return [(">=", high)]
    if op == ">=":
        return [(">=", low)]
    if op == "<":
        return [("<", low)]
    return [("<", high)]


def _desugar(
    op: str, major: str | None, minor: str | None, patch: str | None, pre: str | None
) -> list[Comparator]:
    if _is_x(major):
        return _NEVER if op in ("<", ">") else []

    M = int(major)
    if op in ("~", "~>"):
        if _is_x(minor):
            return [(">=", _version(M)), ("<", _version(M + 1))]
        m = int(minor)
        if _is_x(patch):
            return [(">=", _version(M, m)), ("<", _version(M, m + 1))]
        return [(">=", _version(M, m, int(patch), pre)), ("<", _version(M, m + 1))]

    if op == "^":
        if _is_x(minor):
            return [(">=", _version(M)), ("<", _version(M + 1))]
        m = int(minor)
        if _is_x(patch):
            upper = _version(M + 1) if M else _version(0, m + 1)
            return [(">=", _version(M, m)), ("<", upper)]
        p = int(patch)
        if M:
            upper = _version(M + 1)
        elif m:
            upper = _version(0, m + 1)
        else:
            upper = _version(0, 0, p + 1)
        return [(">=", _version(M, m, p, pre)), ("<", upper)]

    if _is_x(minor):
        return _x_bounds(op, _version(M), _version(M + 1))
    m = int(minor)
    if _is_x(patch):
        return _x_bounds(op, _version(M, m), _version(M, m + 1))
    return [(op or "=", _version(M, m, int(patch), pre))]


def _partial(text: str) -> tuple[str | None, ...]:
    match = _PARTIAL_RE.match(text.strip())
    if not match:
        raise ValueError(f"Invalid version {text!r}")
    return match.groups()


def _hyphen(low: str, high: str) -> list[Comparator]:
    comparators: list[Comparator] = []

    major, minor, patch, pre = _partial(low)
    if not _is_x(major):
        if _is_x(minor):
            comparators.append((">=", _version(int(major))))
        elif _is_x(patch):
            comparators.append((">=", _version(int(major), int(minor))))
        else:
            comparators.append((">=", _version(int(major), int(minor), int(patch), pre)))

    major, minor, patch, pre = _partial(high)
    if not _is_x(major):
        if _is_x(minor):
            comparators.append(("<", _version(int(major) + 1)))
        elif _is_x(patch):
            comparators.append(("<", _version(int(major), int(minor) + 1)))
        else:
            comparators.append(("<=", _version(int(major), int(minor), int(patch), pre)))

    return comparators


def _parse_set(group: str) -> ComparatorSet:
    sides = _HYPHEN.split(group)
    if len(sides) == 2:
        return tuple(_hyphen(*sides))
    if len(sides) > 2:
        raise ValueError(f"Invalid hyphen range {group!r}")

    comparators: list[Comparator] = []
    for token in group.split():
        match = _COMPARATOR_RE.match(token)
        if not match:
            raise ValueError(f"Invalid comparator {token!r}")
        comparators.extend(_desugar(match.group(1) or "", *match.group(2, 3, 4, 5)))
    return tuple(comparators)


@lru_cache(maxsize=512)
def parse_range(expr: str) -> tuple[ComparatorSet, ...]:
    """Return the comparator sets for ``expr``; raises ValueError when invalid.

    An empty set matches every release version.
    """
    return tuple(
        _parse_set(_OPERATOR_GAP.sub(r"\1", group).strip()) for group in expr.split("||")
    )


def _test_set(comparators: ComparatorSet, version: Version) -> bool:
    if not all(_OPERATORS[op](version, target) for op, target in comparators):
        return False
    if not version.prerelease:
        return True
    release = (version.major, version.minor, version.patch)
    return any(
        target.prerelease and (target.major, target.minor, target.patch) == release
        for _, target in comparators
    )


def _normalise_version(installed: str) -> str:
    return installed.strip().lstrip("=v").strip()


def satisfies(installed: str, expr: str) -> bool:
    """Return True when ``installed`` falls inside the npm range ``expr``.

    Invalid versions or ranges never satisfy.
    """
    try:
        version = Version(_normalise_version(installed)).truncate("prerelease")
    except ValueError:
        logger.debug("Ignoring unparsable version %r", installed)
        return False

    try:
        sets = parse_range(expr.strip())
    except ValueError:
        logger.debug("Ignoring unparsable range %r", expr)
        return False

    return any(_test_set(comparators, version) for comparators in sets)
