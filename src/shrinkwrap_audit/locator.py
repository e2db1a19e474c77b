"""Locate where a package version is declared in raw lockfile text."""

from __future__ import annotations

import re


def _block_pattern(name: str) -> re.Pattern[str]:
    # Matches `"name": { ... }` and v2+ `"node_modules/.../name": { ... }` keys.
    # The body stops at the first closing brace; nested objects are not followed.
    return re.compile(
        r'\s*"(?:[^"\n]*node_modules/)?' + re.escape(name) + r'":\s*\{\s*([^}]*)\}',
        re.MULTILINE,
    )


def _version_pattern(version: str) -> re.Pattern[str]:
    return re.compile(r'\s*"version":\s*"' + re.escape(version) + '"', re.MULTILINE)


def find_line(text: str, name: str, version: str) -> int:
    """Return the line of the first ``name`` block declaring ``version``, or 0.

    The result is the number of newlines before the match start plus two. The
    match absorbs the whitespace leading up to the key, so for a key on its own
    line this is the key's 1-based line number.
    """
    version_re = _version_pattern(version)
    for match in _block_pattern(name).finditer(text):
        if version_re.search(match.group(0)):
            return text.count("\n", 0, match.start()) + 2
    return 0
