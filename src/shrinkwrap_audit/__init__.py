"""shrinkwrap-audit core package.

Checks an npm shrinkwrap / package-lock dependency tree against known
vulnerability advisories, either locally against an advisory dataset or by
delegating to a remote check service.
"""

__version__ = "0.1.0"

__all__ = [
    "core",
]
