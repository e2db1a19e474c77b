"""Data models for the offline advisory check."""

from __future__ import annotations

from .advisory import Advisory
from .finding import Finding
from .installed_package import InstalledPackage

__all__ = [
    "Advisory",
    "Finding",
    "InstalledPackage",
]
