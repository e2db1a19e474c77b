"""Installed package model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InstalledPackage:
    """Represent one resolved ``name@version`` and the chain that pulled it in."""

    name: str
    version: str
    parents: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if not self.version:
            raise ValueError("Package version must be non-empty")

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"
