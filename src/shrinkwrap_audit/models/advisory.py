"""Advisory model for the offline advisory dataset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Advisory:
    """A published vulnerability affecting a range of versions of one module."""

    module_name: str
    vulnerable_versions: str
    id: int | str
    title: str
    patched_versions: str | None = None

    def __post_init__(self) -> None:
        if not self.module_name:
            raise ValueError("Advisory module_name must be non-empty")
        if not isinstance(self.vulnerable_versions, str):
            raise ValueError(f"Advisory {self.id} has a non-string vulnerable_versions")
        if self.id is None or self.id == "":
            raise ValueError("Advisory id must be provided")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Advisory:
        return cls(
            module_name=str(data.get("module_name", "")),
            vulnerable_versions=data.get("vulnerable_versions", ""),
            id=data.get("id"),
            title=str(data.get("title", "")),
            patched_versions=data.get("patched_versions"),
        )
