"""Finding model: one reported (package, advisory) row."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Finding:
    """A vulnerable installed package, the advisory it matches and its lockfile line.

    ``line`` is 0 when the declaration could not be located in the lockfile text.
    """

    module: str
    version: str
    title: str
    path: tuple[str, ...]
    advisory: str
    line: int

    def __post_init__(self) -> None:
        if self.line < 0:
            raise ValueError("line must be non-negative")

    def to_dict(self) -> dict[str, object]:
        return {
            "module": self.module,
            "version": self.version,
            "title": self.title,
            "path": list(self.path),
            "advisory": self.advisory,
            "line": self.line,
        }
