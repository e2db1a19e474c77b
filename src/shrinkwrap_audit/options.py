"""Validation and resolution of check options.

``package`` and ``shrinkwrap`` each accept either a path to a JSON file or an
already-parsed object. They are resolved once, at the boundary, into a
``FileRef`` or ``Loaded`` value so the rest of the check only ever sees one
concrete form.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeAlias

from jsonschema import Draft202012Validator

from .errors import InputLoadError, ValidationError
from .validators.schema import collect_errors, format_errors

_SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
OPTIONS_SCHEMA_PATH = _SCHEMA_DIR / "options.schema.json"

INPUT_KEYS = ("package", "shrinkwrap")


@dataclass(frozen=True)
class FileRef:
    """A JSON input that still has to be read from disk."""

    path: Path

    def load(self) -> Any:
        return load_json_file(self.path)

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InputLoadError(f"Failed to read {self.path}: {exc}") from exc


@dataclass(frozen=True)
class Loaded:
    """A JSON input the caller has already parsed."""

    value: dict[str, Any]


InputSource: TypeAlias = FileRef | Loaded


@lru_cache(maxsize=None)
def _validator() -> Draft202012Validator:
    schema = json.loads(OPTIONS_SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _as_document(options: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: str(value) if isinstance(value, Path) else value
        for key, value in options.items()
    }


def validate_options(options: Any) -> dict[str, Any]:
    """Validate check options and return them as a plain JSON-like dict.

    Raises:
        ValidationError: If neither ``package`` nor ``shrinkwrap`` is given,
            a value has the wrong type, or an unknown key is present.
    """
    if not isinstance(options, Mapping):
        raise ValidationError("Options must be an object")

    document = _as_document(options)
    errors = collect_errors(_validator(), document)
    if errors:
        raise ValidationError("Invalid check options:\n" + format_errors(errors))
    return document


def resolve_input(value: str | Path | dict[str, Any]) -> InputSource:
    """Tag a validated option value as a file reference or loaded object."""
    if isinstance(value, (str, Path)):
        return FileRef(Path(value).expanduser())
    return Loaded(value)


def load_json_file(path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        InputLoadError: If the file cannot be read or does not contain JSON.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputLoadError(f"Failed to read {path}: {exc}") from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise InputLoadError(f"Invalid JSON in {path}: {exc}") from exc
