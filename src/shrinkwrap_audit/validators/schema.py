"""Shared JSON schema error reporting."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaError


def collect_errors(validator: Draft202012Validator, document: Any) -> list[SchemaError]:
    """Return every violation in ``document``, ordered by location."""
    return sorted(validator.iter_errors(document), key=lambda e: e.path)


def format_errors(errors: Iterable[SchemaError]) -> str:
    """Render one ``- pointer: message`` line per error; ``<root>`` for the document itself."""
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)
