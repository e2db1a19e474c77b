"""Load and validate the offline advisory dataset.

Also usable as a CLI to check a dataset before shipping it::

    python -m shrinkwrap_audit.validators.advisories --input advisories.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_ADVISORIES_PATH
from ..errors import OfflineConfigError
from ..models import Advisory
from .schema import collect_errors, format_errors

_DEFAULT_SCHEMA = Path(__file__).resolve().parents[1] / "schemas" / "advisories.schema.json"


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def validate_dataset(document: Any, schema_path: Path = _DEFAULT_SCHEMA) -> None:
    """Raise ValueError listing every schema violation in ``document``."""
    schema = _load_json(schema_path)
    errors = collect_errors(Draft202012Validator(schema), document)
    if errors:
        raise ValueError("\n" + format_errors(errors))


def load_advisories(path: Path) -> list[Advisory]:
    """Return the advisories in the dataset at ``path``, in file order.

    Raises:
        OfflineConfigError: If the dataset is missing, unreadable or invalid.
    """
    try:
        document = _load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        raise OfflineConfigError(f"Offline mode requires a local advisories.json: {exc}") from exc

    try:
        validate_dataset(document)
        return [Advisory.from_dict(entry) for entry in document["results"]]
    except ValueError as exc:
        raise OfflineConfigError(f"Advisory dataset {path} failed validation:{exc}") from exc


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate an offline advisory dataset.")
    parser.add_argument(
        "--input",
        type=Path,
        default=DEFAULT_ADVISORIES_PATH,
        help="Path to the advisory dataset to validate",
    )
    parser.add_argument(
        "--schema",
        type=Path,
        default=_DEFAULT_SCHEMA,
        help="Path to the JSON schema used for validation",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        validate_dataset(_load_json(args.input), args.schema)
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"ERROR: Failed to read JSON: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"ERROR: Advisory dataset failed validation:{exc}", file=sys.stderr)
        return 1

    print(f"Advisory dataset {args.input} is valid against {args.schema}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
