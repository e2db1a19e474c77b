"""Command line entrypoint.

Usage:
  shrinkwrap-audit [--package PATH] [--shrinkwrap PATH] [--offline] [--json] [--warn-only]

When neither --package nor --shrinkwrap is given, package.json and
npm-shrinkwrap.json (or package-lock.json) from the current directory are used.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .config import load_settings
from .core import check
from .errors import CheckError
from .report import aggregate
from .summary import render_summary

WARN_ONLY_ENV_VAR = "SHRINKWRAP_AUDIT_WARN_ONLY"
FINDINGS_EXIT_CODE = 10

_LOCKFILE_NAMES = ("npm-shrinkwrap.json", "package-lock.json")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="shrinkwrap-audit",
        description="Check npm dependencies against known vulnerability advisories.",
    )
    parser.add_argument("--package", type=Path, default=None, help="Path to package.json")
    parser.add_argument(
        "--shrinkwrap",
        type=Path,
        default=None,
        help="Path to npm-shrinkwrap.json or package-lock.json",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Match locally against the advisory dataset instead of the remote service",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON rc file")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--warn-only", action="store_true", help="Exit 0 even with findings")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _build_options(args: argparse.Namespace, cwd: Path) -> dict[str, Any]:
    options: dict[str, Any] = {"offline": args.offline}

    if args.package is None and args.shrinkwrap is None:
        manifest = cwd / "package.json"
        if manifest.is_file():
            options["package"] = manifest
        for name in _LOCKFILE_NAMES:
            lockfile = cwd / name
            if lockfile.is_file():
                options["shrinkwrap"] = lockfile
                break
        return options

    if args.package is not None:
        options["package"] = args.package
    if args.shrinkwrap is not None:
        options["shrinkwrap"] = args.shrinkwrap
    return options


def _warn_only(args: argparse.Namespace) -> bool:
    if args.warn_only:
        return True
    warn_env = os.getenv(WARN_ONLY_ENV_VAR, "").strip().lower()
    return warn_env in {"1", "true", "yes", "y"}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = _build_options(args, Path.cwd())
    lockfile = options.get("shrinkwrap")

    try:
        settings = load_settings(args.config)
        result = check(options, settings)
    except CheckError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.offline:
        has_findings = bool(result)
        if args.json:
            print(json.dumps(aggregate(result), indent=2))
        else:
            print(render_summary(result, str(lockfile) if lockfile else None), end="")
    else:
        # The remote payload is opaque; a non-empty list is treated as findings.
        has_findings = isinstance(result, list) and bool(result)
        print(json.dumps(result, indent=2))

    if has_findings and not _warn_only(args):
        return FINDINGS_EXIT_CODE
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
