"""Core check entrypoint.

This module MUST NOT contain CLI-specific behaviour so it can be used both as
a library and by the ``shrinkwrap-audit`` command.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .client import post_check
from .config import Settings, load_settings
from .errors import InputLoadError, OfflineConfigError
from .matcher import match
from .models import Finding
from .options import FileRef, InputSource, Loaded, resolve_input, validate_options
from .parsers.shrinkwrap import flatten
from .report import assemble
from .validators.advisories import load_advisories

logger = logging.getLogger(__name__)


def check(
    options: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
) -> list[Finding] | Any:
    """Check a project's dependencies against known advisories.

    Params:
        options: mapping with ``package`` and/or ``shrinkwrap`` (each a JSON
            file path or an already-parsed object) and an optional boolean
            ``offline``. ``offline`` is consumed here and never forwarded.
        settings: explicit configuration; when None it is loaded from the rc
            file and environment (see ``config.load_settings``).

    Returns: in offline mode, the ordered list of Findings; otherwise the
    remote service's JSON payload, unmodified.

    Raises:
        ValidationError: options fail validation.
        InputLoadError: ``package`` (or the shrinkwrap text) cannot be loaded.
        OfflineConfigError: offline mode lacks a shrinkwrap path or advisories.
        TreeTraversalError: the shrinkwrap tree is malformed.
        TransportError: the remote check request fails.
    """
    options = dict(options or {})
    offline = bool(options.pop("offline", False))

    document = validate_options(options)
    settings = settings or load_settings()

    package = _load_package(document)
    shrinkwrap_source, shrinkwrap = _load_shrinkwrap(document, offline)

    if offline:
        return _check_offline(settings, shrinkwrap_source, shrinkwrap)

    payload: dict[str, Any] = {}
    if package is not None:
        payload["package"] = package
    if shrinkwrap is not None:
        payload["shrinkwrap"] = shrinkwrap
    return post_check(settings, payload)


def _materialise(source: InputSource) -> Any:
    if isinstance(source, Loaded):
        return source.value
    return source.load()


def _load_package(document: dict[str, Any]) -> Any | None:
    if "package" not in document:
        return None
    return _materialise(resolve_input(document["package"]))


def _load_shrinkwrap(
    document: dict[str, Any], offline: bool
) -> tuple[InputSource | None, Any | None]:
    if "shrinkwrap" not in document:
        return None, None

    source = resolve_input(document["shrinkwrap"])
    try:
        return source, _materialise(source)
    except InputLoadError as exc:
        if offline:
            raise OfflineConfigError(
                f"npm-shrinkwrap.json is required for offline mode: {exc}"
            ) from exc
        # Optional for the remote check: continue without it.
        logger.debug("Omitting unreadable shrinkwrap: %s", exc)
        return None, None


def _check_offline(
    settings: Settings,
    shrinkwrap_source: InputSource | None,
    shrinkwrap: Any | None,
) -> list[Finding]:
    if not isinstance(shrinkwrap_source, FileRef):
        raise OfflineConfigError(
            "Offline mode requires a shrinkwrap file path to locate findings in"
        )

    advisories = load_advisories(settings.advisories_path)
    shrinkwrap_text = shrinkwrap_source.read_text()

    tree = flatten(shrinkwrap)
    matches = match(tree, advisories)
    findings = assemble(tree, matches, shrinkwrap_text, settings.advisory_url_base)

    logger.info(
        "Checked %d packages against %d advisories: %d findings",
        len(tree),
        len(advisories),
        len(findings),
    )
    return findings
