"""Remote check client for networked mode."""

from __future__ import annotations

import json
import logging
from typing import Any

import requests

from . import __version__
from .config import Settings
from .errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = f"shrinkwrap-audit/{__version__}"


def post_check(settings: Settings, options: dict[str, Any]) -> Any:
    """POST the options to the remote ``/check`` endpoint and return its JSON payload.

    The call is made once, with ``settings.timeout``. Transport failures and
    HTTP error statuses are raised as TransportError with the original message.
    """
    url = settings.check_url
    logger.debug("Posting check request to %s", url)

    try:
        response = requests.post(
            url,
            data=json.dumps(options),
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
            timeout=settings.timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError(str(exc)) from exc

    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(f"Invalid JSON payload from {url}: {exc}") from exc
