"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from shrinkwrap_audit.config import Settings

SHRINKWRAP_TEXT = """{
  "name": "app",
  "version": "1.0.0",
  "dependencies": {
    "left-pad": {
      "version": "1.0.4",
      "from": "left-pad@^1.0.0"
    },
    "request": {
      "version": "2.60.0",
      "from": "request@^2.60.0",
      "dependencies": {
        "qs": {
          "version": "4.0.0",
          "from": "qs@~4.0.0"
        },
        "hawk": {
          "version": "3.1.0",
          "from": "hawk@~3.1.0"
        }
      }
    },
    "qs": {
      "version": "6.0.0",
      "from": "qs@^6.0.0"
    }
  }
}
"""

ADVISORIES: dict[str, Any] = {
    "results": [
        {
            "id": 42,
            "module_name": "left-pad",
            "vulnerable_versions": "<1.0.5",
            "patched_versions": ">=1.0.5",
            "title": "ReDoS",
        },
        {
            "id": 28,
            "module_name": "qs",
            "vulnerable_versions": "<1.0.0 || >=4.0.0 <5.0.0",
            "title": "Denial-of-Service Memory Exhaustion",
        },
        {
            "id": 29,
            "module_name": "qs",
            "vulnerable_versions": "4.x",
            "title": "Denial-of-Service Extended Event Loop Blocking",
        },
        {
            "id": 77,
            "module_name": "hawk",
            "vulnerable_versions": "<3.1.3 || >=4.0.0 <4.1.1",
            "title": "Regular Expression Denial of Service",
        },
    ]
}


@pytest.fixture
def shrinkwrap_path(tmp_path: Path) -> Path:
    path = tmp_path / "npm-shrinkwrap.json"
    path.write_text(SHRINKWRAP_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def package_path(tmp_path: Path) -> Path:
    path = tmp_path / "package.json"
    path.write_text(
        json.dumps({"name": "app", "version": "1.0.0", "dependencies": {"left-pad": "^1.0.0"}}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def advisories_path(tmp_path: Path) -> Path:
    path = tmp_path / "advisories.json"
    path.write_text(json.dumps(ADVISORIES), encoding="utf-8")
    return path


@pytest.fixture
def settings(advisories_path: Path) -> Settings:
    return Settings(
        api_base_url="https://api.example.test",
        timeout=5.0,
        advisories_path=advisories_path,
    )


@pytest.fixture
def shrinkwrap_text() -> str:
    return SHRINKWRAP_TEXT


@pytest.fixture
def shrinkwrap_tree() -> dict[str, Any]:
    return json.loads(SHRINKWRAP_TEXT)


@pytest.fixture
def advisories_document() -> dict[str, Any]:
    return json.loads(json.dumps(ADVISORIES))
