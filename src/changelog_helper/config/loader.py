"""
Package descriptor loader for changelog_helper.

The changelog tooling reads the ``package.json`` file located in the
project root. Only a few fields are relevant: ``name``, ``version``,
``bugs`` (the issue tracker used to link ``#123`` references) and
``repository`` (used to link commits and compare views).

If the descriptor is missing, malformed, or lacks the ``bugs`` field when
it is needed, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings when the CLI has not
# configured logging.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


PACKAGE_JSON = "package.json"


class ConfigError(Exception):
    """Raised when the package descriptor is missing or invalid."""

    pass


def load_package_json(cwd: Optional[Path] = None) -> Dict[str, Any]:
    """Load ``package.json`` from ``cwd`` and return its content.

    Args:
        cwd: Directory holding the descriptor. Defaults to the current
             working directory.

    Returns:
        The parsed descriptor as a dictionary.

    Raises:
        ConfigError: If the file is missing, is not valid JSON or does not
            contain a JSON object.
    """
    root = Path(cwd) if cwd is not None else Path.cwd()
    path = root / PACKAGE_JSON

    if not path.exists():
        logger.error("Package descriptor '%s' does not exist", path)
        raise ConfigError(f"Missing package descriptor: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse package descriptor: %s", exc)
        raise ConfigError(f"Invalid JSON in {path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")

    logger.debug("Loaded package descriptor from: %s", path)
    return data


def _url_field(package_json: Mapping[str, Any], key: str) -> Optional[str]:
    # npm accepts both "bugs": "<url>" and "bugs": {"url": "<url>"}.
    value = package_json.get(key)
    if isinstance(value, Mapping):
        value = value.get("url")
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def get_bugs_url(package_json: Mapping[str, Any]) -> str:
    """Return the issue tracker URL declared in the descriptor.

    Raises:
        ConfigError: If the ``bugs`` property is missing or empty.
    """
    url = _url_field(package_json, "bugs")
    if url is None:
        name = package_json.get("name")
        logger.error("Package descriptor of %r does not declare a bugs URL", name)
        raise ConfigError(
            f'The package.json for "{name}" must contain the "bugs" property.'
        )
    return url.rstrip("/")


def get_repository_url(package_json: Mapping[str, Any]) -> Optional[str]:
    """Return the repository URL declared in the descriptor, if any."""
    return _url_field(package_json, "repository")
