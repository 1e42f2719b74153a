"""
Configuration loading for changelog_helper.

Provides a loader for the ``package.json`` descriptor located in the
project root. See :mod:`changelog_helper.config.loader` for
implementation details.
"""

from .loader import (  # noqa: F401
    ConfigError,
    get_bugs_url,
    get_repository_url,
    load_package_json,
)
