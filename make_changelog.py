#!/usr/bin/env python
"""
Thin wrapper script to invoke the changelog_helper CLI.

Running ``python make_changelog.py`` is equivalent to running the
``changelog-helper`` console script installed via ``pyproject.toml``.
"""

from changelog_helper.cli import main


if __name__ == "__main__":
    main(prog_name="changelog-helper")
