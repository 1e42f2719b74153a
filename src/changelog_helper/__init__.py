"""
Top-level package for changelog_helper.

This package exposes the main CLI entry point via the
``changelog_helper.cli`` module and the commit transformation used to
build changelog sections via :mod:`changelog_helper.changelog`.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
