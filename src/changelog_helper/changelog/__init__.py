"""
Changelog generation.

This package parses raw commit messages, decides which commits belong in
the changelog and renders release sections. See
:mod:`changelog_helper.changelog.transform_commit` and
:mod:`changelog_helper.changelog.writer` for details.
"""

from .commit_model import Commit, Note, Reference  # noqa: F401
from .commit_parser import parse_commit, parse_git_log  # noqa: F401
from .transform_commit import CommitType, Outcome, classify_commit_type, transform_commit  # noqa: F401
from .writer import generate_changelog_section, prepend_changelog  # noqa: F401
