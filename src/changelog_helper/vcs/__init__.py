"""
Version control system (VCS) integration.

This package contains the Git client used by the release tooling to read
history and to run repository maintenance commands.
"""

from .git_client import GitClient, GitError, RepositoryUrl  # noqa: F401
