"""
Git client implementation for changelog_helper.

This module wraps the Git operations used by the release tooling:
reading history for changelogs and the small set of repository
maintenance commands (clone, checkout, pull, commit, push...). All
subprocess calls go through :meth:`GitClient._run` so that unit tests can
mock them easily.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_ORIGIN = "origin"

REPOSITORY_URL_PATTERN = re.compile(
    r"^((?:git@|(?:https?|git)://)github\.com(?:/|:))?"
    r"(([\w-]+)/([\w-]+(?:\.git)?))"
    r"(?:#([\w\-/.]+))?$"
)

# Hash on the first line, full message after it. Must match
# changelog_helper.changelog.commit_parser.LOG_RECORD_SEPARATOR.
LOG_FORMAT = "%H%n%B%n------------------------ >8 ------------------------"


@dataclass
class RepositoryUrl:
    """Components of a GitHub repository URL."""

    server: str
    repository: str
    user: str
    name: str
    branch: str


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def parse_repository_url(url: str) -> Optional[RepositoryUrl]:
        """Parse a GitHub URL from ``package.json``.

        Accepts ``git@github.com:user/name.git``, ``https://github.com/user/name``,
        ``git://github.com/user/name`` and the short ``user/name`` form, each
        optionally followed by ``#branch``.

        Returns
        -------
        Optional[RepositoryUrl]
            The parsed URL, or None when ``url`` is not a GitHub URL.
        """
        match = REPOSITORY_URL_PATTERN.match(url.strip())
        if not match:
            return None

        name = match.group(4)
        if name.endswith(".git"):
            name = name[:-4]

        return RepositoryUrl(
            server=match.group(1) or "git@github.com:",
            repository=match.group(2),
            user=match.group(3),
            name=name,
            branch=match.group(5) or "master",
        )

    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` directory is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    @staticmethod
    def _execute(full_cmd: List[str], cwd: Path, check: bool = True) -> subprocess.CompletedProcess:
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        result = subprocess.run(
            full_cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid characters instead of failing
        )
        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    @staticmethod
    def initialize_repository(repository_path: Path) -> None:
        """Create a new, empty repository in ``repository_path``."""
        GitClient._execute(["git", "init", str(repository_path)], cwd=Path.cwd())

    @staticmethod
    def clone_repository(url_info: RepositoryUrl, workspace_path: Path) -> None:
        """Clone the repository described by ``url_info`` into ``workspace_path``."""
        GitClient._execute(
            ["git", "clone", url_info.server + url_info.repository],
            cwd=workspace_path,
        )

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command exits with a non-zero status when ``check`` is True.
        """
        return self._execute(["git"] + args, cwd=self.repo_root, check=check)

    def checkout(self, branch_name: str) -> None:
        self._run(["checkout", branch_name])

    def pull(self, branch_name: str) -> None:
        """Pull ``branch_name`` from the default remote."""
        self._run(["pull", DEFAULT_ORIGIN, branch_name])

    def fetch_all(self) -> None:
        self._run(["fetch", "--all"])

    def get_status(self) -> str:
        """Return the short porcelain status, including the branch line."""
        return self._run(["status", "--porcelain", "-sb"]).stdout

    def initial_commit(self, package_name: str) -> None:
        self._run(["add", "."])
        self._run(["commit", "-m", f"Initial commit for {package_name}."])

    def add_remote(self, github_path: str) -> None:
        """Add ``origin`` pointing at ``git@github.com:<github_path>.git``."""
        self._run(["remote", "add", DEFAULT_ORIGIN, f"git@github.com:{github_path}.git"])

    def commit(self, message: str) -> None:
        """Commit all tracked changes with the given message."""
        self._run(["commit", "--all", "--message", message])

    def push(self) -> None:
        self._run(["push"])

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def get_last_tag(self) -> Optional[str]:
        """Return the most recent tag reachable from HEAD, or None."""
        result = self._run(["describe", "--tags", "--abbrev=0"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def get_commit_log(self, from_ref: Optional[str] = None) -> str:
        """Return raw log records from ``from_ref`` (exclusive) to HEAD.

        The whole history is returned when ``from_ref`` is None.
        """
        revision = f"{from_ref}..HEAD" if from_ref else "HEAD"
        result = self._run(["log", f"--format={LOG_FORMAT}", revision])
        return result.stdout
