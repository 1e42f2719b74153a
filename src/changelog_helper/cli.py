"""
Command line interface for the changelog_helper tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``changelog-helper`` command. It reads the
package descriptor, collects commits since the last release, transforms
them and writes a new section at the top of ``CHANGELOG.md``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import click

from changelog_helper import __version__
from changelog_helper.changelog.commit_model import Commit
from changelog_helper.changelog.commit_parser import parse_git_log
from changelog_helper.changelog.transform_commit import transform_commit
from changelog_helper.changelog.writer import (
    CHANGELOG_FILE,
    generate_changelog_section,
    prepend_changelog,
)
from changelog_helper.config.loader import ConfigError, get_repository_url, load_package_json
from changelog_helper.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6


def print_info(message: str, indent: int = 0):
    """Print an info message."""
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    """Print a success message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_error(message: str, indent: int = 0):
    """Print an error message."""
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def collect_commits(client: GitClient, from_ref: Optional[str]) -> List[Commit]:
    """Return parsed commits from ``from_ref`` (exclusive) to HEAD."""
    return parse_git_log(client.get_commit_log(from_ref))


@click.command()
@click.option(
    "--cwd",
    "cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root holding package.json (defaults to the current directory).",
)
@click.option("--from", "from_ref", help="Revision to start from (defaults to the last tag).")
@click.option("--version-name", help="Version of the new section (defaults to package.json).")
@click.option("--hide-logs", is_flag=True, help="Do not print the per-commit summary.")
@click.option("--dry-run", is_flag=True, help="Print the section instead of writing CHANGELOG.md.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="changelog-helper")
def main(
    cwd: Optional[Path],
    from_ref: Optional[str],
    version_name: Optional[str],
    hide_logs: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Generate a changelog section from the commits since the last release."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )

    project_root = cwd or Path.cwd()

    try:
        repo_root = GitClient.find_repo_root(project_root)
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)

        try:
            package_json = load_package_json(project_root)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        version = version_name or package_json.get("version")
        if not version:
            print_error("No version given and package.json does not declare one.")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        client = GitClient(repo_root)
        try:
            if from_ref is None:
                from_ref = client.get_last_tag()
            commits = collect_commits(client, from_ref)
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)

        print_info(f"Found {len(commits)} commit{'s' if len(commits) != 1 else ''} since {from_ref or 'the beginning'}")
        logger.debug("Repository root: %s, from: %s", repo_root, from_ref)

        try:
            included = [
                commit
                for commit in commits
                if transform_commit(commit, not hide_logs, package_json=package_json) is not None
            ]
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

        section = generate_changelog_section(
            included,
            version,
            repository_url=get_repository_url(package_json),
            previous_tag=from_ref,
        )

        if dry_run:
            click.echo(section)
        else:
            changelog_path = project_root / CHANGELOG_FILE
            prepend_changelog(changelog_path, section)
            print_success(f"Wrote {len(included)} change{'s' if len(included) != 1 else ''} to {changelog_path}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)
