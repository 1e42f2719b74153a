"""
Commit transformation used when generating changelogs.

:func:`transform_commit` receives a single parsed :class:`Commit`, decides
whether it belongs in the changelog and rewrites its notable fields in
place:

* ``BREAKING CHANGE`` notes are merged into the ``BREAKING CHANGES`` group,
* merge commits take their type and subject from the embedded
  ``Type: Subject`` line of their body,
* ``#123`` and ``@user`` tokens become Markdown links,
* public commit types are renamed to the title of their changelog group.

Exactly one summary line is logged for every processed commit.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

import click

from changelog_helper.changelog.commit_model import Commit
from changelog_helper.config.loader import get_bugs_url, load_package_json
from changelog_helper.logging_utils import LoggerFactory, get_logger


BREAKING_CHANGE = "BREAKING CHANGE"
BREAKING_CHANGES = "BREAKING CHANGES"

MERGE_HEADER_PATTERN = re.compile(r"^Merge\b")
HEADER_PATTERN = re.compile(r"^([^:]+): (.+)$")
# "[#12](...)" and "[@user](...)" are already linked.
ISSUE_PATTERN = re.compile(r"#(\d+)(?!\d*\]\()")
MENTION_PATTERN = re.compile(r"(?<!\w)@([\w-]+)(?![\w-]*\]\()")

GITHUB_URL = "https://github.com"


class Outcome(Enum):
    """Result of classifying a commit, with the colour used to log it."""

    INCLUDED = "green"
    SKIPPED = "bright_black"
    INVALID = "red"

    def styled(self) -> str:
        return click.style(self.name, fg=self.value)


class CommitType(Enum):
    """Commit types recognised in ``Type: Subject`` headers.

    Each member maps to the title of its changelog group; members without
    a title are internal and never reach the changelog.
    """

    FIX = ("Fix", "Bug fixes")
    FEATURE = ("Feature", "Features")
    OTHER = ("Other", "Other changes")
    DOCS = ("Docs", None)
    INTERNAL = ("Internal", None)
    TESTS = ("Tests", None)
    REVERT = ("Revert", None)
    RELEASE = ("Release", None)

    def __init__(self, label: str, group_title: Optional[str]) -> None:
        self.label = label
        self.group_title = group_title

    @property
    def is_public(self) -> bool:
        return self.group_title is not None

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["CommitType"]:
        return _TYPES_BY_LABEL.get(label) if label else None


_TYPES_BY_LABEL: Dict[str, CommitType] = {member.label: member for member in CommitType}


def classify_commit_type(commit_type: Optional[str]) -> Outcome:
    """Return the changelog outcome of a raw commit type label."""
    member = CommitType.from_label(commit_type)
    if member is None:
        return Outcome.INVALID
    return Outcome.INCLUDED if member.is_public else Outcome.SKIPPED


def link_references(text: Optional[str], issues_url: str) -> Optional[str]:
    """Turn ``#123`` into issue links and ``@user`` into profile links."""
    if not text:
        return text
    text = ISSUE_PATTERN.sub(lambda m: f"[#{m.group(1)}]({issues_url}/{m.group(1)})", text)
    return MENTION_PATTERN.sub(lambda m: f"[@{m.group(1)}]({GITHUB_URL}/{m.group(1)})", text)


def _unwrap_merge_commit(commit: Commit) -> None:
    if not commit.body or not MERGE_HEADER_PATTERN.match(commit.header):
        return

    first_line, _, rest = commit.body.partition("\n")
    match = HEADER_PATTERN.match(first_line.strip())
    if not match:
        return

    commit.type, commit.subject = match.group(1), match.group(2)
    lines = rest.strip().splitlines()
    commit.body = "\n".join(f"  {line}" if line.strip() else "" for line in lines) or None


def transform_commit(
    commit: Commit,
    display_logs: bool = True,
    *,
    package_json: Optional[Mapping[str, Any]] = None,
    package_loader: Callable[[], Mapping[str, Any]] = load_package_json,
    logger_factory: LoggerFactory = get_logger,
) -> Optional[Commit]:
    """Prepare ``commit`` for the changelog.

    Parameters
    ----------
    commit : Commit
        The parsed commit. It is modified in place.
    display_logs : bool
        When False the logger is requested with ``"error"`` verbosity so the
        informational summary line is not shown.
    package_json : Mapping, optional
        The package descriptor. Loaded with ``package_loader`` when omitted.
    package_loader : callable
        Returns the package descriptor of the current project.
    logger_factory : callable
        Returns a :class:`logging.Logger` for a verbosity name.

    Returns
    -------
    Optional[Commit]
        The commit when it should be rendered, ``None`` when it is skipped
        or invalid.

    Raises
    ------
    ConfigError
        If the package descriptor does not declare a ``bugs`` URL. Nothing
        is modified or logged in that case.
    """
    if package_json is None:
        package_json = package_loader()
    issues_url = get_bugs_url(package_json)
    log: logging.Logger = logger_factory("info" if display_logs else "error")

    log_line = f'* {commit.short_hash} "{commit.header}" '

    for note in commit.notes:
        if note.title == BREAKING_CHANGE:
            note.title = BREAKING_CHANGES

    _unwrap_merge_commit(commit)

    commit.subject = link_references(commit.subject, issues_url)
    for note in commit.notes:
        note.text = link_references(note.text, issues_url)

    outcome = classify_commit_type(commit.type)
    log.info(log_line + outcome.styled())

    if outcome is not Outcome.INCLUDED:
        return None

    commit.type = CommitType.from_label(commit.type).group_title
    return commit
