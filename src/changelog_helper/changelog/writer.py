"""
Markdown rendering of changelog sections.

Commits reaching the writer have already been through
:func:`~changelog_helper.changelog.transform_commit.transform_commit`, so
their ``type`` holds the title of their group and their subject and notes
already contain Markdown links.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict
from datetime import date as date_type
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from changelog_helper.changelog.commit_model import Commit
from changelog_helper.changelog.transform_commit import BREAKING_CHANGES, CommitType
from changelog_helper.vcs.git_client import GitClient


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CHANGELOG_FILE = "CHANGELOG.md"
CHANGELOG_HEADER = "Changelog\n=========\n\n"
CHANGELOG_HEADER_PATTERN = re.compile(r"\A\s*Changelog\r?\n=+[ \t]*(?:\r?\n)+")
NO_CHANGES_MESSAGE = "Internal changes only (updated dependencies, documentation, etc.)."
GROUP_ORDER = [member.group_title for member in CommitType if member.is_public]
OTHER_NOTES = "NOTE"


def _github_base(repository_url: Optional[str]) -> Optional[str]:
    if not repository_url:
        return None
    info = GitClient.parse_repository_url(repository_url)
    if info is None:
        return None
    return f"https://github.com/{info.user}/{info.name}"


def _render_commit(commit: Commit, github_base: Optional[str]) -> List[str]:
    entry = f"* {commit.subject}"
    if github_base:
        entry += f" ([{commit.short_hash}]({github_base}/commit/{commit.hash}))"
    else:
        entry += f" ({commit.short_hash})"

    lines = [entry]
    if commit.body:
        lines.append("")
        lines.append(commit.body)
        lines.append("")
    return lines


def generate_changelog_section(
    commits: Iterable[Commit],
    version: str,
    *,
    repository_url: Optional[str] = None,
    previous_tag: Optional[str] = None,
    date: Optional[date_type] = None,
) -> str:
    """Render a release section for ``version``.

    Parameters
    ----------
    commits : Iterable[Commit]
        Transformed commits that should appear in the changelog.
    version : str
        The released version, without the ``v`` prefix.
    repository_url : str, optional
        Repository URL from the package descriptor. Commit and compare
        links are only rendered for GitHub repositories.
    previous_tag : str, optional
        Tag of the previous release, used for the compare link.
    date : datetime.date, optional
        Release date; today when omitted.
    """
    release_date = (date or date_type.today()).isoformat()
    github_base = _github_base(repository_url)

    if github_base and previous_tag:
        heading = f"## [{version}]({github_base}/compare/{previous_tag}...v{version}) ({release_date})"
    else:
        heading = f"## {version} ({release_date})"

    groups: Dict[str, List[Commit]] = OrderedDict((title, []) for title in GROUP_ORDER)
    notes: Dict[str, List[str]] = OrderedDict([(BREAKING_CHANGES, []), (OTHER_NOTES, [])])

    for commit in commits:
        if commit.type not in groups:
            logger.debug("Ignoring commit %s with group %r", commit.short_hash, commit.type)
            continue
        groups[commit.type].append(commit)
        for note in commit.notes:
            key = BREAKING_CHANGES if note.title == BREAKING_CHANGES else OTHER_NOTES
            notes[key].append(note.text)

    lines = [heading, ""]
    if not any(groups.values()):
        lines.extend([NO_CHANGES_MESSAGE, ""])
        return "\n".join(lines)

    for title, group in groups.items():
        if not group:
            continue
        lines.extend([f"### {title}", ""])
        for commit in group:
            lines.extend(_render_commit(commit, github_base))
        if lines[-1] != "":
            lines.append("")

    for title, texts in notes.items():
        if not texts:
            continue
        lines.extend([f"### {title}", ""])
        lines.extend(f"* {text}" for text in texts)
        lines.append("")

    return "\n".join(lines)


def prepend_changelog(path: Path, section: str) -> None:
    """Insert ``section`` at the top of the changelog stored in ``path``.

    The file is created with the standard header when it does not exist.
    """
    path = Path(path)
    if path.exists():
        existing = path.read_text(encoding="utf-8")
    else:
        logger.debug("Creating new changelog at %s", path)
        existing = CHANGELOG_HEADER

    previous = CHANGELOG_HEADER_PATTERN.sub("", existing, count=1)

    content = CHANGELOG_HEADER + section.rstrip("\n") + "\n"
    if previous.strip():
        content += "\n" + previous.lstrip("\n")
    path.write_text(content, encoding="utf-8")
