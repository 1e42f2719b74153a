"""
Parser for raw commit messages.

Messages follow the ``Type: Subject`` convention::

    Fix: Editor no longer crashes on paste. Closes #12.

    Optional description of the change.

    Closes #12.

    BREAKING CHANGES: The `paste` event is fired asynchronously.

The parser is intentionally forgiving: a header that does not follow the
convention (merge commits, free text) yields ``type`` and ``subject`` of
``None`` and the commit is left for the transformation to judge.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from changelog_helper.changelog.commit_model import Commit, Note, Reference
from changelog_helper.changelog.transform_commit import HEADER_PATTERN, MENTION_PATTERN


NOTE_KEYWORDS = ("BREAKING CHANGES", "BREAKING CHANGE", "NOTE")
NOTE_PATTERN = re.compile(r"^(%s):\s*(.*)$" % "|".join(re.escape(k) for k in NOTE_KEYWORDS))
REFERENCE_ACTIONS = ("Closes", "Fixes", "Resolves", "See")
REFERENCE_PATTERN = re.compile(
    r"\b(%s):?\s+((?:#\d+)(?:\s*,\s*#\d+)*)" % "|".join(REFERENCE_ACTIONS)
)
ISSUE_TOKEN = re.compile(r"#(\d+)")

# Separates records in the output of GitClient.get_commit_log().
LOG_RECORD_SEPARATOR = "------------------------ >8 ------------------------"


def _is_footer_line(line: str) -> bool:
    return bool(NOTE_PATTERN.match(line) or REFERENCE_PATTERN.match(line))


def _split_message(lines: List[str]) -> Tuple[List[str], List[str]]:
    for index, line in enumerate(lines):
        if _is_footer_line(line):
            return lines[:index], lines[index:]
    return lines, []


def _join(lines: List[str]) -> Optional[str]:
    text = "\n".join(lines).strip()
    return text or None


def _parse_notes(footer_lines: List[str]) -> List[Note]:
    notes: List[Note] = []
    current: Optional[Note] = None
    for line in footer_lines:
        match = NOTE_PATTERN.match(line)
        if match:
            current = Note(title=match.group(1), text=match.group(2).strip())
            notes.append(current)
        elif REFERENCE_PATTERN.match(line) or not line.strip():
            current = None
        elif current is not None:
            current.text = f"{current.text}\n{line.strip()}".strip()
    return notes


def _parse_references(footer: str) -> List[Reference]:
    references: List[Reference] = []
    for match in REFERENCE_PATTERN.finditer(footer):
        for issue in ISSUE_TOKEN.finditer(match.group(2)):
            references.append(
                Reference(action=match.group(1), issue=issue.group(1), raw=issue.group(0), prefix="#")
            )
    return references


def parse_commit(message: str, hash: str = "") -> Commit:
    """Parse a raw commit message into a :class:`Commit`."""
    lines = message.strip("\n").splitlines()
    header = lines[0].strip() if lines else ""

    commit_type: Optional[str] = None
    subject: Optional[str] = None
    match = HEADER_PATTERN.match(header)
    if match:
        commit_type, subject = match.group(1), match.group(2)

    body_lines, footer_lines = _split_message(lines[1:])
    footer = _join(footer_lines)

    return Commit(
        hash=hash,
        header=header,
        type=commit_type,
        subject=subject,
        body=_join(body_lines),
        footer=footer,
        notes=_parse_notes(footer_lines),
        references=_parse_references(footer) if footer else [],
        mentions=MENTION_PATTERN.findall(message),
    )


def parse_git_log(output: str) -> List[Commit]:
    """Parse the output of :meth:`GitClient.get_commit_log`.

    Each record starts with the commit hash on its own line, followed by
    the full commit message.
    """
    commits: List[Commit] = []
    for record in output.split(LOG_RECORD_SEPARATOR):
        record = record.strip("\n")
        if not record.strip():
            continue
        hash_line, _, message = record.partition("\n")
        commits.append(parse_commit(message, hash=hash_line.strip()))
    return commits
