"""
Data models for parsed commits.

A :class:`Commit` mirrors the record produced by conventional-commit
parsers: the header split into ``type`` and ``subject``, the free-form
``body``, and the ``footer`` with its structured ``notes`` and
``references``. Records are mutable because the changelog transformation
rewrites them in place before rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class Note:
    """A footer annotation such as ``BREAKING CHANGES: <text>``."""

    title: str
    text: str


@dataclass
class Reference:
    """An issue mentioned in the footer, e.g. ``Closes #12``.

    Attributes
    ----------
    action : str
        The keyword preceding the issue (``Closes``, ``Fixes``...).
    issue : str
        The issue number without its prefix.
    raw : str
        The token as written in the message.
    prefix : str
        The issue prefix, ``#`` for GitHub issues.
    """

    action: Optional[str]
    issue: str
    raw: str
    prefix: str = "#"


@dataclass
class Commit:
    """Representation of a single parsed commit."""

    hash: str
    header: str
    type: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    footer: Optional[str] = None
    notes: List[Note] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)
    mentions: List[str] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Commit":
        """Build a commit from the mapping shape used by commit parsers.

        Missing keys and ``None`` collections are treated as empty.
        """
        notes = [
            Note(title=note.get("title", ""), text=note.get("text", ""))
            for note in data.get("notes") or []
        ]
        references = [
            Reference(
                action=ref.get("action"),
                issue=str(ref.get("issue", "")),
                raw=ref.get("raw", ""),
                prefix=ref.get("prefix", "#"),
            )
            for ref in data.get("references") or []
        ]
        return cls(
            hash=data.get("hash") or "",
            header=data.get("header") or "",
            type=data.get("type"),
            subject=data.get("subject"),
            body=data.get("body"),
            footer=data.get("footer"),
            notes=notes,
            references=references,
            mentions=list(data.get("mentions") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "header": self.header,
            "type": self.type,
            "subject": self.subject,
            "body": self.body,
            "footer": self.footer,
            "notes": [{"title": n.title, "text": n.text} for n in self.notes],
            "references": [
                {"action": r.action, "issue": r.issue, "raw": r.raw, "prefix": r.prefix}
                for r in self.references
            ],
            "mentions": list(self.mentions),
        }
