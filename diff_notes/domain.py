"""
Core domain models for diff-notes.

These dataclasses describe parsed diff lines, line-range comments,
search matches and per-file change counts. They carry no git,
rendering or clipboard concerns so every component, and the thin
collaborators around it, can share them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

LineKind = Literal["hunk", "added", "removed", "context"]

_PREFIXES = {
    "added": "+",
    "removed": "-",
    "context": " ",
    "hunk": "",
}


@dataclass(frozen=True)
class DiffLine:
    """
    One rendered row of a parsed diff.

    content has its leading +/-/space marker removed; hunk lines keep
    their raw "@@ ... @@" text. old_lineno is only set for removed and
    context lines, new_lineno only for added and context lines.
    """

    kind: LineKind
    content: str
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None

    @property
    def prefix(self) -> str:
        return _PREFIXES[self.kind]


@dataclass(frozen=True)
class LineRange:
    """
    An inclusive pair of indices into a parsed DiffLine sequence.
    """

    start: int
    end: int

    @property
    def is_single(self) -> bool:
        return self.start == self.end

    def contains(self, index: int) -> bool:
        return self.start <= index <= self.end

    def label(self) -> str:
        """Human, 1-based rendering: "3" for one line, "2-4" otherwise."""

        if self.is_single:
            return str(self.start + 1)
        return f"{self.start + 1}-{self.end + 1}"


@dataclass(frozen=True)
class Comment:
    """
    A user annotation anchored to a contiguous line range.

    Comments are never edited in place; re-annotating a range means
    deleting the comment and creating a new one.
    """

    id: str
    content: str
    line_range: LineRange
    timestamp: datetime
    file_name: Optional[str] = None


@dataclass(frozen=True)
class SearchResult:
    """
    One case-insensitive substring occurrence inside a search corpus.

    file_index and line_index are only meaningful relative to the corpus
    snapshot the result was built from; global_index is the stable
    ordinal used for "N of M" navigation.
    """

    file_index: int
    line_index: int
    match_index: int
    global_index: int
    content: str
    file_name: str


DiffSource = Literal["branches", "working", "staged"]


@dataclass(frozen=True)
class DiffSelector:
    """
    Identifies which diff text to ask git for.

    source "branches" compares from_ref with to_ref; "working" and
    "staged" describe uncommitted local changes. path narrows the diff
    to a single file.
    """

    source: DiffSource = "working"
    from_ref: Optional[str] = None
    to_ref: Optional[str] = None
    path: Optional[str] = None

    def for_path(self, path: str) -> "DiffSelector":
        return DiffSelector(
            source=self.source,
            from_ref=self.from_ref,
            to_ref=self.to_ref,
            path=path,
        )


@dataclass
class FileChangeStats:
    """
    Per-file insertion and deletion counts, used to drive file lists.
    """

    path: str
    insertions: int
    deletions: int

    @property
    def changes(self) -> int:
        return self.insertions + self.deletions

