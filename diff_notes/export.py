"""
Plain-text export of comments together with the code they annotate.

The exporter re-parses the diff text each comment belongs to and slices
the commented rows out of that fresh parse, so line numbering always
comes from the parser and never from the exporter itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Union

from .diff_parser import parse_diff, render_line
from .domain import Comment

LOG = logging.getLogger(__name__)

NO_FILE_PLACEHOLDER = "No file information available"
NO_DIFF_PLACEHOLDER = "No diff content available"
UNKNOWN_FILE = "Unknown file"


@dataclass(frozen=True)
class LocalFileDiff:
    """
    Working-tree and staged diff text for the same path.
    """

    working: str = ""
    staged: str = ""

    def text(self) -> str:
        return self.working or self.staged


DiffEntry = Union[str, LocalFileDiff]


def _entry_text(entry: Optional[DiffEntry]) -> str:
    if entry is None:
        return ""
    if isinstance(entry, LocalFileDiff):
        return entry.text()
    return entry


class DiffLookup:
    """
    Resolves a comment's file name to the diff text it was made against.

    Views address the same path under several names, e.g. "app.py" and
    "app.py (staged)", so resolution is two-tier: an exact key first,
    then the first key (in mapping order) that contains, or is contained
    in, the requested name and has non-empty text.
    """

    def __init__(self, entries: Mapping[str, DiffEntry]) -> None:
        self._entries = dict(entries)

    def resolve(self, key: str) -> Optional[str]:
        text = _entry_text(self._entries.get(key))
        if text:
            return text

        for candidate, entry in self._entries.items():
            if candidate in key or key in candidate:
                text = _entry_text(entry)
                if text:
                    LOG.debug("Resolved %r through partial match %r", key, candidate)
                    return text
        return None


def code_for_comment(
    comment: Comment,
    lookup: DiffLookup,
    selected_file: Optional[str] = None,
) -> str:
    """
    Return the rows a comment covers, rendered with their diff markers.

    The stored range is clamped to the current parse, since the diff may
    have changed since the comment was made.
    """

    file_key = comment.file_name or selected_file
    if not file_key:
        return NO_FILE_PLACEHOLDER

    diff_text = lookup.resolve(file_key)
    if not diff_text:
        LOG.info("No diff text for %s; exporting placeholder", file_key)
        return NO_DIFF_PLACEHOLDER

    rows = parse_diff(diff_text)
    start = max(0, comment.line_range.start)
    end = min(len(rows) - 1, comment.line_range.end)
    return "\n".join(render_line(row) for row in rows[start : end + 1])


def format_comment(
    comment: Comment,
    lookup: DiffLookup,
    selected_file: Optional[str] = None,
) -> str:
    file_label = comment.file_name or selected_file or UNKNOWN_FILE
    code = code_for_comment(comment, lookup, selected_file)
    return (
        f"Comment: {comment.content}\n"
        f"File: {file_label}\n"
        f"Line Range: {comment.line_range.label()}\n"
        f"Code:\n"
        f"{code}"
    )


def format_comments(
    comments: Iterable[Comment],
    lookup: DiffLookup,
    selected_file: Optional[str] = None,
) -> str:
    """
    Render comments as copyable blocks separated by a blank line.

    Returns an empty string when there are no comments; callers are
    expected not to offer an export in that case.
    """

    blocks = [format_comment(c, lookup, selected_file) for c in comments]
    return "\n\n".join(blocks)
