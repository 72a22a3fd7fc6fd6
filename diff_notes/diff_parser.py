"""
Unified diff parsing for diff-notes.

The parser turns one unified diff text blob into a flat, ordered list of
DiffLine objects with dual (old/new) line numbering. Every row is
addressable by its index in that list, which is what comments and search
results refer to.

The implementation is deliberately lenient: diff text comes from an
external tool whose conventions may vary between versions, so malformed
input degrades to a best-effort classification instead of raising.
"""

from __future__ import annotations

import re
from typing import List

from .domain import DiffLine


_HUNK_HEADER_RE = re.compile(
    r"@@ -(?P<old_start>\d+)(?:,(?P<old_count>\d+))?"
    r" \+(?P<new_start>\d+)(?:,(?P<new_count>\d+))?"
    r" @@"
)

# File-header noise that never becomes a row.
_CONTROL_PREFIXES = ("diff", "index", "+++", "---")


def parse_diff(diff_text: str) -> List[DiffLine]:
    """
    Parse unified diff text into DiffLine rows.

    Rows are emitted in input order. Line counters start at zero and are
    re-seeded from every hunk header so the first data line after
    "@@ -10,3 +12,4 @@" is numbered 10 (old) and 12 (new). A header that
    does not match the expected shape leaves the counters untouched.

    Lines without a marker are treated as context; some diff producers
    omit the leading space on unchanged lines.
    """

    if not diff_text:
        return []

    physical = diff_text.split("\n")
    if physical[-1] == "":
        # Trailing newline, not an extra row.
        physical.pop()

    rows: List[DiffLine] = []
    old_lineno = 0
    new_lineno = 0
    in_hunk = False

    for raw in physical:
        line = raw[:-1] if raw.endswith("\r") else raw

        if line.startswith("@@"):
            match = _HUNK_HEADER_RE.match(line)
            if match:
                old_lineno = int(match.group("old_start")) - 1
                new_lineno = int(match.group("new_start")) - 1
            in_hunk = True
            rows.append(DiffLine(kind="hunk", content=line))
            continue

        if not in_hunk and line.startswith(("+++", "---")):
            continue

        if line.startswith("+"):
            new_lineno += 1
            rows.append(DiffLine(kind="added", content=line[1:], new_lineno=new_lineno))
        elif line.startswith("-"):
            old_lineno += 1
            rows.append(DiffLine(kind="removed", content=line[1:], old_lineno=old_lineno))
        elif line.startswith(" ") or not line.startswith(_CONTROL_PREFIXES):
            old_lineno += 1
            new_lineno += 1
            content = line[1:] if line.startswith(" ") else line
            rows.append(
                DiffLine(
                    kind="context",
                    content=content,
                    old_lineno=old_lineno,
                    new_lineno=new_lineno,
                )
            )
        elif line.startswith("diff"):
            # A new file section; its ---/+++ headers are not content.
            in_hunk = False

    return rows


def render_line(line: DiffLine) -> str:
    """
    Render a parsed row back to its marker form.

    Hunk rows have no prefix; added, removed and context rows get "+",
    "-" and " " respectively.
    """

    return f"{line.prefix}{line.content}"
