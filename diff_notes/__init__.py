"""
diff-notes: browse, annotate and search unified diffs.

The public entry points are re-exported here so callers can work with
the parser, the annotation store, the search index and the exporter
without reaching into submodules.
"""

from __future__ import annotations

from .annotations import AnnotationStore, LineSelection
from .diff_parser import parse_diff, render_line
from .domain import Comment, DiffLine, LineRange, SearchResult
from .export import DiffLookup, LocalFileDiff, format_comments
from .search import SearchIndex

__all__ = [
    "AnnotationStore",
    "Comment",
    "DiffLine",
    "DiffLookup",
    "LineRange",
    "LineSelection",
    "LocalFileDiff",
    "SearchIndex",
    "SearchResult",
    "format_comments",
    "parse_diff",
    "render_line",
]
