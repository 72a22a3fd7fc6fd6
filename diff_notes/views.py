"""
Diff views and the workspace that groups them.

A DiffView pairs one named diff text with its own AnnotationStore. A
Workspace keeps an ordered set of views (one per file, or per
working/staged variant of a file) and wires them to a shared SearchIndex
and to the exporter. Everything is passed explicitly; nothing here
remembers which repository the texts came from.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .annotations import AnnotationStore
from .diff_parser import parse_diff
from .domain import Comment, DiffLine, LineRange, SearchResult
from .export import DiffLookup, LocalFileDiff, format_comments
from .search import Navigate, SearchIndex

LOG = logging.getLogger(__name__)

WORKING_SUFFIX = " (working)"
STAGED_SUFFIX = " (staged)"


class DiffView:
    """
    One diff text plus the comments made against it.
    """

    def __init__(
        self,
        name: str,
        diff_text: str,
        on_comments_change: Optional[Callable[["DiffView", List[Comment]], None]] = None,
    ) -> None:
        self.name = name
        self._text = diff_text
        self._lines: Optional[List[DiffLine]] = None
        self._on_comments_change = on_comments_change
        self.store = AnnotationStore(file_name=name, on_change=self._comments_changed)

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        self._lines = None

    @property
    def lines(self) -> List[DiffLine]:
        if self._lines is None:
            self._lines = parse_diff(self._text)
        return self._lines

    @property
    def comments(self) -> List[Comment]:
        return self.store.list_comments()

    def add_comment(self, line_range: LineRange, text: str) -> Comment:
        return self.store.add_comment(self.lines, line_range, text)

    def delete_comment(self, comment_id: str) -> bool:
        return self.store.delete_comment(comment_id)

    def _comments_changed(self, comments: List[Comment]) -> None:
        if self._on_comments_change is not None:
            self._on_comments_change(self, comments)


class Workspace:
    """
    An ordered collection of diff views sharing one search index.

    View order is the search corpus order, so it decides file_index and
    the global ordering of search results.
    """

    def __init__(
        self,
        on_navigate: Optional[Navigate] = None,
        on_comments_change: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._views: Dict[str, DiffView] = {}
        self.search_index = SearchIndex(on_navigate=on_navigate)
        self.on_comments_change = on_comments_change

    @classmethod
    def from_file_diffs(cls, file_diffs: Mapping[str, str], **kwargs) -> "Workspace":
        """Build a workspace from per-file diff texts of a branch comparison."""

        workspace = cls(**kwargs)
        for path, text in file_diffs.items():
            workspace.add_view(path, text)
        return workspace

    @classmethod
    def from_local_changes(
        cls,
        local_diffs: Mapping[str, LocalFileDiff],
        staged_only: bool = False,
        **kwargs,
    ) -> "Workspace":
        """
        Build a workspace from working-tree and staged diffs per path.

        A path with both variants gets two views, "<path> (working)" and
        "<path> (staged)"; a path with one variant keeps its plain name.
        """

        workspace = cls(**kwargs)
        for path, local in local_diffs.items():
            working = "" if staged_only else local.working
            if working and local.staged:
                workspace.add_view(f"{path}{WORKING_SUFFIX}", working)
                workspace.add_view(f"{path}{STAGED_SUFFIX}", local.staged)
            elif working or local.staged:
                workspace.add_view(path, working or local.staged)
        return workspace

    @property
    def views(self) -> List[DiffView]:
        return list(self._views.values())

    def view(self, name: str) -> DiffView:
        return self._views[name]

    def add_view(self, name: str, diff_text: str) -> DiffView:
        """
        Add a view, or refresh the text of an existing view with that name.

        An existing view keeps its comments.
        """

        existing = self._views.get(name)
        if existing is not None:
            self.update_text(name, diff_text)
            return existing

        view = DiffView(name, diff_text, on_comments_change=self._view_comments_changed)
        self._views[name] = view
        self._corpus_changed()
        return view

    def update_text(self, name: str, diff_text: str) -> None:
        """Replace a view's diff text after a refresh, keeping its comments."""

        self._views[name].text = diff_text
        self._corpus_changed()

    def remove_view(self, name: str) -> None:
        view = self._views.pop(name, None)
        if view is None:
            return
        if view.comments:
            self._view_comments_changed(view, [])
        self._corpus_changed()

    def corpus(self) -> List[Tuple[str, str]]:
        return [(view.name, view.text) for view in self._views.values()]

    def all_comments(self) -> List[Comment]:
        """Every comment, view by view, each view in insertion order."""

        return [comment for view in self._views.values() for comment in view.comments]

    @property
    def total_comments(self) -> int:
        return sum(len(view.store) for view in self._views.values())

    def search(self, term: str) -> List[SearchResult]:
        return self.search_index.build(term, self.corpus())

    def advance(self, forward: bool = True) -> Optional[SearchResult]:
        return self.search_index.advance(forward)

    def lookup(self) -> DiffLookup:
        return DiffLookup({view.name: view.text for view in self._views.values()})

    def export(self, selected_file: Optional[str] = None) -> Optional[str]:
        """
        Return the export text for all comments, or None when there are none.
        """

        comments = self.all_comments()
        if not comments:
            return None
        LOG.info("Exporting %d comments", len(comments))
        return format_comments(comments, self.lookup(), selected_file)

    def _corpus_changed(self) -> None:
        term = self.search_index.term
        if term.strip():
            self.search_index.build(term, self.corpus())

    def _view_comments_changed(self, view: DiffView, comments: List[Comment]) -> None:
        if self.on_comments_change is not None:
            self.on_comments_change(self.total_comments)
