"""
Cross-file search over a corpus of named diff texts.

The index is rebuilt from scratch on every term or corpus change. Each
rebuild parses the diff texts it is given at that moment, so a result
set is never a mix of two corpus snapshots; it can only be stale until
the next rebuild.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .diff_parser import parse_diff
from .domain import SearchResult

LOG = logging.getLogger(__name__)

Corpus = Iterable[Tuple[str, str]]
Navigate = Callable[[SearchResult], None]


def find_matches(term: str, corpus: Corpus) -> List[SearchResult]:
    """
    Return every case-insensitive occurrence of term in corpus.

    Results are ordered by file (corpus order), then by parsed line,
    then left to right within a line; global_index follows that order.
    Matches never overlap: scanning resumes after the end of each hit.
    """

    needle = term.lower()
    if not needle.strip():
        return []

    results: List[SearchResult] = []
    global_index = 0

    for file_index, (file_name, diff_text) in enumerate(corpus):
        for line_index, line in enumerate(parse_diff(diff_text)):
            haystack = line.content.lower()
            match_index = 0
            pos = haystack.find(needle)
            while pos != -1:
                results.append(
                    SearchResult(
                        file_index=file_index,
                        line_index=line_index,
                        match_index=match_index,
                        global_index=global_index,
                        content=line.content,
                        file_name=file_name,
                    )
                )
                global_index += 1
                match_index += 1
                pos = haystack.find(needle, pos + len(needle))

    return results


class SearchIndex:
    """
    Search results plus a circular navigation cursor.

    current_index is -1 when there is nothing to point at. on_navigate is
    called whenever the cursor moves to a result the caller should scroll
    to: on advance, on select, and on the automatic jump to the first
    match after a term change.
    """

    def __init__(self, on_navigate: Optional[Navigate] = None) -> None:
        self.on_navigate = on_navigate
        self.term = ""
        self.results: List[SearchResult] = []
        self.current_index = -1

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def active_result(self) -> Optional[SearchResult]:
        if 0 <= self.current_index < len(self.results):
            return self.results[self.current_index]
        return None

    def build(self, term: str, corpus: Corpus) -> List[SearchResult]:
        """
        Rebuild the result set for term over corpus.

        A new term moves the cursor to the first result and reports it
        through on_navigate. Rebuilding with the same term (the corpus
        changed underneath) keeps the cursor when it is still in range.
        """

        term_changed = term != self.term
        self.term = term

        if not term.strip():
            self.results = []
            self.current_index = -1
            return []

        self.results = find_matches(term, corpus)
        LOG.debug("Search for %r found %d results", term, len(self.results))

        if term_changed:
            self.current_index = 0 if self.results else -1
            self._navigate()
        elif not 0 <= self.current_index < len(self.results):
            self.current_index = 0 if self.results else -1

        return list(self.results)

    def advance(self, forward: bool = True) -> Optional[SearchResult]:
        """
        Move the cursor one result forward or backward, wrapping around.

        With no results this is a no-op that returns None.
        """

        if not self.results:
            return None

        count = len(self.results)
        if forward:
            self.current_index = (self.current_index + 1) % count
        elif self.current_index <= 0:
            self.current_index = count - 1
        else:
            self.current_index -= 1

        return self._navigate()

    def select(self, position: int) -> Optional[SearchResult]:
        """Jump straight to the result at position, e.g. picked from a list."""

        if not 0 <= position < len(self.results):
            return None
        self.current_index = position
        return self._navigate()

    def clear(self) -> None:
        self.term = ""
        self.results = []
        self.current_index = -1

    def status(self) -> str:
        if not self.results:
            return ""
        return f"{self.current_index + 1} of {len(self.results)} results"

    def _navigate(self) -> Optional[SearchResult]:
        result = self.active_result
        if result is not None and self.on_navigate is not None:
            self.on_navigate(result)
        return result
