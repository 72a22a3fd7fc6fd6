"""
Line-range annotations for a single diff view.

An AnnotationStore only holds comments. The parsed DiffLine sequence the
comments refer to is passed in by the caller on every call that needs
it, so a store never keeps a stale copy of a diff that has since been
refreshed.
"""

from __future__ import annotations

import itertools
import logging
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .domain import Comment, DiffLine, LineRange
from .errors import CommentValidationError

LOG = logging.getLogger(__name__)

CommentsChanged = Callable[[List[Comment]], None]

_SEQUENCE = itertools.count()


def _new_comment_id() -> str:
    # Clock ticks can repeat on fast machines; the sequence keeps ids unique.
    return f"c{time.time_ns():x}-{next(_SEQUENCE)}"


class AnnotationStore:
    """
    Comments for one diff view, in insertion order.

    on_change is called with the full current list after every
    successful add, delete or clear, which lets the caller aggregate
    comments across many views without the store knowing about it.
    """

    def __init__(
        self,
        file_name: Optional[str] = None,
        on_change: Optional[CommentsChanged] = None,
    ) -> None:
        self.file_name = file_name
        self.on_change = on_change
        self._comments: List[Comment] = []

    def __len__(self) -> int:
        return len(self._comments)

    def add_comment(
        self,
        lines: Sequence[DiffLine],
        line_range: LineRange,
        text: str,
    ) -> Comment:
        """
        Validate and store a new comment over line_range.

        Raises CommentValidationError without touching the store when the
        text is blank, the range is inverted, or either bound falls
        outside the parsed sequence.
        """

        content = text.strip() if text else ""
        if not content:
            raise CommentValidationError("comment text must not be empty")
        if line_range.start > line_range.end:
            raise CommentValidationError(
                f"inverted line range {line_range.start}..{line_range.end}"
            )
        if line_range.start < 0 or line_range.end >= len(lines):
            raise CommentValidationError(
                f"line range {line_range.start}..{line_range.end} is outside "
                f"a diff of {len(lines)} lines"
            )

        comment = Comment(
            id=_new_comment_id(),
            content=content,
            line_range=line_range,
            timestamp=datetime.now(timezone.utc),
            file_name=self.file_name,
        )
        self._comments.append(comment)
        LOG.debug(
            "Added comment %s on %s lines %s",
            comment.id,
            self.file_name or "<unnamed>",
            line_range.label(),
        )
        self._notify()
        return comment

    def delete_comment(self, comment_id: str) -> bool:
        """
        Remove the comment with the given id.

        Returns False, without notifying, when no such comment exists.
        """

        for index, comment in enumerate(self._comments):
            if comment.id == comment_id:
                del self._comments[index]
                LOG.debug("Deleted comment %s", comment_id)
                self._notify()
                return True
        return False

    def list_comments(self) -> List[Comment]:
        """
        Return comments in insertion order.

        Callers that want line order sort by line_range.start themselves.
        """

        return list(self._comments)

    def comments_at(self, line_index: int) -> List[Comment]:
        return [c for c in self._comments if c.line_range.contains(line_index)]

    def clear(self) -> None:
        if not self._comments:
            return
        self._comments.clear()
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.list_comments())


class LineSelection:
    """
    Turns click and drag gestures over diff rows into line ranges.

    A click selects exactly one line. A drag selects every line between
    its endpoints, but a drag released on the line it started from is
    not a selection at all.
    """

    def __init__(self) -> None:
        self._anchor: Optional[int] = None

    @property
    def dragging(self) -> bool:
        return self._anchor is not None

    def click(self, index: int) -> LineRange:
        self.cancel()
        return LineRange(index, index)

    def begin_drag(self, index: int) -> None:
        self._anchor = index

    def update_drag(self, index: int) -> Optional[LineRange]:
        """Move the drag end and return the range currently highlighted."""

        if self._anchor is None:
            return None
        return LineRange(min(self._anchor, index), max(self._anchor, index))

    def end_drag(self, index: int) -> Optional[LineRange]:
        anchor = self._anchor
        self.cancel()
        if anchor is None or anchor == index:
            return None
        return LineRange(min(anchor, index), max(anchor, index))

    def cancel(self) -> None:
        self._anchor = None
