import pytest

from diff_notes.domain import LineRange
from diff_notes.errors import CommentValidationError
from diff_notes.export import LocalFileDiff
from diff_notes.views import Workspace

APP = "@@ -1,2 +1,2 @@\n import os\n-print('old')\n+print('new')"
LIB = "@@ -10 +10 @@\n-def helper(): pass\n+def helper(): return os"


def test_views_keep_insertion_order_as_corpus_order():
    workspace = Workspace.from_file_diffs({"app.py": APP, "lib.py": LIB})

    assert [v.name for v in workspace.views] == ["app.py", "lib.py"]
    assert workspace.corpus() == [("app.py", APP), ("lib.py", LIB)]

    results = workspace.search("os")
    assert [(r.file_name, r.line_index) for r in results] == [("app.py", 1), ("lib.py", 2)]


def test_comment_totals_are_aggregated_across_views():
    totals = []
    workspace = Workspace.from_file_diffs(
        {"app.py": APP, "lib.py": LIB},
        on_comments_change=totals.append,
    )

    first = workspace.view("app.py").add_comment(LineRange(2, 3), "print change")
    workspace.view("lib.py").add_comment(LineRange(1, 1), "removed helper")
    workspace.view("app.py").delete_comment(first.id)

    assert totals == [1, 2, 1]
    assert workspace.total_comments == 1
    assert [c.file_name for c in workspace.all_comments()] == ["lib.py"]


def test_view_validates_against_its_own_lines():
    workspace = Workspace.from_file_diffs({"lib.py": LIB})

    with pytest.raises(CommentValidationError):
        workspace.view("lib.py").add_comment(LineRange(0, 3), "too far")


def test_export_covers_all_views_or_returns_none():
    workspace = Workspace.from_file_diffs({"app.py": APP, "lib.py": LIB})
    assert workspace.export() is None

    workspace.view("lib.py").add_comment(LineRange(2, 2), "returns a module")
    workspace.view("app.py").add_comment(LineRange(3, 3), "new output")

    text = workspace.export()
    app_block, lib_block = text.split("\n\n")
    assert lib_block.endswith("+def helper(): return os")
    assert "File: app.py\nLine Range: 4\n" in app_block


def test_local_changes_name_working_and_staged_variants():
    workspace = Workspace.from_local_changes(
        {
            "app.py": LocalFileDiff(working=APP, staged=LIB),
            "lib.py": LocalFileDiff(staged=LIB),
            "empty.py": LocalFileDiff(),
        }
    )

    assert [v.name for v in workspace.views] == ["app.py (working)", "app.py (staged)", "lib.py"]

    staged_only = Workspace.from_local_changes(
        {"app.py": LocalFileDiff(working=APP, staged=LIB)},
        staged_only=True,
    )
    assert [(v.name, v.text) for v in staged_only.views] == [("app.py", LIB)]


def test_refresh_reindexes_with_same_term_and_keeps_comments():
    jumps = []
    workspace = Workspace.from_file_diffs({"app.py": APP, "lib.py": LIB}, on_navigate=jumps.append)
    workspace.search("print")
    workspace.advance()
    assert workspace.search_index.current_index == 1
    comment = workspace.view("app.py").add_comment(LineRange(1, 1), "keep me")

    workspace.update_text("app.py", APP + "\n+print('extra')")

    assert workspace.search_index.total == 3
    assert workspace.search_index.current_index == 1
    assert len(jumps) == 2
    assert workspace.view("app.py").comments == [comment]
    assert workspace.view("app.py").lines[-1].content == "print('extra')"


def test_remove_view_drops_its_comments_from_totals():
    totals = []
    workspace = Workspace.from_file_diffs({"app.py": APP, "lib.py": LIB}, on_comments_change=totals.append)
    workspace.view("lib.py").add_comment(LineRange(1, 2), "whole change")

    workspace.remove_view("lib.py")
    workspace.remove_view("missing.py")

    assert totals == [1, 0]
    assert workspace.total_comments == 0
    assert workspace.corpus() == [("app.py", APP)]


def test_adding_an_existing_name_refreshes_and_keeps_comments():
    totals = []
    workspace = Workspace(on_comments_change=totals.append)
    first = workspace.add_view("a.py", APP)
    comment = first.add_comment(LineRange(1, 1), "keep me")

    again = workspace.add_view("a.py", LIB)

    assert again is first
    assert again.text == LIB
    assert again.comments == [comment]
    assert [v.name for v in workspace.views] == ["a.py"]
    assert totals == [1]
    assert workspace.total_comments == totals[-1]
