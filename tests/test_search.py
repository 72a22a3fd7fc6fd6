from diff_notes.search import SearchIndex, find_matches

CORPUS = [
    ("a.txt", "@@ -1,2 +1,2 @@\n one foo two FOO\n-foo removed"),
    ("b.txt", "@@ -1 +1 @@\n+added Foo"),
]


def test_global_order_is_file_then_line_then_occurrence():
    index = SearchIndex()

    results = index.build("foo", CORPUS)

    assert [r.global_index for r in results] == [0, 1, 2, 3]
    assert [(r.file_index, r.line_index, r.match_index) for r in results] == [
        (0, 1, 0),
        (0, 1, 1),
        (0, 2, 0),
        (1, 1, 0),
    ]
    assert results[0].file_name == "a.txt"
    assert results[0].content == "one foo two FOO"
    assert results[3].file_name == "b.txt"


def test_three_matches_across_two_files_then_no_match_term():
    corpus = [("a.txt", "...foo...foo..."), ("b.txt", "...foo...")]
    index = SearchIndex()

    results = index.build("foo", corpus)
    assert len(results) == 3
    assert [r.global_index for r in results] == [0, 1, 2]
    assert [r.file_name for r in results] == ["a.txt", "a.txt", "b.txt"]

    assert index.build("bar", corpus) == []
    assert index.current_index == -1
    assert index.active_result is None


def test_matches_do_not_overlap():
    results = find_matches("aa", [("x", "aaaa aaa")])

    assert [r.match_index for r in results] == [0, 1, 2]


def test_blank_term_resets_everything():
    index = SearchIndex()
    index.build("foo", CORPUS)

    assert index.build("   ", CORPUS) == []
    assert index.total == 0
    assert index.current_index == -1


def test_term_is_not_trimmed():
    assert find_matches(" two", CORPUS)[0].content == "one foo two FOO"
    assert find_matches("two ", [("x", "two")]) == []


def test_term_change_jumps_to_first_result():
    jumps = []
    index = SearchIndex(on_navigate=jumps.append)

    results = index.build("foo", CORPUS)

    assert index.current_index == 0
    assert jumps == [results[0]]


def test_advance_wraps_both_ways():
    corpus = [("a.txt", "foo foo foo")]
    index = SearchIndex()
    index.build("foo", corpus)

    index.advance()
    index.advance()
    assert index.current_index == 2
    assert index.advance(forward=True).global_index == 0
    assert index.current_index == 0
    assert index.advance(forward=False).global_index == 2
    assert index.current_index == 2


def test_advance_without_results_is_noop():
    jumps = []
    index = SearchIndex(on_navigate=jumps.append)

    assert index.advance() is None
    assert index.advance(forward=False) is None
    assert index.current_index == -1
    assert jumps == []


def test_corpus_rebuild_keeps_cursor_in_range():
    jumps = []
    index = SearchIndex(on_navigate=jumps.append)
    index.build("foo", CORPUS)
    index.advance()
    index.advance()
    assert index.current_index == 2
    jumps.clear()

    changed = [CORPUS[0], ("b.txt", "@@ -1 +1 @@\n+foo foo")]
    index.build("foo", changed)

    assert index.total == 5
    assert index.current_index == 2
    assert jumps == []


def test_corpus_rebuild_resets_cursor_out_of_range():
    index = SearchIndex()
    index.build("foo", CORPUS)
    index.select(3)

    index.build("foo", [("a.txt", "foo")])

    assert index.current_index == 0
    assert index.active_result.file_name == "a.txt"


def test_corpus_rebuild_with_no_results_clears_cursor():
    index = SearchIndex()
    index.build("foo", CORPUS)

    index.build("foo", [("a.txt", "nothing")])

    assert index.current_index == -1


def test_select_and_status():
    index = SearchIndex()
    assert index.status() == ""

    index.build("foo", CORPUS)
    assert index.status() == "1 of 4 results"
    assert index.select(2).global_index == 2
    assert index.status() == "3 of 4 results"
    assert index.select(9) is None
    assert index.current_index == 2


def test_clear_forgets_term():
    jumps = []
    index = SearchIndex(on_navigate=jumps.append)
    index.build("foo", CORPUS)
    index.clear()

    index.build("foo", CORPUS)

    assert len(jumps) == 2
