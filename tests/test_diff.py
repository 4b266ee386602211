from cast_ansi import strip_ansi
from cast_diff import (
    DiffSegment,
    LCS_CELL_LIMIT,
    diff_words,
    is_edit_tool_result,
    longest_common_subsequence,
    render_edit_diff,
    tokenize,
    wrap_segmented_line,
)
from cast_theme import TOKYO_NIGHT

CFG = {"theme": TOKYO_NIGHT, "indent_size": 2, "width": 80}


def test_tokenize_keeps_whitespace_runs():
    assert tokenize("a  b\tc") == ["a", "  ", "b", "\t", "c"]
    assert tokenize("") == []


def test_diff_words_marks_changed_word():
    old, new = diff_words("foo bar", "foo baz")
    assert old == [DiffSegment("foo ", False), DiffSegment("bar", True)]
    assert new == [DiffSegment("foo ", False), DiffSegment("baz", True)]


def test_segments_partition_the_line():
    old_line = "return compute(a, b) + offset"
    new_line = "return compute(a, c) - offset"
    old, new = diff_words(old_line, new_line)
    assert "".join(seg.text for seg in old) == old_line
    assert "".join(seg.text for seg in new) == new_line
    assert any(seg.changed for seg in old)
    assert any(seg.changed for seg in new)


def test_diff_words_empty_lines():
    assert diff_words("", "") == ([], [])


def test_lcs_falls_back_to_common_affix_for_huge_inputs():
    size = int(LCS_CELL_LIMIT ** 0.5) + 10
    old = ["same"] + [f"o{i}" for i in range(size)] + ["tail"]
    new = ["same"] + [f"n{i}" for i in range(size)] + ["tail"]
    old_kept, new_kept = longest_common_subsequence(old, new)
    assert old_kept == {0, len(old) - 1}
    assert new_kept == {0, len(new) - 1}


def test_wrap_segmented_line_prefers_spaces():
    lines = wrap_segmented_line("    1", "     ", " + ", [DiffSegment("aaaa bbbb cccc", True)],
                                "#000000", "#111111", 6)
    plain = [strip_ansi(line) for line in lines]
    assert plain == ["    1  + aaaa ", "       + bbbb ", "       + cccc"]


def test_wrap_segmented_line_terminates_without_spaces():
    lines = wrap_segmented_line("1", " ", " - ", [DiffSegment("x" * 7, False)], "#000000", "#111111", 3)
    assert [strip_ansi(line) for line in lines] == ["1  - xxx", "   - xxx", "   - x"]


def test_is_edit_tool_result():
    assert is_edit_tool_result({"filePath": "a.py", "structuredPatch": [{"lines": []}]})
    assert not is_edit_tool_result({"filePath": "a.py", "structuredPatch": []})
    assert not is_edit_tool_result("a.py")


def test_render_edit_diff_skips_malformed_hunks():
    result = {
        "filePath": "a.py",
        "structuredPatch": [
            "stray",
            {"oldStart": None, "newStart": "x", "lines": [None, "+added", 5, " same"]},
            {"lines": None},
        ],
    }
    plain = [strip_ansi(line) for line in render_edit_diff(result, CFG).split("\n")]
    assert plain[0] == "  Updated a.py with 1 addition and 0 removals"
    assert plain[1].startswith("      1  + added")
    assert plain[2].strip() == "2      same"


def test_render_edit_diff_summary_and_numbers():
    result = {
        "filePath": "src/app.py",
        "structuredPatch": [{
            "oldStart": 10,
            "newStart": 10,
            "lines": [" keep", "-old value", "+new value", "+extra"],
        }],
    }
    plain = [strip_ansi(line) for line in render_edit_diff(result, CFG).split("\n")]
    assert plain[0] == "  Updated src/app.py with 2 additions and 1 removal"
    assert plain[1].strip() == "10      keep"
    assert plain[2].startswith("     11  - old value")
    assert plain[3].startswith("     11  + new value")
    assert plain[4].startswith("     12  + extra")
