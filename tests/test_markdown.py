from cast_ansi import BOLD, ITALIC, RESET_BOLD, RESET_ITALIC, strip_ansi, visible_length
from cast_markdown import parse_inline_formatting, render_markdown, render_table
from cast_theme import TOKYO_NIGHT

CFG = {"theme": TOKYO_NIGHT, "width": 40}


def test_bold_and_italic():
    rendered = parse_inline_formatting("**bold** and *italic*", CFG)
    assert f"{BOLD}bold{RESET_BOLD}" in rendered
    assert f"{ITALIC}italic{RESET_ITALIC}" in rendered
    assert strip_ansi(rendered) == "bold and italic"


def test_snake_case_is_not_italic():
    rendered = parse_inline_formatting("call some_function_name now", CFG)
    assert ITALIC not in rendered
    assert strip_ansi(rendered) == "call some_function_name now"


def test_inline_code_is_protected():
    rendered = parse_inline_formatting("run `a*b*c` here", CFG)
    assert ITALIC not in rendered
    assert strip_ansi(rendered) == "run a*b*c here"


def test_escaped_markers_stay_literal():
    assert strip_ansi(parse_inline_formatting(r"2 \* 3 \* 4", CFG)) == "2 * 3 * 4"


def test_link():
    rendered = strip_ansi(parse_inline_formatting("[docs](https://example.com)", CFG))
    assert rendered == "docs (https://example.com)"


def test_blocks():
    text = "# Title\n- item\n1. first\n---\n```\ncode line\n```\nplain"
    lines = [strip_ansi(line) for line in render_markdown(text, CFG).split("\n")]
    assert lines == ["Title", "• item", "1. first", "─" * 40, "code line", "plain"]


def test_unclosed_fence_runs_to_end():
    lines = render_markdown("```\na\nb", CFG).split("\n")
    assert [strip_ansi(line) for line in lines] == ["a", "b"]


def test_paragraph_wraps_to_width():
    lines = render_markdown("word " * 30, CFG).split("\n")
    assert all(visible_length(line) <= 40 for line in lines)


def test_table_columns_are_aligned():
    rows = render_table(["| a | long header |", "|---|---|", "| wide cell | b |"], CFG)
    plain = [strip_ansi(row) for row in rows]
    assert plain[0] == "a         | long header"
    assert plain[1] == "--------- | -----------"
    assert plain[2] == "wide cell | b          "
