import pytest

from cast_ansi import move_to, strip_ansi
from cast_input import (
    CURSOR_SETTLE,
    SUBMIT_DURATION,
    generate_burst_typing_segments,
    generate_input_animation,
    generate_input_area_setup,
    get_input_area_rows,
    make_input_config,
    split_into_words,
    wrap_input_text,
)
from cast_theme import TOKYO_NIGHT


def config(width=40, height=20):
    return make_input_config(TOKYO_NIGHT, width=width, height=height)


def test_rows_for_forty_line_terminal():
    rows = get_input_area_rows(40)
    assert rows == (36, 37, 38, 39, 40)


def test_split_into_words_keeps_separators():
    assert split_into_words("ab cd\nef") == ["ab", " ", "cd", "\n", "ef"]


def test_burst_gaps_shrink_to_floor():
    words = " ".join(["w"] * 20)
    segments = [s for s in generate_burst_typing_segments(words, 0.0) if s.text.strip()]
    gaps = [b.time - a.time for a, b in zip(segments, segments[1:])]
    assert gaps[0] == pytest.approx(0.2)
    assert gaps[1] == pytest.approx(0.15)
    for earlier, later in zip(gaps, gaps[1:]):
        assert later <= earlier + 1e-9
    assert min(gaps) == pytest.approx(0.03)


def test_burst_typing_empty_text():
    assert generate_burst_typing_segments("", 1.0) == []


def test_setup_sets_scroll_region_and_cursor():
    setup = generate_input_area_setup(config())
    assert setup.startswith("\x1b[1;16r")
    assert setup.endswith(move_to(19, 3))


def test_animation_types_then_scrolls():
    result = generate_input_animation("hello world", 5.0, config())
    texts = [segment.text for segment in result.segments]
    assert texts[0] == move_to(19, 3)
    assert "hello" in texts
    assert "world" in texts
    assert texts[-1] == move_to(16) + "\r\n"

    times = [segment.time for segment in result.segments]
    assert times == sorted(times)
    assert result.duration == pytest.approx(times[-1] - 5.0)
    assert strip_ansi(result.scroll_output) == "→ hello world\r\n"


def test_animation_with_empty_text():
    result = generate_input_animation("", 0.0, config())
    assert len(result.segments) == 3
    assert result.duration == pytest.approx(CURSOR_SETTLE + SUBMIT_DURATION)


def test_long_input_is_truncated_in_prompt():
    text = "x" * 100
    result = generate_input_animation(text, 0.0, config(width=40))
    typed = [s.text for s in result.segments if s.text and not s.text.startswith("\x1b")]
    assert typed == ["x" * 36 + "…"]
    # The scroll area still gets the full text
    assert strip_ansi(result.scroll_output).replace(" ", "").replace("\r\n", "").replace("→", "") == text


def test_wrap_input_text_preserves_newlines():
    assert wrap_input_text("one\n\ntwo", config()) == ["one", "", "two"]
