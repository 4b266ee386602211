import pytest

from cast_ansi import erase_line, move_to, strip_ansi
from cast_spinner import (
    DEFAULT_SPINNER_CONFIG,
    FALLBACK_VERB,
    SPINNER_CHARS,
    VERBS,
    SpinnerMode,
    SpinnerState,
    apply_shimmer,
    generate_status_spinner_segments,
    get_shimmer_window,
    render_spinner_frame,
    select_verb,
    to_int32,
)


def test_to_int32_wraps():
    assert to_int32(2 ** 31) == -(2 ** 31)
    assert to_int32(2 ** 32 + 5) == 5
    assert to_int32(-1) == -1


def test_select_verb_is_deterministic():
    # (0 + 1) * 2654435761 wraps to -1640531535, which is odd
    assert select_verb(["even", "odd"], 0) == "odd"
    assert select_verb(VERBS, 42) == select_verb(VERBS, 42)
    assert select_verb(VERBS, 7) in VERBS
    assert select_verb([], 3) == FALLBACK_VERB


def test_verb_list():
    assert len(VERBS) == 147
    assert "Clauding" in VERBS


def test_shimmer_window_sweeps_and_exits():
    assert get_shimmer_window(0, 10, 3) == (0, 1)
    assert get_shimmer_window(5, 10, 3) == (3, 6)
    start, end = get_shimmer_window(12, 10, 3)
    assert start >= end
    assert get_shimmer_window(13, 10, 3) == (0, 1)


def test_apply_shimmer_keeps_text():
    assert strip_ansi(apply_shimmer("Baking…", 2, DEFAULT_SPINNER_CONFIG)) == "Baking…"


def test_frame_cycles_glyphs():
    for index in range(len(SPINNER_CHARS) + 1):
        frame = strip_ansi(render_spinner_frame("Baking", index, DEFAULT_SPINNER_CONFIG))
        assert frame == f"{SPINNER_CHARS[index % len(SPINNER_CHARS)]} Baking…"


def test_segments_per_interval():
    segments = generate_status_spinner_segments("Baking", 1.0, 1.0, DEFAULT_SPINNER_CONFIG)
    assert len(segments) == 5
    assert [s.time for s in segments] == pytest.approx([1.0, 1.2, 1.4, 1.6, 1.8])
    assert all(s.text.startswith("\r" + erase_line()) for s in segments)

    short = generate_status_spinner_segments("Baking", 0.0, 0.05, DEFAULT_SPINNER_CONFIG, row=37)
    assert len(short) == 1
    assert short[0].text.startswith(move_to(37, 1))


def test_state_inline_lifecycle():
    state = SpinnerState()
    assert not state.active
    assert state.frames(0.0, 1.0) == []

    output = state.start("Baking", 0.0)
    assert state.mode is SpinnerMode.INLINE
    assert strip_ansi(output) == f"\r{SPINNER_CHARS[0]} Baking…"

    assert len(state.frames(0.0, 1.0)) == 5
    assert state.clear() == "\r" + erase_line()
    assert not state.active
    assert state.clear() == ""


def test_state_fixed_row_restart_clears_first():
    state = SpinnerState(row=37)
    state.start("Baking", 0.0)
    assert state.mode is SpinnerMode.FIXED

    output = state.start("Brewing", 1.0)
    clear = move_to(37, 1) + erase_line()
    assert output.startswith(clear + clear)
    assert state.verb == "Brewing"

    state.stop()
    assert state.mode is SpinnerMode.OFF
    assert state.verb is None
