"""Fixed prompt area at the bottom of the terminal, with burst typing."""

from collections import namedtuple

from cast_ansi import (
    BOX,
    colorize,
    erase_line,
    horizontal_rule,
    move_to,
    set_scroll_region,
    word_wrap,
)
from cast_timing import TimedSegment

InputAreaRows = namedtuple("InputAreaRows", ["scroll_end", "spinner_row", "top_line", "input", "bottom_line"])
InputFrame = namedtuple("InputFrame", ["top_line", "prompt_prefix", "bottom_line"])
InputAnimationResult = namedtuple("InputAnimationResult", ["segments", "scroll_output", "duration"])

DEFAULT_INPUT_UI_CONFIG = {
    "width": 100,
    "height": 40,
    # Text starts after the "→ " prompt (0-indexed)
    "text_column": 2,
}

DEFAULT_BURST_TYPING_CONFIG = {
    "initial_gap_ms": 200,
    "min_gap_ms": 30,
    "decay_factor": 0.75,
}

CURSOR_SETTLE = 0.05
SUBMIT_PAUSE = 0.2
SUBMIT_DURATION = 0.1
LONG_INPUT_EXTRA_DELAY = 0.4


def make_input_config(theme, width=None, height=None, text_column=None):
    config = dict(DEFAULT_INPUT_UI_CONFIG, theme=theme)
    for key, value in (("width", width), ("height", height), ("text_column", text_column)):
        if value is not None:
            config[key] = value
    return config


def get_input_area_rows(height):
    """Rows (1-indexed) of the bottom layout.

    For a 40-row terminal: content scrolls in 1-36, the spinner sits on 37
    and the input frame occupies 38-40.
    """
    return InputAreaRows(
        scroll_end=height - 4,
        spinner_row=height - 3,
        top_line=height - 2,
        input=height - 1,
        bottom_line=height,
    )


def get_cursor_column(config):
    return config["text_column"] + 1


def render_input_frame(config):
    theme = config["theme"]
    rule = horizontal_rule(config["width"], theme["muted"])
    return InputFrame(
        top_line=rule,
        prompt_prefix=colorize(f"{BOX['arrow']} ", theme["user_prompt"]),
        bottom_line=rule,
    )


def wrap_input_text(text, config):
    # One column of right margin keeps text off the terminal edge
    text_width = config["width"] - config["text_column"] - 1
    lines = []
    for paragraph in text.split("\n"):
        lines.extend(word_wrap(paragraph, text_width) or [""])
    return lines


def split_into_words(text):
    """Split on single spaces and newlines, keeping each as its own token."""
    tokens = []
    current = ""
    for char in text:
        if char in (" ", "\n"):
            if current:
                tokens.append(current)
                current = ""
            tokens.append(char)
        else:
            current += char
    if current:
        tokens.append(current)
    return tokens


def generate_burst_typing_segments(text, start_time, config=None):
    """Time each token; the gap after a word shrinks geometrically to a floor."""
    config = config or DEFAULT_BURST_TYPING_CONFIG
    min_gap = config["min_gap_ms"] / 1000
    gap = config["initial_gap_ms"] / 1000
    current = start_time

    segments = []
    for word in split_into_words(text):
        segments.append(TimedSegment(word, current))
        if word.strip():
            current += gap
            gap = max(min_gap, gap * config["decay_factor"])
    return segments


def generate_input_area_setup(config):
    rows = get_input_area_rows(config["height"])
    frame = render_input_frame(config)
    return (
        set_scroll_region(1, rows.scroll_end)
        + move_to(rows.top_line) + frame.top_line
        + move_to(rows.input) + frame.prompt_prefix
        + move_to(rows.bottom_line) + frame.bottom_line
        + move_to(rows.input, get_cursor_column(config))
    )


def redraw_input_frame(config):
    rows = get_input_area_rows(config["height"])
    frame = render_input_frame(config)
    return (
        move_to(rows.top_line) + erase_line() + frame.top_line
        + move_to(rows.input) + erase_line() + frame.prompt_prefix
        + move_to(rows.bottom_line) + erase_line() + frame.bottom_line
        + move_to(rows.input, get_cursor_column(config))
    )


def generate_input_animation(text, start_time, config, typing_config=None):
    """Type text into the prompt row, submit it, and format it for the scroll area."""
    rows = get_input_area_rows(config["height"])
    frame = render_input_frame(config)
    cursor_col = get_cursor_column(config)

    segments = [TimedSegment(move_to(rows.input, cursor_col), start_time)]
    current = start_time + CURSOR_SETTLE

    max_display = config["width"] - config["text_column"] - 1
    display_text = text.replace("\n", " ")
    extra_delay = 0.0
    if len(display_text) > max_display:
        display_text = display_text[:max_display - 1] + "…"
        extra_delay = LONG_INPUT_EXTRA_DELAY

    typed = generate_burst_typing_segments(display_text, current, typing_config)
    segments.extend(typed)
    if typed:
        current = typed[-1].time + SUBMIT_PAUSE + extra_delay

    segments.append(TimedSegment(
        move_to(rows.input) + erase_line() + frame.prompt_prefix + move_to(rows.input, cursor_col),
        current,
    ))
    current += SUBMIT_DURATION

    segments.append(TimedSegment(move_to(rows.scroll_end) + "\r\n", current))

    continuation = " " * (config["text_column"] + 1)
    scroll_lines = []
    for index, line in enumerate(wrap_input_text(text, config)):
        styled = colorize(line, config["theme"]["user_prompt"])
        scroll_lines.append(frame.prompt_prefix + styled if index == 0 else continuation + styled)

    return InputAnimationResult(
        segments=segments,
        scroll_output="\r\n".join(scroll_lines) + "\r\n",
        duration=current - start_time,
    )
