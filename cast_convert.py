"""Convert transcript entries into an asciicast v3 document."""

import logging
from collections import namedtuple
from datetime import timedelta

from cast_ansi import move_to
from cast_builder import DEFAULT_BUILDER_CONFIG, CastBuilder
from cast_commands import is_bash_input_message, parse_bash_input, render_bash_input
from cast_content import extract_text, message_content
from cast_input import (
    DEFAULT_BURST_TYPING_CONFIG,
    generate_input_animation,
    generate_input_area_setup,
    get_input_area_rows,
    make_input_config,
    redraw_input_frame,
)
from cast_loader import EPOCH, get_timestamp, is_renderable_message
from cast_markers import DEFAULT_MARKER_OPTIONS, generate_marker_label, should_have_marker
from cast_messages import INTERRUPT_TEXT, make_render_config, render_message
from cast_spinner import VERBS, SpinnerMode, SpinnerState, select_verb, to_int32
from cast_theme import get_theme, to_cast_theme
from cast_timing import TimingCalculator, resolve_timing_config
from cast_todos import is_todo_write_result

logger = logging.getLogger(__name__)

# Seconds of playback before the spinner may show a different verb
MIN_VERB_INTERVAL = 2.0

ConvertResult = namedtuple("ConvertResult", ["document", "stats"])


def _content_items(entry):
    content = message_content(entry)
    if isinstance(content, str):
        return [{"type": "text", "text": content}] if content else []
    return [item for item in content if isinstance(item, dict)]


def _seed_message_index(entries):
    """Verb seed from the first entry's timestamp, so each session rotates differently."""
    timestamp = get_timestamp(entries[0]) if entries else None
    if timestamp is None:
        return 0
    millis = (timestamp - EPOCH) // timedelta(milliseconds=1)
    return abs(to_int32(millis)) % 1000


class _Facets:
    """Independent classification flags for one entry."""

    def __init__(self, entry):
        entry_type = entry.get("type")
        is_user = entry_type == "user"
        is_assistant = entry_type == "assistant"
        raw = message_content(entry)
        items = _content_items(entry) if is_user or is_assistant else []

        self.is_tool_result = is_user and bool(entry.get("toolUseResult"))
        self.is_bash_output = is_user and isinstance(raw, str) and (
            "<bash-stdout>" in raw or "<bash-stderr>" in raw
        )
        self.is_bash_input = is_user and isinstance(raw, str) and is_bash_input_message(raw)
        self.is_interrupt = is_user and not self.is_tool_result and any(
            item.get("type") == "text" and INTERRUPT_TEXT in str(item.get("text") or "")
            for item in items
        )
        self.is_system_info = entry_type == "system" and entry.get("level") == "info"
        self.is_meta = is_user and bool(entry.get("isMeta"))
        # Interrupts and meta notices are never typed into the prompt
        self.is_user_prompt = (
            is_user
            and not self.is_tool_result
            and not self.is_meta
            and not self.is_bash_output
            and not self.is_interrupt
        )
        self.is_assistant_with_text = is_assistant and any(
            item.get("type") == "text" and str(item.get("text") or "").strip() for item in items
        )
        self.is_tool_call = is_assistant and any(item.get("type") == "tool_use" for item in items)
        self.is_simple_tool_call = self.is_tool_call and not any(
            item.get("type") == "tool_use" and item.get("name") == "TodoWrite" for item in items
        )
        self.is_agentic = self.is_tool_result or (
            is_assistant and any(item.get("type") in ("thinking", "tool_use") for item in items)
        )
        self.should_clear_spinner = self.is_meta or self.is_system_info or self.is_interrupt

        text = extract_text(raw) if is_user or is_assistant else ""
        stripped = text.strip()
        self.text = text
        self.is_command = stripped.startswith("<command-name>") or stripped.startswith("<local-command-stdout>")


class _Conversion:
    """State for one conversion pass: builder, clock, spinner and verb rotation."""

    def __init__(self, entries, render_config, timing_config, marker_options, builder_config,
                 input_animation, burst_config, status_spinner, spinner_duration, spinner_config):
        self.render_config = render_config
        self.marker_options = marker_options
        self.input_animation = input_animation
        self.burst_config = burst_config
        self.status_spinner = status_spinner
        self.spinner_duration = spinner_duration

        self.builder = CastBuilder(**builder_config)
        self.timing = TimingCalculator(timing_config)

        self.input_config = make_input_config(
            render_config["theme"], width=builder_config["cols"], height=builder_config["rows"]
        )
        self.rows = get_input_area_rows(builder_config["rows"])
        spinner_row = self.rows.spinner_row if input_animation else None
        self.spinner = SpinnerState(spinner_config, row=spinner_row)

        self.active_form = None
        self.message_index = _seed_message_index(entries)
        self.last_verb = None
        self.last_verb_change = 0.0

        self.entries_rendered = 0
        self.markers_generated = 0

    # -- spinner --------------------------------------------------------------

    def throttled_verb(self):
        elapsed = self.builder.time - self.last_verb_change
        if self.last_verb is not None and elapsed < MIN_VERB_INTERVAL:
            self.message_index += 1
            return self.last_verb

        verb = self.active_form or select_verb(VERBS, self.message_index)
        self.message_index += 1
        self.last_verb_change = self.builder.time
        self.last_verb = verb
        return verb

    def start_spinner(self):
        self.builder.output(self.spinner.start(self.throttled_verb(), self.builder.time))

    def continue_spinner(self, duration):
        if self.spinner_duration is not None:
            duration = min(duration, self.spinner_duration)
        for segment in self.spinner.frames(self.builder.time, duration):
            self.builder.time = segment.time
            self.builder.output(segment.text)

    def clear_spinner(self):
        inline = self.spinner.row is None
        self.builder.output(self.spinner.clear())
        if inline:
            self.builder.output("\r\n")

    # -- entries --------------------------------------------------------------

    def track_active_form(self, entry):
        result = entry.get("toolUseResult")
        if entry.get("type") == "user" and is_todo_write_result(result):
            in_progress = next(
                (t for t in result["newTodos"] if isinstance(t, dict) and t.get("status") == "in_progress"),
                None,
            )
            self.active_form = in_progress.get("activeForm") if in_progress else None

    def advance_clock(self, entry):
        previous = self.builder.time
        entry_time = self.timing.next_entry(entry)
        if self.status_spinner and self.spinner.active:
            gap = entry_time - previous
            if gap > 0:
                self.continue_spinner(gap)
        self.builder.time = entry_time

    def emit_marker(self, entry):
        if not should_have_marker(entry, self.marker_options["mode"]):
            return
        label = generate_marker_label(entry, self.marker_options["label_length"])
        if label:
            self.builder.marker(label)
            self.markers_generated += 1

    def process(self, entry):
        """Handle one entry; returns False when it produced no output."""
        if self.status_spinner:
            self.track_active_form(entry)

        facets = _Facets(entry)
        use_input_animation = self.input_animation and facets.is_user_prompt

        # Typed prompts run their own clock unless a spinner needs the gap filled
        if not use_input_animation or (self.status_spinner and self.spinner.active):
            self.advance_clock(entry)

        if self.status_spinner and self.spinner.active and facets.should_clear_spinner:
            self.clear_spinner()

        # An inline spinner has already scrolled away under the response
        if self.status_spinner and facets.is_assistant_with_text and self.spinner.mode is SpinnerMode.INLINE:
            self.spinner.stop()

        self.emit_marker(entry)

        if use_input_animation and not facets.is_command:
            return self.render_typed_prompt(entry, facets)
        return self.render_static(entry, facets)

    def render_typed_prompt(self, entry, facets):
        raw = message_content(entry)
        bash_command = parse_bash_input(raw) if facets.is_bash_input else None
        text = f"! {bash_command}" if bash_command is not None else facets.text
        if not text.strip():
            return False

        animation = generate_input_animation(text, self.builder.time, self.input_config, self.burst_config)
        for segment in animation.segments:
            self.builder.time = segment.time
            self.builder.output(segment.text)

        if bash_command is not None:
            rendered = render_bash_input(bash_command, self.render_config)
            self.builder.output(rendered.replace("\n", "\r\n") + "\r\n")
        else:
            self.builder.output(animation.scroll_output)

        self.builder.output(redraw_input_frame(self.input_config))
        self.timing.time = self.builder.time

        if self.status_spinner:
            self.start_spinner()
        return True

    def render_static(self, entry, facets):
        rendered = render_message(entry, self.render_config)
        if not rendered:
            return False

        # Calls and bash I/O sit directly above their results
        tight = facets.is_simple_tool_call or facets.is_bash_input or facets.is_bash_output
        trailing = "\r\n" if tight else "\r\n\r\n"

        if self.input_animation:
            # One row above the scroll boundary so the newline scrolls instead of overwriting
            self.builder.output(move_to(self.rows.scroll_end - 1, 1) + "\r\n")

        self.builder.output(rendered.replace("\n", "\r\n") + trailing)

        if self.input_animation:
            self.builder.output(redraw_input_frame(self.input_config))

        if self.status_spinner:
            if facets.is_user_prompt or (facets.is_agentic and not self.spinner.active):
                self.start_spinner()
        return True

    def run(self, entries):
        if self.input_animation:
            self.builder.output(generate_input_area_setup(self.input_config))

        for entry in entries:
            if not isinstance(entry, dict) or not is_renderable_message(entry):
                continue
            if self.process(entry):
                self.entries_rendered += 1

        document = self.builder.build()
        stats = {
            "entries_processed": len(entries),
            "entries_rendered": self.entries_rendered,
            "events_generated": len(document["events"]),
            "markers_generated": self.markers_generated,
            "duration": self.builder.time,
        }
        logger.debug("Conversion stats: %s", stats)
        return ConvertResult(document, stats)


def convert_to_cast(entries, theme=None, cols=None, rows=None, title=None, timestamp=None,
                    preset=None, max_wait=None, thinking_pause=None, typing_effect=None,
                    typing_speed=None, marker_mode=None, label_length=None, render=None,
                    input_animation=False, burst_config=None, status_spinner=False,
                    spinner_duration=None, spinner_config=None):
    """Convert transcript entries to a recording document.

    Returns a ConvertResult of the document dict and a stats dict. No
    wall clock is read: the header only carries ``timestamp`` when one is
    passed. ``spinner_duration`` caps how long the spinner animates into
    any one gap; None lets it fill the whole gap.
    """
    render_overrides = dict(render or {})
    if isinstance(theme, str):
        theme = get_theme(theme)
    if theme is not None:
        render_overrides["theme"] = theme
    render_config = make_render_config(**render_overrides)
    if cols is not None and "width" not in render_overrides:
        render_config["width"] = cols

    builder_config = dict(DEFAULT_BUILDER_CONFIG)
    builder_config["theme"] = to_cast_theme(render_config["theme"])
    for key, value in (("cols", cols), ("rows", rows), ("title", title), ("timestamp", timestamp)):
        if value is not None:
            builder_config[key] = value

    timing_config = resolve_timing_config(
        preset,
        max_wait=max_wait,
        thinking_pause=thinking_pause,
        typing_effect=typing_effect,
        typing_speed=typing_speed,
    )

    marker_options = dict(DEFAULT_MARKER_OPTIONS)
    if marker_mode is not None:
        marker_options["mode"] = marker_mode
    if label_length is not None:
        marker_options["label_length"] = label_length

    burst = dict(DEFAULT_BURST_TYPING_CONFIG)
    burst.update(burst_config or {})

    conversion = _Conversion(
        entries,
        render_config,
        timing_config,
        marker_options,
        builder_config,
        input_animation,
        burst,
        status_spinner,
        spinner_duration,
        spinner_config,
    )
    return conversion.run(entries)


def convert_with_preset(entries, preset, theme=None):
    return convert_to_cast(entries, preset=preset, theme=theme)


def quick_convert(entries):
    return convert_to_cast(entries).document


def get_session_info(entries):
    """Time span and message counts, for titles and summaries."""
    info = {
        "start_time": None,
        "end_time": None,
        "user_messages": 0,
        "assistant_messages": 0,
        "tool_calls": 0,
        "has_agents": False,
    }

    for entry in entries:
        timestamp = get_timestamp(entry)
        if timestamp:
            if info["start_time"] is None or timestamp < info["start_time"]:
                info["start_time"] = timestamp
            if info["end_time"] is None or timestamp > info["end_time"]:
                info["end_time"] = timestamp

        if entry.get("isSidechain"):
            info["has_agents"] = True

        entry_type = entry.get("type")
        if entry_type == "user":
            if not entry.get("toolUseResult"):
                info["user_messages"] += 1
        elif entry_type == "assistant":
            info["assistant_messages"] += 1
            info["tool_calls"] += sum(1 for item in _content_items(entry) if item.get("type") == "tool_use")

    return info


def generate_title(info):
    if info["tool_calls"] > 0:
        return f"Claude Code Session ({info['tool_calls']} tool calls)"
    return "Claude Code Session"
