#!/usr/bin/env python3
"""Textual picker: choose a session and options, then write a recording."""

import logging
from datetime import datetime
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Input, Label, ListItem, ListView, RadioButton, RadioSet, Static

from cast_config import load_profile, merge_options, save_profile
from cast_loader import is_renderable_message, load_transcript
from cast_markers import MARKER_MODES, generate_marker_label
from cast_sessions import discover_sessions, extract_preview, format_size
from cast_theme import RENDER_THEMES
from cast_timing import TIMING_PRESETS
from session_cast import CommandError, generate_cast

logger = logging.getLogger(__name__)

PREVIEW_COUNT = 12


def session_from_path(path):
    path = Path(path)
    file_stat = path.stat()
    return {
        "path": str(path),
        "name": path.stem,
        "modified": file_stat.st_mtime,
        "size": file_stat.st_size,
        "project": path.parent.name,
    }


def preview_lines(path, count=PREVIEW_COUNT):
    """Marker-style one-liners for the first renderable entries of a session."""
    try:
        entries = load_transcript(path, load_agents=False)
    except OSError as e:
        logger.debug("Preview failed for %s: %s", path, e)
        return []

    lines = []
    for entry in entries:
        if not is_renderable_message(entry):
            continue
        label = generate_marker_label(entry, 80)
        if label:
            lines.append(label)
        if len(lines) >= count:
            break
    return lines


def default_output_name(session):
    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    return f"{session['name'][:8]}-{stamp}.cast"


class SessionListItem(ListItem):
    """Custom list item for sessions."""

    def __init__(self, session_data, preview_data):
        self.session_data = session_data
        self.preview_data = preview_data

        date_str = datetime.fromtimestamp(session_data.get("modified", 0)).strftime("%Y-%m-%d %H:%M")
        project = session_data.get("project", "")[:14]
        size_str = format_size(session_data.get("size", 0))
        first_msg = preview_data.get("first_message", "")[:40].replace("\n", " ")

        label = f"{date_str}  {project:14}  {size_str:>8}  {first_msg}"
        super().__init__(Label(Text(label)))


class PreviewPanel(Static):
    """Right panel showing the opening of the highlighted session."""

    DEFAULT_CSS = """
    PreviewPanel {
        border: solid $primary;
        height: 100%;
        overflow-y: auto;
    }
    """

    def update_preview(self, lines):
        text = Text()
        for line in lines:
            if line.startswith(">"):
                text.append(line + "\n", style="bold cyan")
            elif line.startswith("●"):
                text.append(line + "\n", style="green")
            else:
                text.append(line + "\n")
        self.update(text if lines else "No preview available")


class SessionCastApp(App):
    """Pick a Claude session and render it to an asciicast file."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #title {
        dock: top;
        height: 1;
        background: $primary;
        color: $text;
        content-align: left middle;
    }

    #content {
        height: 1fr;
        layout: horizontal;
    }

    #sessions-panel {
        width: 45%;
        border: solid $primary;
    }

    #preview-panel {
        width: 1fr;
    }

    #options-section {
        height: auto;
        border: solid $accent;
        background: $boost;
    }

    #options-section Horizontal {
        height: auto;
    }

    #buttons-section {
        height: 3;
        border: solid $accent;
        layout: horizontal;
        align: center middle;
    }

    Button {
        margin: 0 2;
    }

    RadioButton {
        margin: 0 1;
    }

    Input {
        margin: 0 1;
        width: 1fr;
    }

    .narrow {
        width: 10;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, session_path=None, load_agents=True, project_filter=None):
        super().__init__()
        self.session_path = session_path
        self.load_agents = load_agents
        self.project_filter = project_filter
        self.sessions = []
        self.selected_session = None
        self.options = merge_options(load_profile())

    def compose(self) -> ComposeResult:
        yield Label("Session Cast", id="title")

        with Horizontal(id="content"):
            with Vertical(id="sessions-panel"):
                yield Label("Sessions:")
                yield ListView(id="sessions-list")
            yield PreviewPanel(id="preview-panel")

        with Vertical(id="options-section"):
            with Horizontal():
                yield Label("Theme:")
                yield RadioSet(
                    *[
                        RadioButton(name, value=name == self.options["theme"], id=f"theme-{name}")
                        for name in RENDER_THEMES
                    ],
                    id="theme-radio",
                )
            with Horizontal():
                yield Label("Preset:")
                yield RadioSet(
                    *[
                        RadioButton(name, value=name == self.options["preset"], id=f"preset-{name}")
                        for name in TIMING_PRESETS
                    ],
                    id="preset-radio",
                )
                yield Label("Markers:")
                yield RadioSet(
                    *[
                        RadioButton(mode, value=mode == self.options["markers"], id=f"markers-{mode}")
                        for mode in MARKER_MODES
                    ],
                    id="markers-radio",
                )
                yield Checkbox("Status spinner", value=bool(self.options["status_spinner"]), id="spinner-checkbox")
            with Horizontal():
                yield Label("Cols:")
                yield Input(str(self.options["cols"]), id="cols-input", classes="narrow")
                yield Label("Rows:")
                yield Input(str(self.options["rows"]), id="rows-input", classes="narrow")
                yield Label("Last:")
                yield Input(id="last-input", placeholder="all", classes="narrow")
                yield Label("Title:")
                yield Input(self.options["title"] or "", id="title-input", placeholder="auto")
                yield Label("Output:")
                yield Input(self.options["output"] or "", id="output-input", placeholder="<session>-<time>.cast")

        with Horizontal(id="buttons-section"):
            yield Button("Generate", id="generate-btn", variant="primary")
            yield Button("Save profile", id="save-btn")
            yield Button("Quit", id="quit-btn")

    def on_mount(self):
        self.load_sessions()
        self._refresh_preview()

    def load_sessions(self):
        list_widget = self.query_one("#sessions-list", ListView)
        list_widget.clear()

        if self.session_path:
            self.sessions = [session_from_path(self.session_path)]
        else:
            self.sessions = discover_sessions(project_filter=self.project_filter)

        for session in self.sessions:
            preview = extract_preview(session["path"])
            if preview["user_count"] + preview["assistant_count"] > 0:
                list_widget.append(SessionListItem(session, preview))

        if self.session_path and self.sessions:
            self.selected_session = self.sessions[0]

    def on_list_view_highlighted(self, message):
        if message.item is not None and isinstance(message.item, SessionListItem):
            self.selected_session = message.item.session_data
            self._refresh_preview()

    def _refresh_preview(self):
        preview_panel = self.query_one("#preview-panel", PreviewPanel)
        if self.selected_session:
            preview_panel.update_preview(preview_lines(self.selected_session["path"]))
        else:
            preview_panel.update("Select a session to preview")

    def _pressed(self, radio_id, prefix, fallback):
        button = self.query_one(f"#{radio_id}", RadioSet).pressed_button
        if button is None or not button.id:
            return fallback
        return button.id[len(prefix):]

    def collect_options(self):
        """Current form values as a cast options dict; raises ValueError on bad numbers."""
        options = dict(self.options)
        options["theme"] = self._pressed("theme-radio", "theme-", options["theme"])
        options["preset"] = self._pressed("preset-radio", "preset-", options["preset"])
        options["markers"] = self._pressed("markers-radio", "markers-", options["markers"])
        options["status_spinner"] = self.query_one("#spinner-checkbox", Checkbox).value
        options["cols"] = int(self.query_one("#cols-input", Input).value)
        options["rows"] = int(self.query_one("#rows-input", Input).value)
        options["title"] = self.query_one("#title-input", Input).value.strip() or None
        options["output"] = self.query_one("#output-input", Input).value.strip() or None
        return options

    def _last(self):
        value = self.query_one("#last-input", Input).value.strip()
        return int(value) if value else None

    def on_button_pressed(self, message):
        if message.button.id == "generate-btn":
            self.run_generate()
        elif message.button.id == "save-btn":
            self.run_save_profile()
        elif message.button.id == "quit-btn":
            self.exit()

    def run_generate(self):
        if not self.selected_session:
            self.notify("Please select a session first", timeout=3)
            return

        try:
            options = self.collect_options()
            output = options["output"] or default_output_name(self.selected_session)
            content, stats = generate_cast(
                self.selected_session["path"],
                options,
                load_agents=self.load_agents,
                clip={"last": self._last()},
            )
            with open(output, "w", encoding="utf-8") as f:
                f.write(content)
        except (CommandError, OSError, ValueError) as e:
            logger.debug("Generation failed", exc_info=True)
            self.notify(f"Error: {e}", severity="error", timeout=5)
            return

        self.notify(
            f"✓ Generated {output} ({stats['events_generated']} events, {stats['duration']:.1f}s)",
            timeout=5,
        )

    def run_save_profile(self):
        try:
            options = self.collect_options()
            path = save_profile(options)
        except (OSError, ValueError) as e:
            self.notify(f"Error: {e}", severity="error", timeout=5)
            return
        self.options = options
        self.notify(f"✓ Saved {path.name}", timeout=3)


def run_picker(session_path=None, load_agents=True, project_filter=None):
    app = SessionCastApp(session_path=session_path, load_agents=load_agents, project_filter=project_filter)
    app.run()


if __name__ == "__main__":
    run_picker()
