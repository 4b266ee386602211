"""Slash command and bash mode markup embedded in user messages."""

import re
from collections import namedtuple

from cast_ansi import BOX, colorize, style

ParsedCommand = namedtuple("ParsedCommand", ["name", "message", "args", "stdout"])
BashOutput = namedtuple("BashOutput", ["stdout", "stderr"])

COMMAND_NAME_RE = re.compile(r"<command-name>([^<]*)</command-name>")
COMMAND_MESSAGE_RE = re.compile(r"<command-message>([^<]*)</command-message>")
COMMAND_ARGS_RE = re.compile(r"<command-args>([^<]*)</command-args>")
LOCAL_STDOUT_RE = re.compile(r"<local-command-stdout>([^<]*)</local-command-stdout>")

BASH_INPUT_RE = re.compile(r"<bash-input>([\s\S]*?)</bash-input>")
BASH_STDOUT_RE = re.compile(r"<bash-stdout>([\s\S]*?)</bash-stdout>")
BASH_STDERR_RE = re.compile(r"<bash-stderr>([\s\S]*?)</bash-stderr>")

COMMAND_FG = "#ffffff"
COMMAND_BG = "#373737"
BASH_MODE_PINK = "#fd5db1"
BASH_COMMAND_BG = "#413c41"
BASH_COMMAND_TEXT = "#ffffff"
BASH_STDERR_COLOR = "#ff6b80"

DEFAULT_MAX_OUTPUT_LINES = 5


def _group(regex, content):
    match = regex.search(content)
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def is_command_message(content):
    trimmed = content.strip()
    return trimmed.startswith("<command-name>") or trimmed.startswith("<local-command-stdout>")


def parse_command_tags(content):
    name = _group(COMMAND_NAME_RE, content)
    if name is None:
        return None
    return ParsedCommand(
        name=name,
        message=_group(COMMAND_MESSAGE_RE, content) or "",
        args=_group(COMMAND_ARGS_RE, content) or "",
        stdout=_group(LOCAL_STDOUT_RE, content) or "",
    )


def parse_local_command_stdout(content):
    return _group(LOCAL_STDOUT_RE, content)


def is_bash_message(content):
    # Tags may follow a "Caveat:" preamble, so look anywhere
    return "<bash-input>" in content or "<bash-stdout>" in content or "<bash-stderr>" in content


def is_bash_input_message(content):
    return "<bash-input>" in content


def parse_bash_input(content):
    command = _group(BASH_INPUT_RE, content)
    return command.strip() if command is not None else None


def parse_bash_output(content):
    stdout = _group(BASH_STDOUT_RE, content)
    stderr = _group(BASH_STDERR_RE, content)
    if stdout is None and stderr is None:
        return None
    return BashOutput(stdout=(stdout or "").strip(), stderr=(stderr or "").strip())


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_slash_command(command, cfg):
    line = f"{BOX['arrow']} {command.name}"
    if command.args.strip():
        line += f" ({command.args})"
    line += " "

    rendered = style(line, fg_color=COMMAND_FG, bg_color=COMMAND_BG)
    if command.stdout.strip():
        return f"{rendered}\n{colorize('  ' + command.stdout, cfg['theme']['muted'])}"
    return rendered


def render_local_stdout(stdout, cfg):
    if not stdout.strip() or stdout == "...":
        return ""
    return colorize(f"  {stdout}", cfg["theme"]["muted"])


def render_bash_input(command, cfg=None):
    prefix = style("!", fg_color=BASH_MODE_PINK, bg_color=BASH_COMMAND_BG)
    return prefix + style(f" {command} ", fg_color=BASH_COMMAND_TEXT, bg_color=BASH_COMMAND_BG)


def render_bash_output(output, cfg):
    """Render stderr (red) then stdout under a tree connector, truncating long output."""
    max_lines = cfg.get("max_output_lines", DEFAULT_MAX_OUTPUT_LINES)
    muted = cfg["theme"]["muted"]
    lines = []

    def add_block(raw_lines, color, use_connector):
        shown = raw_lines[:max_lines]
        for index, line in enumerate(shown):
            prefix = f"  {BOX['indent']}  " if index == 0 and use_connector else "     "
            formatted = prefix + line
            lines.append(colorize(formatted, color) if color else formatted)
        if len(raw_lines) > max_lines:
            hidden = len(raw_lines) - max_lines
            lines.append(colorize(f"     … +{hidden} lines (ctrl+o to expand)", muted))

    if output.stderr.strip():
        add_block(output.stderr.split("\n"), BASH_STDERR_COLOR, True)

    if output.stdout.strip():
        add_block(output.stdout.split("\n"), None, not lines)

    return "\n".join(lines)
