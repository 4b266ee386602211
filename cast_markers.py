"""Navigation markers: which entries get one and what it says."""

import re

from cast_commands import is_command_message, parse_command_tags, parse_local_command_stdout
from cast_content import extract_text, extract_tool_use, message_content

MARKER_MODES = ("all", "user", "tools", "none")

DEFAULT_MARKER_OPTIONS = {
    "mode": "all",
    "label_length": 30,
}

WHITESPACE_RE = re.compile(r"\s+")


def should_have_marker(entry, mode):
    """User prompts match all/user, tool calls all/tools, other assistant text only all.

    Tool results never get a marker; they belong to the call before them.
    """
    if mode == "none":
        return False

    entry_type = entry.get("type")
    if entry_type == "user":
        if entry.get("toolUseResult"):
            return False
        return mode in ("all", "user")

    if entry_type == "assistant":
        if extract_tool_use(message_content(entry)):
            return mode in ("all", "tools")
        return mode == "all"

    return False


def generate_marker_label(entry, max_length=30):
    entry_type = entry.get("type")
    if entry_type == "user":
        return _user_label(entry, max_length)
    if entry_type == "assistant":
        return _assistant_label(entry, max_length)
    return None


def _first_line(text):
    return WHITESPACE_RE.sub(" ", text.split("\n")[0]).strip()


def _user_label(entry, max_length):
    result = entry.get("toolUseResult")
    if result:
        is_error = isinstance(result, str) or (isinstance(result, dict) and result.get("is_error"))
        return "✗ Tool error" if is_error else "✓ Tool result"

    text = extract_text(message_content(entry)).strip()
    if not text:
        return "> (empty prompt)"

    if is_command_message(text):
        command = parse_command_tags(text)
        if command:
            label = f"> {command.name}"
            if command.args.strip():
                label += f" ({command.args})"
            return label
        stdout = parse_local_command_stdout(text)
        if stdout is not None:
            return "> (command output)" if stdout else "> (command)"

    cleaned = _first_line(text)
    if len(cleaned) <= max_length - 2:
        return f"> {cleaned}"
    return f"> {cleaned[:max_length - 3]}…"


def _assistant_label(entry, max_length):
    content = message_content(entry)
    tools = extract_tool_use(content)

    if tools:
        info = format_tool_for_marker(tools[0].get("name", ""), tools[0].get("input"))
        label = f"● {info}" if len(tools) == 1 else f"● {info} (+{len(tools) - 1})"
        return _truncate(label, max_length)

    text = extract_text(content).strip()
    if not text:
        return "Claude: (empty)"

    cleaned = _first_line(text)
    if len(cleaned) <= max_length - 8:
        return f"Claude: {cleaned}"
    return f"Claude: {cleaned[:max_length - 9]}…"


def format_tool_for_marker(name, tool_input):
    if not isinstance(tool_input, dict):
        tool_input = {}

    def text(key):
        value = tool_input.get(key)
        return value if isinstance(value, str) else None

    if name in ("Read", "Write", "Edit", "MultiEdit"):
        path = text("file_path")
        return f"{name}({path.split('/')[-1]})" if path is not None else name

    if name == "Bash":
        command = text("command")
        if command is None:
            return "Bash"
        return f"Bash({command[:19] + '…' if len(command) > 20 else command})"

    if name == "Glob":
        pattern = text("pattern")
        return f"Glob({pattern})" if pattern is not None else "Glob"

    if name == "Grep":
        pattern = text("pattern")
        if pattern is None:
            return "Grep"
        return f"Grep({pattern[:14] + '…' if len(pattern) > 15 else pattern})"

    if name == "Task":
        description = text("description")
        return f"⤵ Task({description})" if description is not None else "⤵ Task"

    return name


def _truncate(label, max_length):
    if len(label) <= max_length:
        return label
    return label[:max_length - 1] + "…"
