"""Render transcript entries as ANSI text."""

from cast_ansi import BOX, colorize, style, word_wrap
from cast_commands import (
    is_bash_message,
    is_command_message,
    parse_bash_input,
    parse_bash_output,
    parse_command_tags,
    parse_local_command_stdout,
    render_bash_input,
    render_bash_output,
    render_local_stdout,
    render_slash_command,
)
from cast_content import extract_text, message_content, render_tool_result
from cast_markdown import render_markdown
from cast_theme import TOKYO_NIGHT
from cast_todos import render_todos_from_input
from cast_tools import format_tool_args, format_tool_name

INTERRUPT_TEXT = "[Request interrupted by user]"

DEFAULT_RENDER_CONFIG = {
    "theme": TOKYO_NIGHT,
    "width": 100,
    # Wrapped lines count toward the limit
    "max_tool_output_lines": 5,
    "show_thinking": True,
    "indent_size": 2,
}


def make_render_config(**overrides):
    cfg = dict(DEFAULT_RENDER_CONFIG)
    cfg.update({key: value for key, value in overrides.items() if value is not None})
    return cfg


def render_message(entry, cfg=None):
    """Render one transcript entry; entries with nothing to show render as ""."""
    cfg = cfg or DEFAULT_RENDER_CONFIG
    entry_type = entry.get("type")

    if entry_type == "user":
        if entry.get("isMeta"):
            return ""
        return _render_user(entry, cfg)
    if entry_type == "assistant":
        return _render_assistant(entry, cfg)
    if entry_type == "system":
        return _render_system(entry, cfg)
    if entry_type == "queue-operation":
        if entry.get("operation") == "remove":
            return _render_queue_remove(entry.get("content"), cfg)
        return ""
    # summary, file-history-snapshot and unknown types have no output
    return ""


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------

def _render_user(entry, cfg):
    theme = cfg["theme"]
    tool_result = entry.get("toolUseResult")

    if tool_result:
        if isinstance(tool_result, str):
            return render_tool_result({"content": tool_result, "is_error": True}, cfg)
        if isinstance(tool_result, list):
            return render_tool_result({"content": tool_result}, cfg)
        return render_tool_result(tool_result, cfg)

    content = extract_text(message_content(entry))
    if not content.strip():
        return ""

    if INTERRUPT_TEXT in content:
        return render_interrupt(theme)

    if is_command_message(content):
        command = parse_command_tags(content)
        if command:
            return render_slash_command(command, cfg)
        stdout = parse_local_command_stdout(content)
        if stdout is not None:
            return render_local_stdout(stdout, cfg)

    if is_bash_message(content):
        bash_input = parse_bash_input(content)
        bash_output = parse_bash_output(content)
        if bash_input is not None and bash_output:
            return render_bash_input(bash_input, cfg) + "\n" + render_bash_output(bash_output, cfg)
        if bash_input is not None:
            return render_bash_input(bash_input, cfg)
        if bash_output:
            return render_bash_output(bash_output, cfg)

    return render_user_prompt(content, cfg)


def render_user_prompt(content, cfg):
    theme = cfg["theme"]
    lines = word_wrap(content, cfg["width"] - 4)
    return "\n".join(
        style(
            f"{BOX['arrow']} {line}" if index == 0 else f"  {line}",
            fg_color=theme["user_prompt"],
            bg_color=theme["user_prompt_bg"],
        )
        for index, line in enumerate(lines)
    )


def render_interrupt(theme):
    return " ".join([
        colorize(BOX["indent"], theme["muted"]),
        colorize("Interrupted", theme["tool_bullet_error"]),
        colorize("· What should Claude do instead?", theme["muted"]),
    ])


# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------

def _render_assistant(entry, cfg):
    content = message_content(entry)
    if isinstance(content, str):
        content = [{"type": "text", "text": content}] if content else []

    rendered = []
    for item in content:
        if not isinstance(item, dict):
            continue
        text = render_content_item(item, cfg)
        if text:
            rendered.append(text)
    return "\n\n".join(rendered)


def render_content_item(item, cfg):
    theme = cfg["theme"]
    item_type = item.get("type")

    if item_type == "text":
        return render_markdown(str(item.get("text") or ""), cfg)
    if item_type == "thinking":
        if not cfg["show_thinking"]:
            return ""
        return render_thinking(str(item.get("thinking") or ""), cfg)
    if item_type == "tool_use":
        return render_tool_use(item, cfg)
    if item_type == "image":
        return colorize("[Image]", theme["muted"])
    return ""


def render_thinking(thinking, cfg):
    theme = cfg["theme"]
    header = colorize("∴ Thinking…", theme["thinking"])
    body = "\n".join(
        "  " + style(line, fg_color=theme["thinking"], italic=True)
        for line in word_wrap(thinking, cfg["width"] - 2)
    )
    return header + "\n\n" + body


def render_tool_use(tool, cfg):
    theme = cfg["theme"]
    display_name, is_mcp = format_tool_name(tool.get("name", ""))

    header = (
        colorize(BOX["bullet"], theme["tool_bullet_success"])
        + " "
        + style(display_name, bold=True)
        + (colorize(" (MCP)", theme["muted"]) if is_mcp else "")
        + format_tool_args(tool, theme, is_mcp)
    )

    if tool.get("name") == "TodoWrite":
        todos = render_todos_from_input(tool.get("input"), cfg)
        if todos:
            return header + "\n" + todos

    return header


# ---------------------------------------------------------------------------
# System and queue
# ---------------------------------------------------------------------------

def _render_system(entry, cfg):
    theme = cfg["theme"]
    content = entry.get("content")
    if not content:
        return ""

    level = entry.get("level")
    level_colors = {
        "info": theme["muted"],
        "warning": theme["tool_name"],
        "error": theme["tool_bullet_error"],
    }
    color = level_colors.get(level or "info", theme["muted"])
    return colorize(f"[{level or 'system'}] {content}", color)


def _render_queue_remove(content, cfg):
    theme = cfg["theme"]
    text = content if isinstance(content, str) else extract_text(content or [])
    if not text.strip():
        return ""
    return style(f"{BOX['arrow']} {text}", fg_color=theme["user_prompt"], bg_color=theme["user_prompt_bg"])
