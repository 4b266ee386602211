"""Display names and argument summaries for tool calls."""

from cast_ansi import colorize, truncate

MCP_PREFIX = "mcp__"

FILE_TOOLS = ("Read", "Write", "Edit", "MultiEdit")
WEB_TOOLS = ("WebFetch", "WebSearch")


def format_tool_name(name):
    """Return (display_name, is_mcp).

    "mcp__chrome-devtools__click" becomes "chrome-devtools - click".
    """
    if name.startswith(MCP_PREFIX):
        parts = name[len(MCP_PREFIX):].split("__")
        if len(parts) >= 2:
            return f"{parts[0]} - {'__'.join(parts[1:])}", True
    return name, False


def _string_arg(tool_input, key):
    value = tool_input.get(key)
    return value if isinstance(value, str) else None


def format_tool_args(tool, theme, is_mcp=False):
    tool_input = tool.get("input")
    if not isinstance(tool_input, dict):
        tool_input = {}

    if is_mcp:
        if tool_input:
            key = next(iter(tool_input))
            value = tool_input[key]
            if isinstance(value, str):
                return f'({key}: "{colorize(truncate(value, 40), theme["muted"])}")'
        return ""

    name = tool.get("name", "")

    if name in FILE_TOOLS:
        path = _string_arg(tool_input, "file_path")
        if path is not None:
            return f"({colorize(path, theme['file_path'])})"

    elif name == "Bash":
        command = _string_arg(tool_input, "command")
        if command is not None:
            return f"({colorize(truncate(command, 60), theme['muted'])})"

    elif name == "Glob":
        pattern = _string_arg(tool_input, "pattern")
        if pattern is not None:
            return f"({colorize(pattern, theme['file_path'])})"

    elif name == "Grep":
        pattern = _string_arg(tool_input, "pattern")
        if pattern is not None:
            return f"({colorize(truncate(pattern, 40), theme['muted'])})"

    elif name == "Task":
        for key in ("description", "prompt"):
            value = _string_arg(tool_input, key)
            if value is not None:
                return f"({colorize(truncate(value, 50), theme['agent'])})"

    elif name == "TodoWrite":
        return colorize(" (updating todos)", theme["muted"])

    elif name in WEB_TOOLS:
        url = _string_arg(tool_input, "url")
        if url is not None:
            return f"({colorize(truncate(url, 50), theme['file_path'])})"
        query = _string_arg(tool_input, "query")
        if query is not None:
            return f"({colorize(truncate(query, 50), theme['muted'])})"

    return ""
