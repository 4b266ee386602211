"""Content extraction and tool result rendering."""

from cast_ansi import BOX, colorize, indent, word_wrap
from cast_diff import is_edit_tool_result, render_edit_diff
from cast_todos import is_todo_write_result

# "  ⎿  " in front of tool output
TREE_PREFIX = "  "
CONTENT_INDENT = 5


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _items(content):
    if not isinstance(content, list):
        return []
    return [item for item in content if isinstance(item, dict)]


def extract_text(content):
    """Plain text of a message body: a string as is, or the text items joined."""
    if isinstance(content, str):
        return content
    return "\n".join(str(item.get("text") or "") for item in _items(content) if item.get("type") == "text")


def extract_thinking(content):
    return [str(item.get("thinking") or "") for item in _items(content) if item.get("type") == "thinking"]


def extract_tool_use(content):
    return [item for item in _items(content) if item.get("type") == "tool_use"]


def has_tool_use(content):
    return any(item.get("type") == "tool_use" for item in _items(content))


def has_thinking(content):
    return any(item.get("type") == "thinking" for item in _items(content))


def message_content(entry):
    message = entry.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content", "")
    return content if isinstance(content, (str, list)) else ""


def classify_content(content):
    """One of text, thinking, tool-call or mixed."""
    types = {item.get("type") for item in _items(content)}
    if not types:
        return "text"
    if len(types) == 1:
        kind = next(iter(types))
        if kind == "text":
            return "text"
        if kind == "thinking":
            return "thinking"
        if kind == "tool_use":
            return "tool-call"
    return "mixed"


def format_tool_input_summary(tool):
    """Short plain-text description of a tool call's input."""
    name = tool.get("name", "")
    tool_input = tool.get("input")
    if not isinstance(tool_input, dict):
        return ""

    def text(key):
        value = tool_input.get(key)
        return value if isinstance(value, str) else None

    def clip(value):
        return value[:49] + "…" if len(value) > 50 else value

    if name in ("Read", "Write", "Edit", "MultiEdit") and text("file_path") is not None:
        return text("file_path")
    if name == "Bash" and text("command") is not None:
        return clip(text("command"))
    if name == "Glob" and text("pattern") is not None:
        return text("pattern")
    if name == "Grep" and text("pattern") is not None:
        return f"/{text('pattern')}/"
    if name == "Task":
        if text("description") is not None:
            return text("description")
        if text("prompt") is not None:
            return clip(text("prompt"))
    if name == "WebFetch" and text("url") is not None:
        return text("url")
    if name == "WebSearch" and text("query") is not None:
        return text("query")
    if name == "TodoWrite" and isinstance(tool_input.get("todos"), list):
        return f"{len(tool_input['todos'])} items"
    return ""


def truncate_output(text, max_lines, max_line_length=200):
    """Return (text, truncated, hidden_lines) limited to max_lines lines."""
    lines = [
        line[:max_line_length - 1] + "…" if len(line) > max_line_length else line
        for line in text.split("\n")
    ]
    if len(lines) <= max_lines:
        return "\n".join(lines), False, 0
    return "\n".join(lines[:max_lines]), True, len(lines) - max_lines


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------

def _result_text(result):
    content = result.get("content")
    if isinstance(content, list):
        parts = []
        has_image = False
        for item in content:
            if not isinstance(item, dict):
                continue
            if isinstance(item.get("text"), str):
                parts.append(item["text"])
            elif item.get("type") == "image":
                has_image = True
        if has_image:
            parts.append("[Screenshot captured]")
        return "\n".join(parts)

    if isinstance(content, str):
        return content

    if isinstance(result.get("result"), str):
        return result["result"]

    if isinstance(result.get("results"), list):
        parts = []
        if result.get("query"):
            parts.append(f"Query: {result['query']}")
        for item in result["results"]:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("title"), str):
                parts.append(f"• {item['title']}")
                if item.get("url"):
                    parts.append(f"  {item['url']}")
                if item.get("snippet"):
                    parts.append(f"  {item['snippet']}")
        return "\n".join(parts)

    file_info = result.get("file")
    if isinstance(file_info, dict) and isinstance(file_info.get("content"), str):
        return file_info["content"]

    if result.get("stdout") or result.get("stderr"):
        return "\n".join(
            result[key] for key in ("stdout", "stderr") if isinstance(result.get(key), str)
        )

    if isinstance(result.get("filenames"), list):
        if not result["filenames"]:
            return "(no matches)"
        return "\n".join(str(name) for name in result["filenames"])

    if result.get("oldTodos") or result.get("newTodos"):
        todos = result.get("newTodos")
        return f"Updated {len(todos) if isinstance(todos, list) else 0} todos"

    return ""


def render_tool_result(result, cfg):
    """Render a tool result under a "⎿" connector.

    Edit results become diffs, TodoWrite results are suppressed, and an
    unrecognized shape renders just the success or error mark.
    """
    theme = cfg["theme"]
    if not isinstance(result, dict):
        result = {}

    if is_edit_tool_result(result):
        return render_edit_diff(result, cfg)

    if is_todo_write_result(result):
        return ""

    is_error = bool(result.get("is_error"))
    mark = BOX["cross_mark"] if is_error else BOX["check"]
    mark_color = theme["tool_bullet_error"] if is_error else theme["tool_bullet_success"]

    text = _result_text(result)
    if not text:
        return colorize(f"{TREE_PREFIX}{BOX['indent']} ", theme["muted"]) + colorize(mark, mark_color)

    wrap_width = cfg["width"] - CONTENT_INDENT
    lines = []
    for raw_line in text.split("\n"):
        lines.extend(word_wrap(raw_line, wrap_width))

    max_lines = cfg["max_tool_output_lines"]
    shown = lines[:max_lines]

    output = []
    for index, line in enumerate(shown):
        if index == 0:
            output.append(TREE_PREFIX + colorize(BOX["indent"], theme["muted"]) + "  " + line)
        else:
            output.append(indent(line, CONTENT_INDENT))

    if len(lines) > max_lines:
        hidden = len(lines) - max_lines
        output.append(indent(colorize(f"… +{hidden} lines (ctrl+o to expand)", theme["muted"]), CONTENT_INDENT))

    if not output:
        return TREE_PREFIX + colorize(mark, mark_color)

    return "\n".join(output)
