"""Todo list rendering for TodoWrite calls and results."""

from cast_ansi import (
    BOLD,
    RESET,
    RESET_BOLD,
    RESET_STRIKETHROUGH,
    STRIKETHROUGH,
    fg,
    indent,
    word_wrap,
)

UNCHECKED = "☐"
CHECKED = "☒"
TREE_CONNECTOR = "⎿"

# "⎿  " before the first item, plus the "☐ " checkbox
PREFIX_WIDTH = 3
CHECKBOX_WIDTH = 2


def is_todo_write_result(result):
    if not isinstance(result, dict):
        return False
    todos = result.get("newTodos")
    return isinstance(todos, list) and len(todos) > 0


def render_todo_list(result, cfg):
    return render_todos(result["newTodos"], cfg)


def render_todos_from_input(tool_input, cfg):
    todos = tool_input.get("todos") if isinstance(tool_input, dict) else None
    if not isinstance(todos, list) or not todos:
        return None
    return render_todos(todos, cfg)


def render_todos(todos, cfg):
    indent_size = cfg["indent_size"]
    content_width = cfg["width"] - indent_size - PREFIX_WIDTH - CHECKBOX_WIDTH
    muted = cfg["theme"]["muted"]

    output = []
    for index, todo in enumerate(todos):
        if not isinstance(todo, dict):
            continue
        prefix = f"{TREE_CONNECTOR}  " if index == 0 else "   "
        for line_index, line in enumerate(_render_item(todo, muted, content_width)):
            line_prefix = prefix if line_index == 0 else "   "
            output.append(indent(line_prefix + line, indent_size))

    return "\n".join(output)


def _render_item(todo, muted, content_width):
    lines = word_wrap(str(todo.get("content", "")), content_width)
    status = todo.get("status")

    if status == "completed":
        gray = fg(muted)
        return [
            f"{gray}{CHECKED if i == 0 else ' '} {STRIKETHROUGH}{line}{RESET_STRIKETHROUGH}{RESET}"
            for i, line in enumerate(lines)
        ]

    if status == "in_progress":
        return [
            f"{UNCHECKED if i == 0 else ' '} {BOLD}{line}{RESET_BOLD}"
            for i, line in enumerate(lines)
        ]

    return [f"{UNCHECKED if i == 0 else ' '} {line}" for i, line in enumerate(lines)]
