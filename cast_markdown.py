"""Markdown to ANSI rendering for assistant text."""

import re

from cast_ansi import (
    BOLD,
    ITALIC,
    RESET_BOLD,
    RESET_ITALIC,
    RESET_UNDERLINE,
    UNDERLINE,
    colorize,
    style,
    visible_length,
    wrap_ansi,
)

RULE_RE = re.compile(r"^(\s*)[-*_]{3,}\s*$")
HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")
UNORDERED_RE = re.compile(r"^(\s*)([-*+])\s+(.+)$")
ORDERED_RE = re.compile(r"^(\s*)(\d+)\.\s+(.+)$")
LEADING_SPACE_RE = re.compile(r"^(\s*)")
TABLE_SEPARATOR_RE = re.compile(r"^\|?[\s\-:|]+\|?$")

INLINE_CODE_RE = re.compile(r"`([^`]+)`")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
BOLD_STAR_RE = re.compile(r"\*\*([^*]+)\*\*")
BOLD_UNDER_RE = re.compile(r"__([^_]+)__")
ITALIC_STAR_RE = re.compile(r"\*([^*]+)\*")
ITALIC_UNDER_RE = re.compile(r"(?<![a-zA-Z0-9])_([^_]+)_(?![a-zA-Z0-9])")

ESCAPED_STAR = "\x00ESCSTAR\x00"
ESCAPED_UNDER = "\x00ESCUNDER\x00"

RULE_MAX_WIDTH = 40


def render_markdown(text, cfg):
    """Render markdown text as ANSI-styled lines joined with newlines.

    Block dispatch per line: fenced code, horizontal rule, header,
    unordered item, ordered item, table run, then plain paragraph.
    """
    theme = cfg["theme"]
    width = cfg["width"]

    input_lines = text.split("\n")
    output = []

    i = 0
    while i < len(input_lines):
        line = input_lines[i]

        if line.lstrip().startswith("```"):
            block_indent = LEADING_SPACE_RE.match(line).group(1)
            code_lines = []
            i += 1
            while i < len(input_lines) and not input_lines[i].lstrip().startswith("```"):
                code_lines.append(input_lines[i])
                i += 1
            # Skip the closing fence when there is one
            i += 1
            output.extend(render_code_block(code_lines, block_indent, cfg))
            continue

        if RULE_RE.match(line):
            output.append(colorize("─" * min(width, RULE_MAX_WIDTH), theme["muted"]))
            i += 1
            continue

        match = HEADER_RE.match(line)
        if match:
            output.append(f"{BOLD}{parse_inline_formatting(match.group(2), cfg)}{RESET_BOLD}")
            i += 1
            continue

        match = UNORDERED_RE.match(line)
        if match:
            output.append(f"{match.group(1)}• {parse_inline_formatting(match.group(3), cfg)}")
            i += 1
            continue

        match = ORDERED_RE.match(line)
        if match:
            item = parse_inline_formatting(match.group(3), cfg)
            output.append(f"{match.group(1)}{match.group(2)}. {item}")
            i += 1
            continue

        if is_table_row(line):
            table_lines = []
            while i < len(input_lines) and is_table_row(input_lines[i]):
                table_lines.append(input_lines[i])
                i += 1
            output.extend(render_table(table_lines, cfg))
            continue

        output.extend(wrap_ansi(parse_inline_formatting(line, cfg), width))
        i += 1

    return "\n".join(output)


def is_table_row(line):
    return "|" in line and bool(line.strip())


def _split_cells(line):
    cells = [cell.strip() for cell in line.split("|")]
    # Leading and trailing pipes leave empty edge cells
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def render_table(lines, cfg):
    """Render table rows with columns padded to their widest visible cell."""
    theme = cfg["theme"]

    rows = []
    col_widths = []
    for line in lines:
        if TABLE_SEPARATOR_RE.match(line):
            rows.append(None)
            continue
        cells = [parse_inline_formatting(cell, cfg) for cell in _split_cells(line)]
        rows.append(cells)
        for col, cell in enumerate(cells):
            cell_width = visible_length(cell)
            if col >= len(col_widths):
                col_widths.append(cell_width)
            elif cell_width > col_widths[col]:
                col_widths[col] = cell_width

    output = []
    for cells in rows:
        if cells is None:
            separator = " | ".join("-" * w for w in col_widths)
            output.append(colorize(separator, theme["muted"]))
            continue
        padded = []
        for col, cell in enumerate(cells):
            current = visible_length(cell)
            target = col_widths[col] if col < len(col_widths) and col_widths[col] else current
            padded.append(cell + " " * max(0, target - current))
        output.append(" | ".join(padded))

    return output


def render_code_block(lines, block_indent, cfg):
    return [style(block_indent + line, fg_color=cfg["theme"]["muted"], dim=True) for line in lines]


def parse_inline_formatting(text, cfg):
    """Apply inline code, links, bold and italic, in that order."""
    theme = cfg["theme"]

    code_spans = []

    def protect_code(match):
        code_spans.append(colorize(match.group(1), theme["agent"]))
        return f"\x00CODE{len(code_spans) - 1}\x00"

    result = INLINE_CODE_RE.sub(protect_code, text)

    result = result.replace("\\*", ESCAPED_STAR)
    result = result.replace("\\_", ESCAPED_UNDER)

    result = LINK_RE.sub(
        lambda m: f"{UNDERLINE}{m.group(1)}{RESET_UNDERLINE} ({colorize(m.group(2), theme['muted'])})",
        result,
    )

    result = BOLD_STAR_RE.sub(lambda m: f"{BOLD}{m.group(1)}{RESET_BOLD}", result)
    result = BOLD_UNDER_RE.sub(lambda m: f"{BOLD}{m.group(1)}{RESET_BOLD}", result)

    result = ITALIC_STAR_RE.sub(lambda m: f"{ITALIC}{m.group(1)}{RESET_ITALIC}", result)
    result = ITALIC_UNDER_RE.sub(lambda m: f"{ITALIC}{m.group(1)}{RESET_ITALIC}", result)

    result = result.replace(ESCAPED_STAR, "*")
    result = result.replace(ESCAPED_UNDER, "_")

    for index, rendered in enumerate(code_spans):
        result = result.replace(f"\x00CODE{index}\x00", rendered, 1)

    return colorize(result, theme["assistant_text"])
