"""Diff rendering for Edit tool results, with word-level change highlighting."""

from collections import namedtuple

from cast_ansi import RESET, colorize, indent, style, word_wrap

# Line number (5) + space (1) + " + " marker (3)
LINE_PREFIX_WIDTH = 9
LINE_NUMBER_WIDTH = 5
DIFF_FG = "#ffffff"

# Above this many token pairs the full LCS table is skipped
LCS_CELL_LIMIT = 250000

DiffSegment = namedtuple("DiffSegment", ["text", "changed"])

_SIDES = {
    "-": ("diff_remove_line_bg", "diff_remove_char_bg"),
    "+": ("diff_add_line_bg", "diff_add_char_bg"),
}


def is_edit_tool_result(result):
    if not isinstance(result, dict):
        return False
    patch = result.get("structuredPatch")
    return isinstance(result.get("filePath"), str) and isinstance(patch, list) and len(patch) > 0


def _hunks(result):
    patch = result.get("structuredPatch")
    if not isinstance(patch, list):
        return []
    return [hunk for hunk in patch if isinstance(hunk, dict)]


def _hunk_lines(hunk):
    lines = hunk.get("lines")
    if not isinstance(lines, list):
        return []
    return [line for line in lines if isinstance(line, str)]


def _start(value):
    return value if isinstance(value, int) and not isinstance(value, bool) else 1


def _plural(count, word):
    return f"{count} {word}{'' if count == 1 else 's'}"


def render_edit_diff(result, cfg):
    theme = cfg["theme"]
    indent_size = cfg["indent_size"]
    hunks = _hunks(result)

    additions = 0
    removals = 0
    for hunk in hunks:
        for line in _hunk_lines(hunk):
            if line.startswith("+"):
                additions += 1
            elif line.startswith("-"):
                removals += 1

    stats = f"{_plural(additions, 'addition')} and {_plural(removals, 'removal')}"
    output = [indent(colorize(f"Updated {result['filePath']} with {stats}", theme["muted"]), indent_size)]

    content_width = cfg["width"] - indent_size - LINE_PREFIX_WIDTH
    for hunk in hunks:
        for line in render_hunk(hunk, theme, content_width):
            output.append(indent(line, indent_size))

    return "\n".join(output)


def render_hunk(hunk, theme, content_width):
    """Render one hunk; a removal directly followed by an addition is a paired change."""
    output = []
    old_line = _start(hunk.get("oldStart"))
    new_line = _start(hunk.get("newStart"))
    lines = _hunk_lines(hunk)

    i = 0
    while i < len(lines):
        line = lines[i]
        prefix = line[:1]
        content = line[1:]

        if prefix == " ":
            output.extend(_render_context_line(new_line, content, theme, content_width))
            old_line += 1
            new_line += 1
            i += 1
        elif prefix == "-":
            following = lines[i + 1] if i + 1 < len(lines) else ""
            if following.startswith("+"):
                old_segments, new_segments = diff_words(content, following[1:])
                output.extend(_render_highlighted_line("-", old_line, old_segments, theme, content_width))
                output.extend(_render_highlighted_line("+", new_line, new_segments, theme, content_width))
                old_line += 1
                new_line += 1
                i += 2
            else:
                output.extend(_render_plain_line("-", old_line, content, theme, content_width))
                old_line += 1
                i += 1
        elif prefix == "+":
            output.extend(_render_plain_line("+", new_line, content, theme, content_width))
            new_line += 1
            i += 1
        else:
            output.extend(_render_context_line(new_line, line, theme, content_width))
            new_line += 1
            i += 1

    return output


# ---------------------------------------------------------------------------
# Word diff
# ---------------------------------------------------------------------------

def tokenize(line):
    """Split a line into maximal runs of whitespace and non-whitespace."""
    tokens = []
    current = ""
    in_space = None
    for char in line:
        is_space = char.isspace()
        if in_space is None or is_space == in_space:
            current += char
        else:
            tokens.append(current)
            current = char
        in_space = is_space
    if current:
        tokens.append(current)
    return tokens


def _common_affix(old_tokens, new_tokens):
    prefix = 0
    limit = min(len(old_tokens), len(new_tokens))
    while prefix < limit and old_tokens[prefix] == new_tokens[prefix]:
        prefix += 1
    suffix = 0
    while (suffix < limit - prefix
           and old_tokens[-1 - suffix] == new_tokens[-1 - suffix]):
        suffix += 1

    old_kept = set(range(prefix)) | set(range(len(old_tokens) - suffix, len(old_tokens)))
    new_kept = set(range(prefix)) | set(range(len(new_tokens) - suffix, len(new_tokens)))
    return old_kept, new_kept


def longest_common_subsequence(old_tokens, new_tokens):
    """Indices of old and new tokens that belong to the common subsequence.

    Very long inputs only match their common prefix and suffix.
    """
    m = len(old_tokens)
    n = len(new_tokens)
    if m * n > LCS_CELL_LIMIT:
        return _common_affix(old_tokens, new_tokens)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if old_tokens[i - 1] == new_tokens[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    old_kept = set()
    new_kept = set()
    i, j = m, n
    while i > 0 and j > 0:
        if old_tokens[i - 1] == new_tokens[j - 1]:
            old_kept.add(i - 1)
            new_kept.add(j - 1)
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return old_kept, new_kept


def _build_segments(tokens, kept):
    segments = []
    for index, token in enumerate(tokens):
        changed = index not in kept
        if segments and segments[-1].changed == changed:
            segments[-1] = DiffSegment(segments[-1].text + token, changed)
        else:
            segments.append(DiffSegment(token, changed))
    return segments


def diff_words(old_line, new_line):
    """Return (old_segments, new_segments) marking changed word runs."""
    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)
    old_kept, new_kept = longest_common_subsequence(old_tokens, new_tokens)
    return _build_segments(old_tokens, old_kept), _build_segments(new_tokens, new_kept)


# ---------------------------------------------------------------------------
# Line rendering
# ---------------------------------------------------------------------------

def _line_number(number, theme):
    return colorize(str(number).rjust(LINE_NUMBER_WIDTH), theme["muted"])


def _render_context_line(number, content, theme, content_width):
    number_str = _line_number(number, theme)
    if content_width > 0 and len(content) > content_width:
        wrapped = word_wrap(content, content_width)
    else:
        wrapped = [content]

    lines = []
    for index, line in enumerate(wrapped):
        gutter = number_str if index == 0 else " " * LINE_NUMBER_WIDTH
        lines.append(f"{gutter}      {line}")
    return lines


def _render_plain_line(marker, number, content, theme, content_width):
    """A removal or addition without a partner: line background only."""
    line_bg = theme[_SIDES[marker][0]]
    number_str = _line_number(number, theme)
    if content_width > 0 and len(content) > content_width:
        wrapped = word_wrap(content, content_width)
    else:
        wrapped = [content]

    lines = []
    for index, line in enumerate(wrapped):
        gutter = number_str if index == 0 else " " * LINE_NUMBER_WIDTH
        lines.append(f"{gutter} {style(f' {marker} {line}', fg_color=DIFF_FG, bg_color=line_bg)}")
    return lines


def _render_highlighted_line(marker, number, segments, theme, content_width):
    line_key, char_key = _SIDES[marker]
    line_bg = theme[line_key]
    char_bg = theme[char_key]
    number_str = _line_number(number, theme)

    total = sum(len(seg.text) for seg in segments)
    if content_width <= 0 or total <= content_width:
        content = "".join(
            style(seg.text, fg_color=DIFF_FG, bg_color=char_bg if seg.changed else line_bg)
            for seg in segments
        )
        prefix = style(f" {marker} ", fg_color=DIFF_FG, bg_color=line_bg)
        return [f"{number_str} {prefix}{content}{RESET}"]

    return wrap_segmented_line(
        number_str,
        " " * LINE_NUMBER_WIDTH,
        f" {marker} ",
        segments,
        line_bg,
        char_bg,
        content_width,
    )


def wrap_segmented_line(number_str, number_padding, prefix_text, segments, line_bg, char_bg, content_width):
    """Wrap highlighted segments over several lines, keeping each run's background.

    Splits prefer the last space that fits; with no space the line is
    flushed and one character is forced onto the next line.
    """
    output = []
    prefix = style(prefix_text, fg_color=DIFF_FG, bg_color=line_bg)
    state = {"content": "", "width": 0}

    def emit():
        gutter = number_str if not output else number_padding
        output.append(f"{gutter} {prefix}{state['content']}{RESET}")
        state["content"] = ""
        state["width"] = 0

    for seg in segments:
        seg_bg = char_bg if seg.changed else line_bg
        remaining = seg.text

        while remaining:
            space_left = content_width - state["width"]

            if len(remaining) <= space_left:
                state["content"] += style(remaining, fg_color=DIFF_FG, bg_color=seg_bg)
                state["width"] += len(remaining)
                remaining = ""
                continue

            split_point = space_left
            last_space = remaining.rfind(" ", 0, space_left)
            if last_space > 0:
                split_point = last_space + 1

            if split_point <= 0:
                if state["content"]:
                    emit()
                state["content"] += style(remaining[:1], fg_color=DIFF_FG, bg_color=seg_bg)
                state["width"] += 1
                remaining = remaining[1:]
                continue

            state["content"] += style(remaining[:split_point], fg_color=DIFF_FG, bg_color=seg_bg)
            remaining = remaining[split_point:]
            emit()

    if state["content"] or not output:
        emit()

    return output
