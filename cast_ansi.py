"""ANSI escape helpers: 24-bit color, styles, cursor control and wrapping."""

import re

from rich.cells import cell_len, get_character_cell_size

ESC = "\x1b"
CSI = f"{ESC}["

RESET = f"{CSI}0m"

BOLD = f"{CSI}1m"
DIM = f"{CSI}2m"
ITALIC = f"{CSI}3m"
UNDERLINE = f"{CSI}4m"
STRIKETHROUGH = f"{CSI}9m"

RESET_BOLD = f"{CSI}22m"
RESET_DIM = f"{CSI}22m"
RESET_ITALIC = f"{CSI}23m"
RESET_UNDERLINE = f"{CSI}24m"
RESET_STRIKETHROUGH = f"{CSI}29m"

BOX = {
    "horizontal": "─",
    "vertical": "│",
    "top_left": "┌",
    "top_right": "┐",
    "bottom_left": "└",
    "bottom_right": "┘",
    "tee_right": "├",
    "tee_left": "┤",
    "tee_down": "┬",
    "tee_up": "┴",
    "cross": "┼",
    "round_top_left": "╭",
    "round_top_right": "╮",
    "round_bottom_left": "╰",
    "round_bottom_right": "╯",
    "double_horizontal": "═",
    "double_vertical": "║",
    "bullet": "●",
    "bullet_hollow": "○",
    "check": "✓",
    "cross_mark": "✗",
    "arrow": "→",
    "arrow_down": "↓",
    "arrow_subagent": "⤵",
    "indent": "⎿",
}

# SGR color sequences only
ANSI_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")
# Any CSI sequence (cursor movement, erase, scroll region, etc.)
ANSI_CSI_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
# OSC sequences (e.g., hyperlinks, titles)
ANSI_OSC_RE = re.compile(r"\x1b\].*?\x1b\\|\x1b\].*?\x07")
# Single ESC sequences
ANSI_ESC_RE = re.compile(r"\x1b[@-Z\\-_]")
# Any of the above, used to walk styled text without splitting an escape
ANSI_TOKEN_RE = re.compile(
    r"\x1b\].*?(?:\x1b\\|\x07)|\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b[@-Z\\-_]"
)

WHITESPACE_SPLIT_RE = re.compile(r"\s+")
WHITESPACE_KEEP_RE = re.compile(r"(\s+)")


# ---------------------------------------------------------------------------
# Colors and styles
# ---------------------------------------------------------------------------

def hex_to_rgb(hex_color):
    clean = hex_color.replace("#", "")
    return int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16)


def fg(hex_color):
    r, g, b = hex_to_rgb(hex_color)
    return f"{CSI}38;2;{r};{g};{b}m"


def bg(hex_color):
    r, g, b = hex_to_rgb(hex_color)
    return f"{CSI}48;2;{r};{g};{b}m"


def colorize(text, hex_color):
    return f"{fg(hex_color)}{text}{RESET}"


def style(text, fg_color=None, bg_color=None, bold=False, dim=False, italic=False):
    """Wrap text in the requested attributes, always ending with a full reset."""
    prefix = ""
    if bold:
        prefix += BOLD
    if dim:
        prefix += DIM
    if italic:
        prefix += ITALIC
    if fg_color:
        prefix += fg(fg_color)
    if bg_color:
        prefix += bg(bg_color)
    return f"{prefix}{text}{RESET}"


# ---------------------------------------------------------------------------
# Measuring
# ---------------------------------------------------------------------------

def strip_ansi(text):
    text = ANSI_OSC_RE.sub("", text)
    text = ANSI_CSI_RE.sub("", text)
    text = ANSI_ESC_RE.sub("", text)
    text = ANSI_SGR_RE.sub("", text)
    return text


def visible_length(text):
    """Terminal cell width of text once control codes are removed."""
    return cell_len(strip_ansi(text))


def _chop_cells(text, width):
    """Split plain text into pieces no wider than width cells."""
    pieces = []
    current = ""
    current_width = 0
    for char in text:
        char_width = get_character_cell_size(char)
        if current and current_width + char_width > width:
            pieces.append(current)
            current = ""
            current_width = 0
        current += char
        current_width += char_width
    if current:
        pieces.append(current)
    return pieces


def _chop_styled(text, width):
    """Split styled text into pieces of at most width visible cells.

    Escape sequences are never split and stay attached to the piece that
    follows them.
    """
    pieces = []
    current = ""
    current_width = 0
    pos = 0
    while pos < len(text):
        match = ANSI_TOKEN_RE.match(text, pos)
        if match:
            current += match.group(0)
            pos = match.end()
            continue
        char = text[pos]
        char_width = get_character_cell_size(char)
        if current_width > 0 and current_width + char_width > width:
            pieces.append(current)
            current = ""
            current_width = 0
        current += char
        current_width += char_width
        pos += 1
    if current:
        pieces.append(current)
    return pieces


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------

def word_wrap(text, width):
    """Wrap plain text, preserving words and hard-breaking the ones that don't fit."""
    if width <= 0:
        return [text]

    lines = []
    for paragraph in text.split("\n"):
        if cell_len(paragraph) <= width:
            lines.append(paragraph)
            continue

        current = ""
        for word in WHITESPACE_SPLIT_RE.split(paragraph):
            word_width = cell_len(word)
            if word_width > width:
                if current:
                    lines.append(current)
                    current = ""
                lines.extend(_chop_cells(word, width))
                continue

            if not current:
                current = word
            elif cell_len(current) + 1 + word_width <= width:
                current += " " + word
            else:
                lines.append(current)
                current = word

        if current:
            lines.append(current)

    return lines


def wrap_ansi(text, width):
    """Wrap styled text on whitespace, measuring visible width only.

    Whitespace that would overflow a line is dropped at the break. A token
    that alone exceeds the width is hard-broken. Empty input yields one
    empty line.
    """
    if width <= 0:
        return [text]

    lines = []
    current = ""
    current_width = 0

    for token in WHITESPACE_KEEP_RE.split(text):
        if not token:
            continue
        token_width = visible_length(token)
        is_space = not strip_ansi(token).strip()

        if current_width + token_width <= width:
            current += token
            current_width += token_width
            continue

        if is_space:
            # Escape codes riding on dropped whitespace still apply
            current += "".join(ANSI_TOKEN_RE.findall(token))
            continue

        if strip_ansi(current).strip():
            lines.append(current)
            current = ""
        else:
            # Keep pending escape codes, drop leading whitespace
            current = "".join(ANSI_TOKEN_RE.findall(current))
        token = current + token
        current_width = 0

        if token_width > width:
            pieces = _chop_styled(token, width)
            lines.extend(pieces[:-1])
            current = pieces[-1]
            current_width = visible_length(current)
        else:
            current = token
            current_width = token_width

    if strip_ansi(current).strip():
        lines.append(current)
    elif lines:
        lines[-1] += "".join(ANSI_TOKEN_RE.findall(current))

    if not lines:
        lines.append("")

    return lines


def truncate(text, max_length):
    if len(text) <= max_length:
        return text
    return text[:max_length - 1] + "…"


def indent(text, spaces):
    prefix = " " * spaces
    return "\n".join(prefix + line for line in text.split("\n"))


def horizontal_rule(width, color=None):
    line = BOX["horizontal"] * width
    return colorize(line, color) if color else line


# ---------------------------------------------------------------------------
# Cursor control
# ---------------------------------------------------------------------------

def save_cursor():
    return f"{CSI}s"


def restore_cursor():
    return f"{CSI}u"


def move_to(row, col=1):
    """Move the cursor to row, col (both 1-indexed)."""
    return f"{CSI}{row};{col}H"


def move_to_col(col):
    return f"{CSI}{col}G"


def erase_to_end_of_line():
    return f"{CSI}K"


def erase_line():
    return f"{CSI}2K"


def set_scroll_region(top, bottom):
    return f"{CSI}{top};{bottom}r"


def reset_scroll_region():
    return f"{CSI}r"


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------

def box(content, width=80, border_color=None, rounded=False):
    inner_width = width - 4

    if rounded:
        tl, tr = BOX["round_top_left"], BOX["round_top_right"]
        bl, br = BOX["round_bottom_left"], BOX["round_bottom_right"]
    else:
        tl, tr = BOX["top_left"], BOX["top_right"]
        bl, br = BOX["bottom_left"], BOX["bottom_right"]

    def paint(s):
        return colorize(s, border_color) if border_color else s

    top = paint(tl + BOX["horizontal"] * (width - 2) + tr)
    bottom = paint(bl + BOX["horizontal"] * (width - 2) + br)

    wrapped = []
    for line in content.split("\n"):
        wrapped.extend(word_wrap(line, inner_width))

    middle = []
    for line in wrapped:
        padding = " " * max(0, inner_width - visible_length(line))
        middle.append(paint(BOX["vertical"]) + " " + line + padding + " " + paint(BOX["vertical"]))

    return "\n".join([top] + middle + [bottom])
