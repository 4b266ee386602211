"""Render themes and the asciicast header palettes that go with them."""

TOKYO_NIGHT = {
    "fg": "#a9b1d6",
    "bg": "#1a1b26",
    "user_prompt": "#7aa2f7",
    "user_prompt_bg": "#373737",
    "assistant_text": "#a9b1d6",
    "tool_name": "#e0af68",
    "tool_bullet_success": "#9ece6a",
    "tool_bullet_error": "#f7768e",
    "thinking": "#565f89",
    "box_drawing": "#414868",
    "file_path": "#7dcfff",
    "muted": "#565f89",
    "agent": "#bb9af7",
    "diff_add_line_bg": "#225c2b",
    "diff_add_char_bg": "#38a660",
    "diff_remove_line_bg": "#5c2b2b",
    "diff_remove_char_bg": "#a63838",
}

TOKYO_STORM = dict(TOKYO_NIGHT, bg="#24283b")

DRACULA = {
    "fg": "#f8f8f2",
    "bg": "#282a36",
    "user_prompt": "#8be9fd",
    "user_prompt_bg": "#373737",
    "assistant_text": "#f8f8f2",
    "tool_name": "#f1fa8c",
    "tool_bullet_success": "#50fa7b",
    "tool_bullet_error": "#ff5555",
    "thinking": "#6272a4",
    "box_drawing": "#44475a",
    "file_path": "#ff79c6",
    "muted": "#6272a4",
    "agent": "#bd93f9",
    "diff_add_line_bg": "#1e4620",
    "diff_add_char_bg": "#2e7d32",
    "diff_remove_line_bg": "#4a1e1e",
    "diff_remove_char_bg": "#8b2e2e",
}

NORD = {
    "fg": "#d8dee9",
    "bg": "#2e3440",
    "user_prompt": "#81a1c1",
    "user_prompt_bg": "#373737",
    "assistant_text": "#d8dee9",
    "tool_name": "#ebcb8b",
    "tool_bullet_success": "#a3be8c",
    "tool_bullet_error": "#bf616a",
    "thinking": "#4c566a",
    "box_drawing": "#3b4252",
    "file_path": "#88c0d0",
    "muted": "#4c566a",
    "agent": "#b48ead",
    "diff_add_line_bg": "#2e4a3a",
    "diff_add_char_bg": "#4a7a5c",
    "diff_remove_line_bg": "#4a2e2e",
    "diff_remove_char_bg": "#7a4a4a",
}

CATPPUCCIN_MOCHA = {
    "fg": "#cdd6f4",
    "bg": "#1e1e2e",
    "user_prompt": "#89b4fa",
    "user_prompt_bg": "#373737",
    "assistant_text": "#cdd6f4",
    "tool_name": "#f9e2af",
    "tool_bullet_success": "#a6e3a1",
    "tool_bullet_error": "#f38ba8",
    "thinking": "#585b70",
    "box_drawing": "#45475a",
    "file_path": "#94e2d5",
    "muted": "#585b70",
    "agent": "#f5c2e7",
    "diff_add_line_bg": "#264a35",
    "diff_add_char_bg": "#40a060",
    "diff_remove_line_bg": "#4a2635",
    "diff_remove_char_bg": "#a04050",
}

RENDER_THEMES = {
    "tokyo-night": TOKYO_NIGHT,
    "tokyo-storm": TOKYO_STORM,
    "dracula": DRACULA,
    "nord": NORD,
    "catppuccin-mocha": CATPPUCCIN_MOCHA,
}

# Terminal palettes embedded in the recording header (ANSI colors 0-15)
CAST_THEMES = {
    "tokyo-night": {
        "fg": "#a9b1d6",
        "bg": "#1a1b26",
        "palette": "#15161e:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#a9b1d6:"
                   "#414868:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#c0caf5",
    },
    "tokyo-storm": {
        "fg": "#a9b1d6",
        "bg": "#24283b",
        "palette": "#1d202f:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#a9b1d6:"
                   "#414868:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#c0caf5",
    },
    "dracula": {
        "fg": "#f8f8f2",
        "bg": "#282a36",
        "palette": "#21222c:#ff5555:#50fa7b:#f1fa8c:#bd93f9:#ff79c6:#8be9fd:#f8f8f2:"
                   "#6272a4:#ff6e6e:#69ff94:#ffffa5:#d6acff:#ff92df:#a4ffff:#ffffff",
    },
    "nord": {
        "fg": "#d8dee9",
        "bg": "#2e3440",
        "palette": "#3b4252:#bf616a:#a3be8c:#ebcb8b:#81a1c1:#b48ead:#88c0d0:#e5e9f0:"
                   "#4c566a:#bf616a:#a3be8c:#ebcb8b:#81a1c1:#b48ead:#8fbcbb:#eceff4",
    },
    "catppuccin-mocha": {
        "fg": "#cdd6f4",
        "bg": "#1e1e2e",
        "palette": "#45475a:#f38ba8:#a6e3a1:#f9e2af:#89b4fa:#f5c2e7:#94e2d5:#bac2de:"
                   "#585b70:#f38ba8:#a6e3a1:#f9e2af:#89b4fa:#f5c2e7:#94e2d5:#a6adc8",
    },
}

DEFAULT_THEME_NAME = "tokyo-night"


def get_theme(name):
    return RENDER_THEMES.get(name, TOKYO_NIGHT)


def theme_name(theme):
    for name, preset in RENDER_THEMES.items():
        if preset is theme:
            return name
    return None


def to_cast_theme(theme):
    """Header theme for a render theme.

    Named presets use their hand-tuned terminal palette; any other theme
    gets a palette assembled from its semantic colors.
    """
    name = theme_name(theme)
    if name and name in CAST_THEMES:
        return dict(CAST_THEMES[name])

    palette = [
        theme["bg"],
        theme["tool_bullet_error"],
        theme["tool_bullet_success"],
        theme["tool_name"],
        theme["user_prompt"],
        theme["agent"],
        theme["file_path"],
        theme["fg"],
        theme["muted"],
        theme["tool_bullet_error"],
        theme["tool_bullet_success"],
        theme["tool_name"],
        theme["user_prompt"],
        theme["agent"],
        theme["file_path"],
        theme["assistant_text"],
    ]
    return {"fg": theme["fg"], "bg": theme["bg"], "palette": ":".join(palette)}
