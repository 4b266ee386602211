"""Conversion options shared by the CLI and the picker, and the per-directory profile."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

PROFILE_FILENAME = "session-cast.profile"

DEFAULT_CAST_OPTIONS = {
    "output": None,
    "theme": "tokyo-night",
    "cols": 100,
    "rows": 40,
    "title": None,
    "preset": "default",
    "max_wait": None,
    "thinking_pause": None,
    "typing_effect": None,
    "status_spinner": True,
    "spinner_duration": 3.0,
    "markers": "all",
}


def profile_path(cwd=None):
    return Path(cwd if cwd is not None else Path.cwd()) / PROFILE_FILENAME


def load_profile(cwd=None):
    """Saved options for cwd, or None when there is no readable profile."""
    path = profile_path(cwd)
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except OSError:
        return None
    except json.JSONDecodeError as e:
        logger.warning("Ignoring invalid profile %s: %s", path, e)
        return None
    if not isinstance(config, dict):
        logger.warning("Ignoring profile %s: not a JSON object", path)
        return None
    return config


def save_profile(config, cwd=None):
    path = profile_path(cwd)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, ensure_ascii=False, indent=2)
    logger.debug("Saved profile to %s", path)
    return path


def merge_options(*layers):
    """Later layers win; None values never override."""
    options = dict(DEFAULT_CAST_OPTIONS)
    for layer in layers:
        for key, value in (layer or {}).items():
            if value is not None:
                options[key] = value
    return options


def build_convert_kwargs(options, title):
    return {
        "theme": options.get("theme"),
        "cols": options.get("cols"),
        "rows": options.get("rows"),
        "title": options.get("title") or title,
        "preset": options.get("preset"),
        "max_wait": options.get("max_wait"),
        "thinking_pause": options.get("thinking_pause"),
        "typing_effect": options.get("typing_effect"),
        "marker_mode": options.get("markers"),
        "input_animation": True,
        "status_spinner": bool(options.get("status_spinner", True)),
        "spinner_duration": options.get("spinner_duration"),
    }
