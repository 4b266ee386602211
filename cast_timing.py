"""Playback clock: maps transcript entries onto recording time."""

import math
from collections import namedtuple

from cast_loader import get_timestamp

TIMING_PRESETS = {
    "speedrun": {
        "max_wait": 2.0,
        "thinking_pause": 0.3,
        "typing_effect": False,
        "typing_speed": 80,
    },
    "default": {
        "max_wait": 3.0,
        "thinking_pause": 0.8,
        "typing_effect": True,
        "typing_speed": 60,
    },
    "realtime": {
        "max_wait": math.inf,
        "thinking_pause": 0.0,
        "typing_effect": False,
        "typing_speed": 0,
    },
}

# Pauses used when an entry or its predecessor has no timestamp
DEFAULT_PAUSES = {
    "tool_result": 0.1,
    "user": 0.3,
    "system": 0.2,
    "other": 0.1,
}

TimedSegment = namedtuple("TimedSegment", ["text", "time"])


def resolve_timing_config(preset=None, **overrides):
    """Timing settings from a preset name plus any non-None field overrides."""
    config = dict(TIMING_PRESETS.get(preset) or TIMING_PRESETS["default"])
    for key, value in overrides.items():
        if key not in config:
            raise ValueError(f"Unknown timing option: {key}")
        if value is not None:
            config[key] = value
    return config


class TimingCalculator:
    def __init__(self, config):
        self.config = dict(config)
        self._last_timestamp = None
        self._current_time = 0.0

    @property
    def time(self):
        return self._current_time

    @time.setter
    def time(self, value):
        self._current_time = value

    def reset(self):
        self._last_timestamp = None
        self._current_time = 0.0

    def next_entry(self, entry):
        """Advance the clock for an entry and return the new time."""
        timestamp = get_timestamp(entry)
        max_wait = self.config["max_wait"]

        if timestamp and self._last_timestamp:
            real_delta = (timestamp - self._last_timestamp).total_seconds()
            delta = max(0.0, real_delta)
            if not math.isinf(max_wait):
                delta = min(delta, max_wait)
        else:
            delta = self._default_pause(entry)

        if timestamp:
            self._last_timestamp = timestamp

        self._current_time += delta
        return self._current_time

    def add_thinking_pause(self):
        self._current_time += self.config["thinking_pause"]

    def add_pause(self, seconds):
        self._current_time += min(seconds, self.config["max_wait"])

    def get_typing_duration(self, text):
        if not self.has_typing_effect:
            return 0.0
        return len(text) / self.config["typing_speed"]

    @property
    def has_typing_effect(self):
        return bool(self.config["typing_effect"]) and self.config["typing_speed"] > 0

    def _default_pause(self, entry):
        entry_type = entry.get("type")
        if entry_type == "user":
            if entry.get("toolUseResult"):
                return DEFAULT_PAUSES["tool_result"]
            return DEFAULT_PAUSES["user"]
        if entry_type == "assistant":
            return self.config["thinking_pause"]
        if entry_type == "system":
            return DEFAULT_PAUSES["system"]
        return DEFAULT_PAUSES["other"]


def generate_typing_segments(text, start_time, chars_per_second, chunk_size=3):
    """Split text into chunks timed at a constant typing rate."""
    if chars_per_second <= 0:
        return [TimedSegment(text, start_time)]

    segments = []
    current = start_time
    for i in range(0, len(text), chunk_size):
        chunk = text[i:i + chunk_size]
        segments.append(TimedSegment(chunk, current))
        current += len(chunk) / chars_per_second
    return segments


def generate_line_segments(text, start_time, line_delay):
    lines = text.split("\n")
    segments = []
    current = start_time
    for index, line in enumerate(lines):
        segments.append(TimedSegment(line + "\n" if index < len(lines) - 1 else line, current))
        current += line_delay
    return segments
