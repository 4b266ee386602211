"""asciicast v3 document builder, serializer and parser."""

import json
import math

from cast_theme import CAST_THEMES

CAST_VERSION = 3
EVENT_KINDS = ("o", "m", "r")

DEFAULT_BUILDER_CONFIG = {
    "cols": 100,
    "rows": 40,
    "term_type": "xterm-256color",
    "theme": CAST_THEMES["tokyo-night"],
    "title": "Claude Code Session",
    # Unix seconds; omitted from the header when None
    "timestamp": None,
}


class CastParseError(ValueError):
    pass


class CastBuilder:
    """Accumulates timed events; each event stores the interval since the previous one."""

    def __init__(self, **config):
        unknown = set(config) - set(DEFAULT_BUILDER_CONFIG)
        if unknown:
            raise ValueError(f"Unknown builder option(s): {', '.join(sorted(unknown))}")
        self.config = dict(DEFAULT_BUILDER_CONFIG)
        self.config.update(config)
        self._events = []
        self._current_time = 0.0
        self._last_event_time = 0.0

    @property
    def time(self):
        return self._current_time

    @time.setter
    def time(self, value):
        self._current_time = value

    @property
    def event_count(self):
        return len(self._events)

    def add_time(self, seconds):
        self._current_time += seconds
        return self

    def _interval(self):
        # Time may be rewound by callers; intervals never go negative
        return max(0.0, self._current_time - self._last_event_time)

    def output(self, text):
        if text:
            self._events.append([self._interval(), "o", text])
            self._last_event_time = self._current_time
        return self

    def output_line(self, text):
        return self.output(text + "\n")

    def output_lines(self, lines):
        for line in lines:
            self.output_line(line)
        return self

    def marker(self, label):
        self._events.append([self._interval(), "m", label])
        self._last_event_time = self._current_time
        return self

    def output_with_marker(self, text, label):
        self.marker(label)
        return self.output(text)

    def blank(self):
        return self.output("\n")

    def blanks(self, count):
        for _ in range(count):
            self.blank()
        return self

    def clear(self):
        return self.output("\x1b[2J\x1b[H")

    def build_header(self):
        header = {
            "version": CAST_VERSION,
            "term": {
                "cols": self.config["cols"],
                "rows": self.config["rows"],
                "type": self.config["term_type"],
                "theme": dict(self.config["theme"]),
            },
        }
        if self.config["timestamp"] is not None:
            header["timestamp"] = self.config["timestamp"]
        if self.config["title"] is not None:
            header["title"] = self.config["title"]
        return header

    def build(self):
        return {
            "header": self.build_header(),
            "events": [list(event) for event in self._events],
        }

    def reset(self):
        self._events = []
        self._current_time = 0.0
        self._last_event_time = 0.0
        return self


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def _dumps(value):
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def serialize_cast(document):
    """One JSON line for the header, then one per event, newline terminated."""
    lines = [_dumps(document["header"])]
    lines.extend(_dumps(event) for event in document["events"])
    return "\n".join(lines) + "\n"


def _validate_event(event, line_number):
    if not isinstance(event, list) or len(event) != 3:
        raise CastParseError(f"Line {line_number}: event must be a 3-element array")

    delta, kind, payload = event
    if isinstance(delta, bool) or not isinstance(delta, (int, float)):
        raise CastParseError(f"Line {line_number}: event time must be a number")
    if math.isnan(delta) or delta < 0:
        raise CastParseError(f"Line {line_number}: event time must be non-negative")
    if kind not in EVENT_KINDS:
        raise CastParseError(f"Line {line_number}: unknown event kind {kind!r}")
    if not isinstance(payload, str):
        raise CastParseError(f"Line {line_number}: event payload must be a string")


def _load_line(line, line_number):
    try:
        return json.loads(line)
    except json.JSONDecodeError as e:
        raise CastParseError(f"Line {line_number}: invalid JSON ({e.msg})") from e


def parse_cast(content):
    """Parse a .cast document; raises CastParseError on structural problems."""
    lines = content.strip().split("\n")
    if not lines or not lines[0].strip():
        raise CastParseError("Empty cast file")

    header = _load_line(lines[0], 1)
    if not isinstance(header, dict):
        raise CastParseError("Line 1: header must be a JSON object")
    if header.get("version") != CAST_VERSION:
        raise CastParseError(f"Line 1: unsupported version {header.get('version')!r}")

    events = []
    for line_number, line in enumerate(lines[1:], start=2):
        line = line.strip()
        if not line:
            continue
        event = _load_line(line, line_number)
        _validate_event(event, line_number)
        events.append(event)

    return {"header": header, "events": events}
