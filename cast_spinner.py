"""Status spinner: rotating glyph plus a shimmering verb."""

import enum

from cast_ansi import RESET, erase_line, fg, move_to
from cast_timing import TimedSegment

SPINNER_CHARS = ["·", "✢", "✳", "✻", "✽", "✻", "✳", "✢"]

SHIMMER_BASE_COLOR = "#d77757"
SHIMMER_HIGHLIGHT_COLOR = "#eb9f7f"
DEFAULT_FRAME_INTERVAL_MS = 200
DEFAULT_SHIMMER_WINDOW_SIZE = 3

FALLBACK_VERB = "Processing"
KNUTH_MULTIPLIER = 2654435761

DEFAULT_SPINNER_CONFIG = {
    "frame_interval_ms": DEFAULT_FRAME_INTERVAL_MS,
    "shimmer_window_size": DEFAULT_SHIMMER_WINDOW_SIZE,
    "base_color": SHIMMER_BASE_COLOR,
    "highlight_color": SHIMMER_HIGHLIGHT_COLOR,
}

VERBS = [
    "Accomplishing", "Flambéing", "Perusing", "Wandering", "Concocting",
    "Julienning", "Smooshing", "Baking", "Forging", "Pontificating",
    "Whisking", "Crafting", "Manifesting", "Stewing", "Bootstrapping",
    "Galloping", "Puttering", "Zesting", "Deciphering", "Misting", "Swooping",
    "Caramelizing", "Gusting", "Reticulating", "Doing", "Mustering",
    "Tomfoolering", "Channelling", "Herding", "Schlepping", "Elucidating",
    "Nucleating", "Unfurling", "Coalescing", "Imagining", "Shimmying",
    "Finagling", "Percolating", "Waiting", "Computing", "Ionizing",
    "Slithering", "Architecting", "Flummoxing", "Pondering", "Whirring",
    "Cooking", "Lollygagging", "Sprouting", "Booping", "Gallivanting",
    "Proofing", "Wrangling", "Crystallizing", "Metamorphosing", "Swirling",
    "Canoodling", "Germinating", "Razzmatazzing", "Discombobulating",
    "Musing", "Tinkering", "Channeling", "Hatching", "Scheming", "Effecting",
    "Noodling", "Undulating", "Clauding", "Ideating", "Shenaniganing",
    "Fermenting", "Perambulating", "Waddling", "Composing", "Infusing",
    "Sketching", "Actualizing", "Flowing", "Photosynthesizing",
    "Whatchamacalliting", "Contemplating", "Levitating", "Spinning",
    "Boogieing", "Frolicking", "Processing", "Working", "Crunching",
    "Meandering", "Sussing", "Calculating", "Generating", "Quantumizing",
    "Determining", "Mulling", "Synthesizing", "Cerebrating", "Hashing",
    "Scampering", "Drizzling", "Nesting", "Twisting", "Churning", "Honking",
    "Seasoning", "Envisioning", "Osmosing", "Vibing", "Combobulating",
    "Inferring", "Skedaddling", "Actioning", "Flibbertigibbeting",
    "Philosophising", "Warping", "Considering", "Kneading", "Spelunking",
    "Beaming", "Forming", "Precipitating", "Wibbling", "Creating",
    "Marinating", "Sublimating", "Brewing", "Garnishing", "Puzzling",
    "Deliberating", "Moseying", "Symbioting", "Catapulting", "Harmonizing",
    "Ruminating", "Doodling", "Nebulizing", "Transmuting", "Choreographing",
    "Hibernating", "Scurrying", "Enchanting", "Orbiting", "Unravelling",
    "Cogitating", "Incubating", "Simmering",
]


class SpinnerMode(enum.Enum):
    OFF = "off"
    # Drawn in the content flow and scrolls away with it
    INLINE = "inline"
    # Drawn on a dedicated row outside the scroll region
    FIXED = "fixed"


def to_int32(value):
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def select_verb(verbs, seed):
    """Deterministic verb choice from a multiplicative hash of the seed."""
    if not verbs:
        return FALLBACK_VERB
    index = abs(to_int32((seed + 1) * KNUTH_MULTIPLIER)) % len(verbs)
    return verbs[index]


# ---------------------------------------------------------------------------
# Frames
# ---------------------------------------------------------------------------

def get_shimmer_window(frame_index, text_length, window_size):
    """(start, end) of the highlighted slice; the cycle runs past the end so it fully exits."""
    position = frame_index % (text_length + window_size)
    start = max(0, position - window_size + 1)
    end = min(text_length, position + 1)
    return start, end


def apply_shimmer(text, frame_index, config):
    start, end = get_shimmer_window(frame_index, len(text), config["shimmer_window_size"])
    parts = []
    for index, char in enumerate(text):
        color = config["highlight_color"] if start <= index < end else config["base_color"]
        parts.append(fg(color) + char)
    return "".join(parts) + RESET


def render_spinner_frame(verb, frame_index, config):
    char = SPINNER_CHARS[frame_index % len(SPINNER_CHARS)]
    return fg(config["base_color"]) + char + RESET + " " + apply_shimmer(verb + "…", frame_index, config)


def generate_status_spinner_segments(verb, start_time, duration, config, row=None):
    """One frame per interval across duration (at least one), positioned on row or the current line."""
    interval = config["frame_interval_ms"] / 1000
    total_frames = max(1, int(duration / interval))

    segments = []
    for index in range(total_frames):
        frame = render_spinner_frame(verb, index, config)
        if row is not None:
            text = move_to(row, 1) + erase_line() + frame
        else:
            text = "\r" + erase_line() + frame
        segments.append(TimedSegment(text, start_time + index * interval))
    return segments


def generate_spinner_clear(row=None):
    if row is not None:
        return move_to(row, 1) + erase_line()
    return "\r" + erase_line()


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class SpinnerState:
    """Lifecycle of the spinner during one conversion.

    Methods return the output to emit; the caller owns the clock.
    """

    def __init__(self, config=None, row=None):
        self.config = dict(DEFAULT_SPINNER_CONFIG)
        if config:
            self.config.update(config)
        self.fixed_row = row
        self.mode = SpinnerMode.OFF
        self.verb = None
        self.row = None

    @property
    def active(self):
        return self.mode is not SpinnerMode.OFF

    def start(self, verb, time):
        """Draw the first frame of a new spinner, clearing any running one first."""
        output = ""
        if self.active:
            output += generate_spinner_clear(self.row)
        first = generate_status_spinner_segments(
            verb, time, self.config["frame_interval_ms"] / 1000, self.config, self.fixed_row
        )[0]
        output += first.text

        self.verb = verb
        self.row = self.fixed_row
        self.mode = SpinnerMode.FIXED if self.fixed_row is not None else SpinnerMode.INLINE
        return output

    def frames(self, start_time, duration):
        """Frames filling duration seconds from start_time; none when off."""
        if not self.active or not self.verb or duration <= 0:
            return []
        return generate_status_spinner_segments(self.verb, start_time, duration, self.config, self.row)

    def clear(self):
        if not self.active:
            return ""
        output = generate_spinner_clear(self.row)
        self.stop()
        return output

    def stop(self):
        self.mode = SpinnerMode.OFF
        self.verb = None
        self.row = None
