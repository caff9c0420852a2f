"""Constants and defaults for the text engine."""

from .geometry import Colour


class EngineConstants:
    """Central configuration constants for layout and measurement."""

    # InfoBox call-out region
    INFO_BOX_PADDING = 10  # Padding on every side of an InfoBox
    INFO_BOX_BACKGROUND = Colour(0xDE, 0xEB, 0xF7)  # Pale blue call-out fill

    # Text colour used when a box does not override it
    DEFAULT_FOREGROUND = Colour(0, 0, 0)

    # Default viewport
    DEFAULT_VIEWPORT_WIDTH = 65  # Columns, matching a typewriter text area

    # Proportional font defaults (ReportLab metrics)
    DEFAULT_FONT_NAME = "Helvetica"
    DEFAULT_FONT_SIZE = 12
    LEADING_FACTOR = 1.2  # Line height as a multiple of font size

    # Sample document used by the demo harness
    SAMPLE_TEXT = "Hell\U0001F30D World"
