"""Measurement backends for the layout engine.

``MonospaceBackend`` models a fixed-pitch display such as a terminal or a
typewriter page. ``ReportLabBackend`` measures proportional fonts with
ReportLab's font metrics, so layouts line up with PDFs painted by
``PDFPainter``.
"""

import math
import os
from typing import Optional

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from .constants import EngineConstants
from .layout import MeasurementBackend


class FontLoadError(Exception):
    """Exception raised when a font cannot be loaded."""


def _wrap_paragraph(paragraph: str, num_columns: int) -> list[str]:
    if not paragraph:
        return [""]

    lines: list[str] = []
    current_line: Optional[str] = None
    for word in paragraph.split(" "):
        if current_line is not None and len(current_line) + 1 + len(word) <= num_columns:
            current_line += " " + word
            continue
        if current_line is not None:
            lines.append(current_line)
        # Break long word across as many lines as needed
        while len(word) > num_columns:
            lines.append(word[:num_columns])
            word = word[num_columns:]
        current_line = word

    assert current_line is not None
    lines.append(current_line)
    return lines


def wrap_text(text: str, num_columns: int) -> list[str]:
    """Word-wrap ``text`` into lines of at most ``num_columns`` characters.

    Newlines force a break. Words are separated by single spaces; a word
    longer than a line is broken across lines. Widths below one column are
    treated as one column.
    """
    num_columns = max(num_columns, 1)
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(_wrap_paragraph(paragraph, num_columns))
    return lines


class MonospaceBackend(MeasurementBackend):
    """Fixed-pitch measurement: every character occupies one cell."""

    def __init__(self, cell_width: int = 1, line_height: int = 1):
        if cell_width <= 0 or line_height <= 0:
            raise ValueError("cell_width and line_height must be positive")
        self.cell_width = cell_width
        self.line_height = line_height

    def columns_for(self, width: int) -> int:
        return max(width // self.cell_width, 1)

    def measure_height(self, text: str, width: int) -> int:
        return len(wrap_text(text, self.columns_for(width))) * self.line_height


def register_font(font_name: str, font_path: Optional[str] = None) -> str:
    """Make ``font_name`` available to ReportLab.

    Built-in PDF fonts need no file. Other fonts are registered from the
    TrueType file at ``font_path``.

    Returns:
        The font name to use with ReportLab.

    Raises:
        FontLoadError: If the font is unknown and cannot be loaded.
    """
    if font_name in pdfmetrics.getRegisteredFontNames() or font_name in pdfmetrics.standardFonts:
        return font_name
    if not font_path:
        raise FontLoadError(f"Unknown font: {font_name}")
    if not os.path.exists(font_path):
        raise FontLoadError(f"Font file not found: {font_path}")
    try:
        pdfmetrics.registerFont(TTFont(font_name, font_path))
    except Exception as e:
        raise FontLoadError(f"Could not register {font_name} font: {e}")
    return font_name


class ReportLabBackend(MeasurementBackend):
    """Proportional measurement using ReportLab font metrics."""

    def __init__(self, font_name: str = EngineConstants.DEFAULT_FONT_NAME,
                 font_size: float = EngineConstants.DEFAULT_FONT_SIZE,
                 leading: Optional[float] = None, font_path: Optional[str] = None):
        """Initialize the backend.

        Args:
            font_name: ReportLab font name, e.g. "Helvetica" or a TrueType name.
            font_size: Font size in points.
            leading: Line height in points; defaults to a multiple of font_size.
            font_path: TrueType file to register when font_name is not built in.

        Raises:
            FontLoadError: If the font cannot be loaded.
        """
        self.font_name = register_font(font_name, font_path)
        self.font_size = font_size
        self.leading = leading if leading is not None else font_size * EngineConstants.LEADING_FACTOR

    def text_width(self, text: str) -> float:
        return pdfmetrics.stringWidth(text, self.font_name, self.font_size)

    def wrap(self, text: str, width: int) -> list[str]:
        # simpleSplit treats a zero width as "no wrapping", so keep it positive.
        return simpleSplit(text, self.font_name, self.font_size, max(width, 1))

    def measure_height(self, text: str, width: int) -> int:
        num_lines = max(len(self.wrap(text, width)), 1)
        return math.ceil(num_lines * self.leading)
