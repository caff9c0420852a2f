"""Paint display lists to PDF.

The painter consumes ``RenderBox`` and ``RenderText`` commands in order,
so later commands draw over earlier ones. Layout units are PDF points.
Text is re-wrapped with the same ``ReportLabBackend`` used for measuring,
which keeps painted line breaks in step with the computed heights.
"""

import io
import logging
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from .backends import ReportLabBackend
from .layout import DisplayList, LayoutBuilder, RenderBox, RenderText, layout
from .model import Document

logger = logging.getLogger(__name__)


class PDFPainter:
    """Generate a single-page PDF sized to fit a laid-out document."""

    def __init__(self, backend: Optional[ReportLabBackend] = None,
                 page_width: int = 612, margin: int = 72):
        """Initialize the painter.

        Args:
            backend: Measurement backend whose font is used for text.
            page_width: Page width in points (US Letter by default).
            margin: Blank space around the content on every side, in points.
        """
        self.backend = backend or ReportLabBackend()
        self.page_width = page_width
        self.margin = margin
        # Standard PDF fonts only cover Windows-1252
        self._needs_safe_text = self.backend.font_name in pdfmetrics.standardFonts
        self.unprintable_chars: set[str] = set()

    @property
    def content_width(self) -> int:
        return self.page_width - 2 * self.margin

    def paint(self, display_list: DisplayList) -> bytes:
        """Paint ``display_list`` and return the PDF document as bytes."""
        self.unprintable_chars = set()
        page_height = display_list.required_height + 2 * self.margin
        pdf_buffer = io.BytesIO()
        c = canvas.Canvas(pdf_buffer, pagesize=(self.page_width, page_height))

        for command in display_list:
            if isinstance(command, RenderBox):
                self._paint_box(c, command, page_height)
            elif isinstance(command, RenderText):
                self._paint_text(c, command, page_height)

        c.showPage()
        c.save()

        if self.unprintable_chars:
            logger.warning(f"Replaced {len(self.unprintable_chars)} unprintable character(s) "
                           f"with '?': {''.join(sorted(self.unprintable_chars))}")
        return pdf_buffer.getvalue()

    def render_document(self, document: Document, builder: Optional[LayoutBuilder] = None) -> bytes:
        """Lay out ``document`` at the page's content width and paint it."""
        return self.paint(layout(document, self.content_width, self.backend, builder))

    def _paint_box(self, c, command: RenderBox, page_height: int) -> None:
        if command.colour is None:
            return
        rect = command.rect
        c.setFillColorRGB(*command.colour.to_floats())
        # PDF origin is bottom-left; layout origin is top-left
        bottom = page_height - self.margin - rect.y - rect.h
        c.rect(self.margin + rect.x, bottom, rect.w, rect.h, stroke=0, fill=1)

    def _paint_text(self, c, command: RenderText, page_height: int) -> None:
        backend = self.backend
        c.setFillColorRGB(*command.colour.to_floats())
        c.setFont(backend.font_name, backend.font_size)
        baseline = page_height - self.margin - command.y - backend.font_size
        for line in backend.wrap(command.text, command.width):
            c.drawString(self.margin + command.x, baseline, self._make_pdf_safe(line))
            baseline -= backend.leading

    def _make_pdf_safe(self, text: str) -> str:
        """Replace characters the standard fonts cannot encode with '?'."""
        if not self._needs_safe_text:
            return text
        result = []
        for char in text:
            try:
                char.encode('cp1252')
                result.append(char)
            except UnicodeEncodeError:
                self.unprintable_chars.add(char)
                result.append('?')
        return ''.join(result)
