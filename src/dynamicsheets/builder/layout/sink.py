"""
Module: builder.layout.sink

Purpose:
    The two collaborators the layout engine draws through:
    - TextMeasurer: wraps text and reports its rendered height
    - DocumentSink: the page device (new page, text, lines, rectangles,
      page transition notifications)
    plus their ReportLab implementations writing into memory.

Key Classes:
    - TextMeasurer / DocumentSink: Protocols consumed by the engine
    - ReportLabMeasurer: Helvetica wrapping via simpleSplit
    - ReportLabSink: Canvas-backed sink returning PDF bytes

Coordinates:
    The engine works top-down (y grows towards the page bottom, text is
    positioned by its top edge). ReportLabSink converts to ReportLab's
    bottom-up baseline coordinates.

Page transitions:
    A PDF page cannot be drawn on once emitted, so page listeners run
    while the outgoing page is still current, receiving its number.

Dependencies:
    - reportlab: Canvas, font metrics, text wrapping

Used By:
    - builder.layout.engine
    - builder.controller
"""

from __future__ import annotations

import io
import logging
from typing import Callable, List, Optional, Protocol

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from dynamicsheets.builder.config import RULE_COLOR, TEXT_COLOR

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_LINE_HEIGHT_FACTOR = 1.2

PageListener = Callable[[int], None]


class TextMeasurer(Protocol):
    """Measurement capability: wrapping and rendered height."""

    def wrap(self, text: str, width: float, font_size: float) -> List[str]:
        ...

    def line_height(self, font_size: float) -> float:
        ...

    def height_of(self, text: str, width: float, font_size: float) -> float:
        ...


class DocumentSink(Protocol):
    """Page device the layout engine writes to."""

    page_width: float
    page_height: float

    @property
    def page_number(self) -> int:
        ...

    def add_page(self) -> None:
        ...

    def add_page_listener(self, listener: PageListener) -> None:
        ...

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
        width: Optional[float] = None,
        align: str = "left",
        color: str = TEXT_COLOR,
        max_lines: Optional[int] = None,
    ) -> None:
        ...

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = RULE_COLOR) -> None:
        ...

    def draw_rect(self, x: float, y: float, width: float, height: float, *, color: str = RULE_COLOR) -> None:
        ...

    def finish(self) -> bytes:
        ...


class ReportLabMeasurer:
    """
    Measure text as ReportLab would lay it out in a standard font.

    Height is the wrapped line count times font_size × line_height_factor.
    Explicit newlines start new lines.
    """

    def __init__(self, font_name: str = DEFAULT_FONT, line_height_factor: float = DEFAULT_LINE_HEIGHT_FACTOR):
        self.font_name = font_name
        self.line_height_factor = line_height_factor

    def wrap(self, text: str, width: float, font_size: float) -> List[str]:
        if not text:
            return []
        return simpleSplit(text, self.font_name, font_size, width)

    def line_height(self, font_size: float) -> float:
        return font_size * self.line_height_factor

    def height_of(self, text: str, width: float, font_size: float) -> float:
        return len(self.wrap(text, width, font_size)) * self.line_height(font_size)


class ReportLabSink:
    """
    DocumentSink backed by a ReportLab canvas writing to memory.

    Example:
        >>> sink = ReportLabSink(612, 792)
        >>> sink.draw_text("Hello", 54, 60, font_size=18)
        >>> pdf_bytes = sink.finish()
    """

    def __init__(
        self,
        page_width: float,
        page_height: float,
        *,
        measurer: Optional[TextMeasurer] = None,
        font_name: str = DEFAULT_FONT,
        title: Optional[str] = None,
    ) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self.font_name = font_name
        self.measurer = measurer or ReportLabMeasurer(font_name)
        self._buffer = io.BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=(page_width, page_height))
        if title:
            self._canvas.setTitle(title)
        self._listeners: List[PageListener] = []
        self._finished = False

    @property
    def page_number(self) -> int:
        """1-based number of the page currently being drawn."""
        return self._canvas.getPageNumber()

    def add_page_listener(self, listener: PageListener) -> None:
        self._listeners.append(listener)

    def add_page(self) -> None:
        """Finish the current page (notifying listeners first) and start the next."""
        outgoing = self.page_number
        for listener in list(self._listeners):
            listener(outgoing)
        self._canvas.showPage()
        logger.debug(f"Page {outgoing} closed, now on page {self.page_number}")

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_size: float,
        width: Optional[float] = None,
        align: str = "left",
        color: str = TEXT_COLOR,
        max_lines: Optional[int] = None,
    ) -> None:
        """
        Draw text whose top edge sits at y.

        With a width the text is wrapped and aligned inside [x, x + width];
        without one it is drawn on a single line starting at x.
        """
        if width is None:
            lines = text.splitlines() or [text]
        else:
            lines = self.measurer.wrap(text, width, font_size)
        if max_lines is not None and len(lines) > max_lines:
            lines = lines[:max_lines]
            lines[-1] = lines[-1].rstrip() + "…"

        c = self._canvas
        c.saveState()
        c.setFont(self.font_name, font_size)
        c.setFillColor(HexColor(color))
        leading = self.measurer.line_height(font_size)
        ascent = pdfmetrics.getAscent(self.font_name, font_size)
        for i, line in enumerate(lines):
            baseline = self.page_height - (y + i * leading) - ascent
            if align == "center" and width is not None:
                c.drawCentredString(x + width / 2, baseline, line)
            elif align == "right" and width is not None:
                c.drawRightString(x + width, baseline, line)
            else:
                c.drawString(x, baseline, line)
        c.restoreState()

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, *, color: str = RULE_COLOR) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(HexColor(color))
        c.line(x1, self.page_height - y1, x2, self.page_height - y2)
        c.restoreState()

    def draw_rect(self, x: float, y: float, width: float, height: float, *, color: str = RULE_COLOR) -> None:
        c = self._canvas
        c.saveState()
        c.setStrokeColor(HexColor(color))
        c.rect(x, self.page_height - y - height, width, height, stroke=1, fill=0)
        c.restoreState()

    def finish(self) -> bytes:
        """Close the document and return the PDF bytes."""
        if not self._finished:
            self._canvas.save()
            self._finished = True
        return self._buffer.getvalue()
