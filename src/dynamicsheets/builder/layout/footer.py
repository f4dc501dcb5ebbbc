"""
Module: builder.layout.footer

Purpose:
    The per-page footer: product name (left), aligned standards
    (centre) and "Page N" (right), stamped at a fixed distance from
    the page bottom.

    The hook fires from two places: the sink's page transition event
    and explicit calls at the end of each section (the last page of a
    section never sees a transition). It is idempotent per page number,
    so each page receives exactly one footer.

Key Classes:
    - FooterHook: Callable bound to one sink and one standards list

Dependencies:
    - builder.config: LayoutConfig
    - builder.layout.sink: DocumentSink
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from dynamicsheets.builder.config import FOOTER_COLOR, LayoutConfig
from dynamicsheets.builder.layout.sink import DocumentSink

logger = logging.getLogger(__name__)

NO_STANDARDS = "—"


def aligned_with_text(standards: Sequence[str]) -> str:
    """Centre column text, e.g. "Aligned with: 4.NF.A.1, 4.NF.A.2"."""
    codes = ", ".join(standards) if standards else NO_STANDARDS
    return f"Aligned with: {codes}"


class FooterHook:
    """
    Footer stamper for one document.

    Example:
        >>> footer = FooterHook(sink, config, ["RL.4.1"])
        >>> sink.add_page_listener(footer.on_page_added)
        >>> footer()  # explicit stamp at a section end
    """

    def __init__(self, sink: DocumentSink, config: LayoutConfig, standards: Sequence[str]) -> None:
        self.sink = sink
        self.config = config
        self.standards = tuple(standards)
        self._stamped: List[int] = []

    @property
    def stamped_pages(self) -> List[int]:
        """Page numbers stamped so far, in order."""
        return list(self._stamped)

    def on_page_added(self, outgoing_page: int) -> None:
        """Sink listener: stamp the page being left."""
        self.stamp(outgoing_page)

    def __call__(self) -> bool:
        return self.stamp()

    def stamp(self, page_number: Optional[int] = None) -> bool:
        """
        Draw the footer on the sink's current page unless already drawn.

        Returns:
            True if a footer was drawn, False if the page already had one
        """
        current = self.sink.page_number
        if page_number is not None and page_number != current:
            raise RuntimeError(f"Cannot stamp page {page_number} while drawing page {current}")
        if current in self._stamped:
            logger.debug(f"Footer already drawn on page {current}")
            return False

        cfg = self.config
        column = cfg.content_width / 3
        top = cfg.footer_top
        size = cfg.footer_font_size

        self.sink.draw_text(
            cfg.product_name, cfg.left, top,
            font_size=size, width=column, align="left", color=FOOTER_COLOR,
        )
        self.sink.draw_text(
            aligned_with_text(self.standards), cfg.left + column, top,
            font_size=size, width=column, align="center", color=FOOTER_COLOR,
            max_lines=cfg.footer_max_lines,
        )
        self.sink.draw_text(
            f"Page {current}", cfg.left + 2 * column, top,
            font_size=size, width=column, align="right", color=FOOTER_COLOR,
        )
        self._stamped.append(current)
        return True
