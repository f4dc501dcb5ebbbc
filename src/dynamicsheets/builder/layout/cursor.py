"""
Module: builder.layout.cursor

Purpose:
    Mutable per-document layout state. Owned by one LayoutEngine for
    the duration of one render; never shared across documents.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LayoutCursor:
    """
    Current drawing position on the active page.

    Attributes:
        y: Vertical offset from the page top (points)
        page_width: Width of the active page
        page_height: Height of the active page
        margin: Left/right margin
        top_margin: Where y resets to after a page break
    """

    y: float
    page_width: float
    page_height: float
    margin: float
    top_margin: float

    def advance(self, dy: float) -> float:
        self.y += dy
        return self.y

    def move_to(self, y: float) -> float:
        self.y = y
        return self.y

    def reset(self) -> float:
        """Return to the top margin of a fresh page."""
        self.y = self.top_margin
        return self.y

    @property
    def at_top(self) -> bool:
        return self.y <= self.top_margin
