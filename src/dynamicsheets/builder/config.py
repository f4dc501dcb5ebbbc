"""
Module: builder.config

Purpose:
    Configuration for the worksheet layout engine.
    Defines page dimensions, margins, font sizes and block spacing.
    All values are PDF points (1/72 inch) measured top-down.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)
    - reportlab: Letter page size

Used By:
    - builder.layout.engine: Block placement and page breaks
    - builder.layout.footer: Footer geometry
    - builder.output.answer_key: Grid geometry
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import LETTER

from dynamicsheets import PRODUCT_NAME

LETTER_WIDTH_PT, LETTER_HEIGHT_PT = LETTER

TEXT_COLOR = "#111111"
RULE_COLOR = "#000000"
FOOTER_COLOR = "#888888"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for worksheet layout (immutable).

    Attributes:
        page_width: Page width in points
        page_height: Page height in points
        margin: Left/right/bottom margin in points
        title_top: Y of the title on the first page
        content_top: Cursor after the title region
        top_margin: Cursor after a page break
        bottom_reserve: Distance from page bottom that triggers a break
        footer_offset: Distance from page bottom to the footer text
        footer_font_size: Footer font size
        footer_max_lines: Wrapped lines allowed in the footer's centre column
        title_font_size: Title font size (also the answer key title)
        header_font_size: Section header font size
        header_rule_offset: Header rule distance below the header top
        header_height: Cursor advance for a section header
        paragraph_font_size: Directions font size
        paragraph_spacing: Space after a paragraph
        question_font_size: Prompt, stem and choice font size
        answer_line_spacing: Vertical pitch of blank answer lines
        organizer_box_height: Height of each graphic organizer box
        organizer_gap: Horizontal and vertical gap between organizer boxes
        answer_key_top: Y of the first answer key row
        answer_key_row_height: Answer key row pitch
        answer_key_columns: Answer key grid columns
        answer_key_font_size: Answer key entry font size
        line_height_factor: Leading as a multiple of font size
        product_name: Text in the footer's left column

    Example:
        >>> config = LayoutConfig()
        >>> config.break_threshold
        696.0
    """

    # Page dimensions
    page_width: float = LETTER_WIDTH_PT
    page_height: float = LETTER_HEIGHT_PT
    margin: float = 54

    # Vertical anchors
    title_top: float = 60
    content_top: float = 96
    top_margin: float = 72
    bottom_reserve: float = 96

    # Footer
    footer_offset: float = 36
    footer_font_size: float = 8
    footer_max_lines: int = 3

    # Blocks
    title_font_size: float = 18
    header_font_size: float = 12
    header_rule_offset: float = 16
    header_height: float = 24
    paragraph_font_size: float = 13
    paragraph_spacing: float = 8
    question_font_size: float = 11
    answer_line_spacing: float = 16
    organizer_box_height: float = 70
    organizer_gap: float = 12

    # Answer key
    answer_key_top: float = 100
    answer_key_row_height: float = 20
    answer_key_columns: int = 3
    answer_key_font_size: float = 11

    line_height_factor: float = 1.2
    product_name: str = PRODUCT_NAME

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if not (0 < self.top_margin < self.break_threshold):
            raise ValueError("top_margin must sit above the break threshold")
        if self.answer_key_columns < 1:
            raise ValueError(f"answer_key_columns must be positive: {self.answer_key_columns}")

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - 2 * self.margin

    @property
    def left(self) -> float:
        return self.margin

    @property
    def right(self) -> float:
        return self.page_width - self.margin

    @property
    def break_threshold(self) -> float:
        """Cursor beyond this forces a page break (page height − 96)."""
        return self.page_height - self.bottom_reserve

    @property
    def content_bottom(self) -> float:
        """Lowest point a block may reach without touching the footer band."""
        return self.page_height - self.margin

    @property
    def footer_top(self) -> float:
        return self.page_height - self.footer_offset
