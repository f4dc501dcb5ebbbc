"""
Module: builder.layout.engine

Purpose:
    Stream worksheet blocks (title, section headers, paragraphs,
    questions) onto pages, measuring text as it goes and inserting page
    breaks so that no question is split and every page gets its footer.

Key Classes:
    - LayoutEngine: Cursor-driven renderer bound to one DocumentSink

Algorithm (question loop):
    1. Measure the question with a dry run of its layout; if it would run
       past the content bottom and the cursor is not at the top margin,
       finish the page and start a new one
    2. Draw the question
    3. If the cursor is now beyond page height − 96 and another question
       follows, finish the page (footer) and start a new one at y = 72
    4. After the loop, stamp the footer of the section's last page

Dependencies:
    - builder.config: LayoutConfig
    - builder.layout.cursor: LayoutCursor
    - builder.layout.footer: FooterHook
    - builder.layout.sink: DocumentSink, TextMeasurer
    - core.models.questions: Question, AnswerRecord

Used By:
    - builder.output.renderer: Worksheet rendering
    - builder.output.answer_key: Answer key page
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from dynamicsheets.builder.config import LayoutConfig
from dynamicsheets.builder.layout.cursor import LayoutCursor
from dynamicsheets.builder.layout.footer import FooterHook
from dynamicsheets.builder.layout.sink import DocumentSink, ReportLabMeasurer, TextMeasurer
from dynamicsheets.core.models.questions import AnswerRecord, Question, QuestionKind

logger = logging.getLogger(__name__)

# Blank answer lines drawn under each kind
ANSWER_LINES = {
    QuestionKind.MULTIPLE_CHOICE: 1,
    QuestionKind.SHORT_ANSWER: 4,
    QuestionKind.FILL_BLANK: 3,
}

# Spacing inside a question block
PROMPT_SPACING = 4
STEM_INDENT = 8
STEM_SPACING = 6
CHOICE_INDENT = 12
CHOICE_SPACING = 3
LINES_TRAILING = 4
ORGANIZER_PADDING = 6
SEPARATOR_SPACING = 8


class LayoutEngine:
    """
    Page layout engine for one document.

    Owns the LayoutCursor and the footer hook; subscribes the hook to
    the sink's page transitions on construction.

    Example:
        >>> engine = LayoutEngine(sink, LayoutConfig(), standards=["4.NF.A.1"])
        >>> engine.render_title("Fractions")
        >>> engine.render_section_header("Questions")
        >>> answers = engine.render_questions(questions)
    """

    def __init__(
        self,
        sink: DocumentSink,
        config: Optional[LayoutConfig] = None,
        *,
        measurer: Optional[TextMeasurer] = None,
        standards: Sequence[str] = (),
    ) -> None:
        self.sink = sink
        self.config = config or LayoutConfig()
        self.measurer = measurer or getattr(sink, "measurer", None) or ReportLabMeasurer(
            line_height_factor=self.config.line_height_factor
        )
        self.cursor = LayoutCursor(
            y=self.config.content_top,
            page_width=sink.page_width,
            page_height=sink.page_height,
            margin=self.config.margin,
            top_margin=self.config.top_margin,
        )
        self.footer = FooterHook(sink, self.config, standards)
        sink.add_page_listener(self.footer.on_page_added)

    # ─────────────────────────────────────────────────────────────────────────
    # Page control
    # ─────────────────────────────────────────────────────────────────────────

    def new_page(self) -> float:
        """Start a new page; the outgoing page is stamped by the transition event."""
        self.sink.add_page()
        return self.cursor.reset()

    def finish_page(self) -> bool:
        """Stamp the footer of the current page (no-op if already stamped)."""
        return self.footer()

    def break_page(self) -> float:
        self.finish_page()
        return self.new_page()

    @property
    def page_number(self) -> int:
        return self.sink.page_number

    # ─────────────────────────────────────────────────────────────────────────
    # Blocks
    # ─────────────────────────────────────────────────────────────────────────

    def render_title(self, title: str) -> None:
        """Draw the title at the fixed top offset and place the cursor below it."""
        cfg = self.config
        self.sink.draw_text(
            title, cfg.left, cfg.title_top,
            font_size=cfg.title_font_size, width=cfg.content_width,
        )
        self.cursor.move_to(cfg.content_top)

    def render_section_header(self, label: str, y: Optional[float] = None) -> float:
        """
        Draw an upper-cased section label with a rule beneath it.

        A header that would start below the break threshold moves to the
        top of a new page instead of being orphaned at the bottom.
        """
        cfg = self.config
        y = self._resolve(y)
        if y > cfg.break_threshold:
            logger.debug(f"Header {label!r} would be orphaned at y={y:.1f}, breaking page")
            y = self.new_page()

        self.sink.draw_text(label.upper(), cfg.left, y, font_size=cfg.header_font_size)
        rule_y = y + cfg.header_rule_offset
        self.sink.draw_line(cfg.left, rule_y, cfg.right, rule_y)
        return self.cursor.move_to(y + cfg.header_height)

    def render_paragraph(self, text: str, y: Optional[float] = None, font_size: Optional[float] = None) -> float:
        """Draw wrapped text at the content width; does not break pages."""
        cfg = self.config
        y = self._resolve(y)
        size = font_size or cfg.paragraph_font_size
        height = self.measurer.height_of(text, cfg.content_width, size)
        self.sink.draw_text(text, cfg.left, y, font_size=size, width=cfg.content_width)
        return self.cursor.move_to(y + height + cfg.paragraph_spacing)

    def render_flowing_paragraph(self, text: str, font_size: Optional[float] = None) -> float:
        """
        Draw a paragraph that may span pages.

        Wrapped lines are placed in chunks that fit above the content
        bottom; each full page is finished before the next begins.
        """
        cfg = self.config
        size = font_size or cfg.paragraph_font_size
        y = self.cursor.y
        if y + self.measurer.height_of(text, cfg.content_width, size) <= cfg.content_bottom:
            return self.render_paragraph(text, y, size)

        lines = self.measurer.wrap(text, cfg.content_width, size)
        leading = self.measurer.line_height(size)
        while lines:
            fit = math.floor((cfg.content_bottom - y) / leading)
            if fit <= 0:
                if y > cfg.top_margin:
                    y = self.break_page()
                    continue
                fit = 1
            chunk, lines = lines[:fit], lines[fit:]
            self.sink.draw_text("\n".join(chunk), cfg.left, y, font_size=size, width=cfg.content_width)
            y += len(chunk) * leading
            if lines:
                y = self.break_page()
        return self.cursor.move_to(y + cfg.paragraph_spacing)

    def measure_question(self, question: Question) -> float:
        """Height the question block occupies, without drawing it."""
        return self._layout_question(question, 0.0, draw=False)

    def render_question(self, index: int, question: Question, y: Optional[float] = None) -> float:
        """
        Draw one question block and return the cursor after it.

        Args:
            index: 1-based position on the worksheet
            question: Question to draw
            y: Top of the block (default: current cursor)
        """
        y = self._resolve(y)
        bottom = y + self._layout_question(question, y, draw=True)
        logger.debug(f"Question {index} ({question.kind.value}) drawn from {y:.1f} to {bottom:.1f}")
        return self.cursor.move_to(bottom)

    def render_questions(self, questions: Sequence[Question]) -> List[AnswerRecord]:
        """
        Draw the question loop with pagination and return the answer records.

        The footer of the last page used is stamped before returning.
        """
        cfg = self.config
        answers: List[AnswerRecord] = []
        for pos, question in enumerate(questions):
            height = self.measure_question(question)
            if not self.cursor.at_top and self.cursor.y + height > cfg.content_bottom:
                logger.debug(f"Question {pos + 1} needs {height:.1f}pt, moving to a new page")
                self.break_page()

            y = self.render_question(pos + 1, question)
            answers.append(AnswerRecord.for_question(question))

            if y > cfg.break_threshold and pos + 1 < len(questions):
                self.break_page()

        self.finish_page()
        return answers

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _resolve(self, y: Optional[float]) -> float:
        return self.cursor.y if y is None else y

    def _text(self, text: str, x: float, y: float, width: float, draw: bool) -> float:
        size = self.config.question_font_size
        if draw:
            self.sink.draw_text(text, x, y, font_size=size, width=width)
        return self.measurer.height_of(text, width, size)

    def _layout_question(self, question: Question, y: float, draw: bool) -> float:
        """Lay out a question from y; returns the block height."""
        cfg = self.config
        left, right, width = cfg.left, cfg.right, cfg.content_width
        top = y

        y += self._text(question.prompt, left, y, width, draw) + PROMPT_SPACING
        if question.stem:
            y += self._text(question.stem, left + STEM_INDENT, y, width - STEM_INDENT, draw) + STEM_SPACING

        if question.kind is QuestionKind.MULTIPLE_CHOICE:
            for choice in question.choices:
                y += self._text(choice, left + CHOICE_INDENT, y, width - CHOICE_INDENT, draw) + CHOICE_SPACING
            y = self._answer_lines(y, ANSWER_LINES[question.kind], draw)
        elif question.kind is QuestionKind.GRAPHIC_ORGANIZER:
            y = self._organizer(y, draw)
        else:
            y = self._answer_lines(y, ANSWER_LINES[question.kind], draw)

        if draw:
            self.sink.draw_line(left, y, right, y)
        y += SEPARATOR_SPACING
        return y - top

    def _answer_lines(self, y: float, count: int, draw: bool) -> float:
        cfg = self.config
        if draw:
            for i in range(count):
                line_y = y + i * cfg.answer_line_spacing
                self.sink.draw_line(cfg.left, line_y, cfg.right, line_y)
        return y + count * cfg.answer_line_spacing + LINES_TRAILING

    def _organizer(self, y: float, draw: bool) -> float:
        """2×2 grid of equal boxes with fixed gaps."""
        cfg = self.config
        gap, box_h = cfg.organizer_gap, cfg.organizer_box_height
        box_w = (cfg.content_width - gap) / 2
        row1 = y + ORGANIZER_PADDING
        row2 = row1 + box_h + gap
        if draw:
            for row_y in (row1, row2):
                self.sink.draw_rect(cfg.left, row_y, box_w, box_h)
                self.sink.draw_rect(cfg.left + box_w + gap, row_y, box_w, box_h)
        return row2 + box_h + ORGANIZER_PADDING
