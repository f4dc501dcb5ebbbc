"""
Module: builder.output.answer_key

Purpose:
    Lay out the answer key page: a title and the recorded answers in a
    fixed grid (column = index mod 3, row = index div 3).

    The grid is not paginated; worksheets are bounded to 30 questions,
    which fits on one page. Overflow is logged, not split.

Key Functions:
    - answer_key_cell(): Grid position of one record
    - render_answer_key(): Draw the answer key page

Dependencies:
    - builder.layout.engine: LayoutEngine (page control and footer)
    - core.models.questions: AnswerRecord
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from dynamicsheets.builder.config import LayoutConfig
from dynamicsheets.builder.layout.engine import LayoutEngine
from dynamicsheets.core.models.questions import AnswerRecord

logger = logging.getLogger(__name__)

ANSWER_KEY_TITLE = "Answer Key"


def answer_key_cell(index: int, config: LayoutConfig) -> Tuple[float, float]:
    """
    Top-left corner of the grid cell for a 0-based record index.

    Example:
        >>> answer_key_cell(6, LayoutConfig())  # column 0, row 2
        (54.0, 140)
    """
    columns = config.answer_key_columns
    col, row = index % columns, index // columns
    col_width = config.content_width / columns
    return (
        config.left + col * col_width,
        config.answer_key_top + row * config.answer_key_row_height,
    )


def render_answer_key(engine: LayoutEngine, answers: Sequence[AnswerRecord]) -> List[Tuple[float, float]]:
    """
    Start a new page and draw the answer key grid on it.

    The footer of the answer key page is stamped before returning.

    Args:
        engine: Layout engine of the document being rendered
        answers: Records in question order

    Returns:
        Cell positions used, one per record
    """
    cfg = engine.config
    sink = engine.sink
    engine.new_page()

    sink.draw_text(ANSWER_KEY_TITLE, cfg.left, cfg.title_top, font_size=cfg.title_font_size)

    col_width = cfg.content_width / cfg.answer_key_columns
    cells = []
    for i, record in enumerate(answers):
        x, y = answer_key_cell(i, cfg)
        sink.draw_text(record.label, x, y, font_size=cfg.answer_key_font_size, width=col_width)
        cells.append((x, y))

    if cells and cells[-1][1] + cfg.answer_key_row_height > cfg.break_threshold:
        logger.warning(
            f"Answer key with {len(answers)} entries runs past the page "
            f"({cells[-1][1] + cfg.answer_key_row_height:.0f}pt > {cfg.break_threshold:.0f}pt)"
        )

    engine.finish_page()
    return cells
