"""
Module: builder.output.renderer

Purpose:
    Render a complete worksheet onto a DocumentSink: title, optional
    directions, the questions section and the optional answer key.

Key Functions:
    - render_worksheet(): Draw every section and return the answers

Dependencies:
    - builder.layout.engine: LayoutEngine
    - builder.output.answer_key: render_answer_key

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from dynamicsheets.builder.config import LayoutConfig
from dynamicsheets.builder.layout.engine import LayoutEngine
from dynamicsheets.builder.layout.sink import DocumentSink, TextMeasurer
from dynamicsheets.builder.output.answer_key import render_answer_key
from dynamicsheets.core.models.questions import AnswerRecord, Question
from dynamicsheets.core.models.request import WorksheetRequest

logger = logging.getLogger(__name__)

DIRECTIONS_HEADER = "Directions"
QUESTIONS_HEADER = "Questions"


def render_worksheet(
    request: WorksheetRequest,
    questions: Sequence[Question],
    sink: DocumentSink,
    config: Optional[LayoutConfig] = None,
    *,
    measurer: Optional[TextMeasurer] = None,
) -> List[AnswerRecord]:
    """
    Render the worksheet sections onto the sink.

    Errors from measurement or drawing propagate; the sink's content is
    then unusable.

    Args:
        request: Parsed generation request
        questions: Generated questions in order
        sink: Page device to draw on
        config: Layout configuration (default LayoutConfig())
        measurer: Text measurer (default: the sink's)

    Returns:
        Answer records in question order
    """
    engine = LayoutEngine(sink, config, measurer=measurer, standards=request.standards)

    engine.render_title(request.title)
    if request.directions:
        engine.render_section_header(DIRECTIONS_HEADER)
        engine.render_flowing_paragraph(request.directions)

    engine.render_section_header(QUESTIONS_HEADER)
    answers = engine.render_questions(questions)
    logger.debug(f"Questions section ends on page {engine.page_number}")

    if request.include_answer_key:
        render_answer_key(engine, answers)

    return answers
