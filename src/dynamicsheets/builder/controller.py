"""
Module: builder.controller

Purpose:
    Orchestrate one worksheet generation run.
    Request → Generate questions → Layout + render → PDF bytes

Key Functions:
    - build_worksheet(): Main entry point for generating a worksheet

Key Classes:
    - BuildResult: Complete build result
    - BuildError / RenderingError: Exceptions for build failures

Dependencies:
    - builder.generator: Question generation
    - builder.output.renderer: Section rendering
    - builder.layout.sink: ReportLab sink

Used By:
    - web.app: Generation endpoint
    - cli: generate command
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from dynamicsheets.core.models.questions import AnswerRecord, Question
from dynamicsheets.core.models.request import WorksheetRequest

from .config import LayoutConfig
from .generator import ChoicePolicy, generate_questions, seeded_policy
from .layout.sink import DocumentSink, ReportLabMeasurer, ReportLabSink
from .output.renderer import render_worksheet

logger = logging.getLogger(__name__)

SinkFactory = Callable[[LayoutConfig, WorksheetRequest], DocumentSink]


class BuildError(Exception):
    """Error during the build pipeline."""
    pass


class RenderingError(BuildError):
    """Rendering failed; any partial output must be discarded."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        pdf_bytes: The rendered document
        filename: Suggested download filename
        page_count: Number of pages in the document
        questions: Generated questions
        answers: Answer key records
        metadata: Build metadata dictionary

    Example:
        >>> result = build_worksheet(WorksheetRequest(title="Quiz", num_questions=4))
        >>> result.filename
        'Quiz.pdf'
    """
    pdf_bytes: bytes
    filename: str
    page_count: int
    questions: tuple[Question, ...]
    answers: tuple[AnswerRecord, ...]
    metadata: dict = field(default_factory=dict)


def default_sink(config: LayoutConfig, request: WorksheetRequest) -> DocumentSink:
    return ReportLabSink(
        config.page_width,
        config.page_height,
        measurer=ReportLabMeasurer(line_height_factor=config.line_height_factor),
        title=request.title,
    )


def build_worksheet(
    request: WorksheetRequest,
    *,
    config: Optional[LayoutConfig] = None,
    choice_policy: Optional[ChoicePolicy] = None,
    sink_factory: Optional[SinkFactory] = None,
) -> BuildResult:
    """
    Build a worksheet document from start to finish.

    Pipeline:
    1. Generate questions (seeded when the request carries a seed)
    2. Render title, directions, questions and answer key
    3. Close the document

    Args:
        request: Parsed generation request
        config: Layout configuration (default LayoutConfig())
        choice_policy: Multiple-choice answer policy override
        sink_factory: Creates the DocumentSink (default: ReportLab in memory)

    Returns:
        BuildResult with the PDF bytes and metadata

    Raises:
        RenderingError: If any step fails; nothing usable is returned
    """
    config = config or LayoutConfig()
    if choice_policy is None and request.seed is not None:
        choice_policy = seeded_policy(request.seed)
    factory = sink_factory or default_sink
    start_time = time.perf_counter()

    logger.info(
        f"Building worksheet {request.title!r}: {request.num_questions} "
        f"{request.question_type} questions"
    )

    try:
        questions = generate_questions(
            request.num_questions,
            request.question_type,
            request.topic,
            choice_policy=choice_policy,
        )
        sink = factory(config, request)
        answers = render_worksheet(request, questions, sink, config)
        page_count = sink.page_number
        pdf_bytes = sink.finish()
    except Exception as e:
        logger.error(f"Rendering failed for {request.title!r}: {e}")
        raise RenderingError(f"Failed to generate PDF: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Rendered {page_count} pages ({len(pdf_bytes)} bytes) in {elapsed:.2f}s")

    return BuildResult(
        pdf_bytes=pdf_bytes,
        filename=request.filename,
        page_count=page_count,
        questions=tuple(questions),
        answers=tuple(answers),
        metadata={
            "title": request.title,
            "question_type": request.question_type,
            "num_questions": request.num_questions,
            "include_answer_key": request.include_answer_key,
            "standards": list(request.standards),
            "elapsed_seconds": round(elapsed, 3),
        },
    )
