"""
Tests for the build pipeline, rendering real PDFs with ReportLab.

Uses pypdf to inspect the generated documents.
"""

import io

import pytest
from pypdf import PdfReader

from dynamicsheets.builder import BuildResult, RenderingError, build_worksheet
from dynamicsheets.core.models.request import WorksheetRequest


def _pages_text(result: BuildResult):
    reader = PdfReader(io.BytesIO(result.pdf_bytes))
    return [page.extract_text() or "" for page in reader.pages]


class TestBuildWorksheet:
    """Tests for build_worksheet()."""

    def test_build_when_quiz_then_questions_and_answer_key(self):
        """Four short answers followed by an answer key with four entries."""
        request = WorksheetRequest.from_payload({
            "title": "Quiz",
            "numQuestions": 4,
            "questionType": "short_answer",
            "includeAnswerKey": "yes",
        })

        result = build_worksheet(request)

        assert result.pdf_bytes.startswith(b"%PDF")
        assert result.filename == "Quiz.pdf"
        assert result.page_count == 2
        assert [a.label for a in result.answers] == [f"{i}. (varies)" for i in range(1, 5)]

        pages = _pages_text(result)
        assert len(pages) == 2
        assert "Quiz" in pages[0]
        assert "QUESTIONS" in pages[0]
        assert "Answer Key" in pages[1]
        assert pages[1].count("(varies)") == 4

    def test_build_when_rendered_then_every_page_has_its_footer(self):
        request = WorksheetRequest(title="Long", num_questions=30, standards=("4.NF.A.1",))

        result = build_worksheet(request)

        pages = _pages_text(result)
        assert len(pages) == result.page_count
        assert result.page_count > 2
        for number, text in enumerate(pages, start=1):
            assert f"Page {number}" in text
            assert "4.NF.A.1" in text

    def test_build_when_letter_then_page_size_matches(self):
        result = build_worksheet(WorksheetRequest(num_questions=1))
        box = PdfReader(io.BytesIO(result.pdf_bytes)).pages[0].mediabox
        assert (float(box.width), float(box.height)) == pytest.approx((612, 792))

    def test_build_when_seed_then_same_answers(self):
        request = WorksheetRequest(num_questions=8, question_type="multiple_choice", seed=3)
        first = build_worksheet(request)
        second = build_worksheet(request)
        assert first.answers == second.answers

    def test_build_when_choice_policy_then_used(self):
        result = build_worksheet(
            WorksheetRequest(num_questions=2, question_type="multiple_choice"),
            choice_policy=lambda labels: "D",
        )
        assert [a.answer for a in result.answers] == ["D", "D"]

    def test_build_when_recording_sink_then_page_count_from_sink(self, recording_sink):
        result = build_worksheet(
            WorksheetRequest(num_questions=2, include_answer_key=False),
            sink_factory=lambda config, request: recording_sink,
        )
        assert result.page_count == 1
        assert recording_sink.finished
        assert result.metadata["include_answer_key"] is False

    def test_build_when_sink_fails_then_rendering_error(self):
        def broken_factory(config, request):
            raise OSError("disk full")

        with pytest.raises(RenderingError, match="Failed to generate PDF") as exc_info:
            build_worksheet(WorksheetRequest(), sink_factory=broken_factory)
        assert isinstance(exc_info.value.__cause__, OSError)
