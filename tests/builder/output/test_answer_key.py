"""
Unit tests for the answer key page.
"""

import logging

import pytest

from dynamicsheets.builder.config import LayoutConfig
from dynamicsheets.builder.layout.engine import LayoutEngine
from dynamicsheets.builder.output.answer_key import answer_key_cell, render_answer_key
from dynamicsheets.core.models.questions import AnswerRecord


@pytest.fixture
def engine(recording_sink, fixed_measurer):
    return LayoutEngine(recording_sink, LayoutConfig(), measurer=fixed_measurer)


class TestAnswerKeyCell:
    """Tests for answer_key_cell() grid placement."""

    def test_cell_when_index_6_then_column_0_row_2(self):
        assert answer_key_cell(6, LayoutConfig()) == (54, 140)

    @pytest.mark.parametrize("index, expected", [
        (0, (54, 100)),
        (1, (54 + 168, 100)),
        (2, (54 + 336, 100)),
        (3, (54, 120)),
    ])
    def test_cell_when_first_row_then_three_columns(self, index, expected):
        assert answer_key_cell(index, LayoutConfig()) == expected


class TestRenderAnswerKey:
    """Tests for render_answer_key()."""

    def test_render_when_four_records_then_grid_on_new_page(self, engine, recording_sink):
        answers = [AnswerRecord(i, "(varies)") for i in range(1, 5)]

        cells = render_answer_key(engine, answers)

        assert engine.page_number == 2
        texts = recording_sink.texts(2)
        assert texts[0][1:4] == ("Answer Key", 54, 60)
        entries = [(t[1], t[2], t[3]) for t in texts if t[1][:1].isdigit()]
        assert entries == [
            ("1. (varies)", 54, 100),
            ("2. (varies)", 222, 100),
            ("3. (varies)", 390, 100),
            ("4. (varies)", 54, 120),
        ]
        assert cells == [(54, 100), (222, 100), (390, 100), (54, 120)]

    def test_render_when_done_then_both_pages_footed_once(self, engine, recording_sink):
        render_answer_key(engine, [AnswerRecord(1, "A")])
        assert recording_sink.footer_pages() == [1, 2]

    def test_render_when_empty_then_title_only(self, engine, recording_sink):
        assert render_answer_key(engine, []) == []
        assert "Answer Key" in recording_sink.text_values(2)

    def test_render_when_grid_overflows_then_warns(self, engine, caplog):
        answers = [AnswerRecord(i, "A") for i in range(1, 100)]
        with caplog.at_level(logging.WARNING):
            render_answer_key(engine, answers)
        assert "runs past the page" in caplog.text
