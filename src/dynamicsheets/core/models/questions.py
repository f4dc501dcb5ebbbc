"""
Module: questions

Purpose:
    Provides the Question dataclass - the descriptor passed from the
    question generator to the layout engine - and the AnswerRecord built
    while questions are rendered. Both are immutable.

Key Classes:
    - QuestionKind: The four concrete question kinds
    - Question: One generated worksheet item
    - AnswerRecord: (number, answer) pair consumed by the answer key

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.generator: Creates Questions
    - builder.layout.engine: Renders Questions, emits AnswerRecords
    - builder.output.answer_key: Lays out AnswerRecords
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


CHOICE_LABELS: tuple[str, ...] = ("A", "B", "C", "D")

# Recorded answer for open-ended kinds
VARIES = "(varies)"


class QuestionKind(str, Enum):
    """Concrete question kinds, in the order used by the mixed cycle."""

    MULTIPLE_CHOICE = "multiple_choice"
    SHORT_ANSWER = "short_answer"
    FILL_BLANK = "fill_blank"
    GRAPHIC_ORGANIZER = "graphic_organizer"


# Fixed cycle for "mixed" worksheets: item i gets MIXED_CYCLE[i % 4]
MIXED_CYCLE: tuple[QuestionKind, ...] = tuple(QuestionKind)


@dataclass(frozen=True)
class Question:
    """
    A single generated worksheet item (immutable).

    Attributes:
        kind: Concrete question kind
        number: 1-based position on the worksheet
        prompt: Instruction line, e.g. "Q3. Respond briefly:"
        stem: Content line drawn under the prompt (may be empty)
        choices: Four labelled choice strings (multiple choice only)
        correct: Label of the correct choice (multiple choice only)

    Invariants:
        - multiple choice carries exactly 4 choices and a correct label
          drawn from CHOICE_LABELS
        - other kinds carry no choices and no correct label

    Example:
        >>> q = Question(QuestionKind.SHORT_ANSWER, 1, "Q1. Respond briefly:", "Fractions")
        >>> q.answer
        '(varies)'
    """

    kind: QuestionKind
    number: int
    prompt: str
    stem: str = ""
    choices: tuple[str, ...] = ()
    correct: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if self.number < 1:
            raise ValueError(f"number must be positive: {self.number}")
        if self.kind is QuestionKind.MULTIPLE_CHOICE:
            if len(self.choices) != len(CHOICE_LABELS):
                raise ValueError(
                    f"multiple choice needs {len(CHOICE_LABELS)} choices, got {len(self.choices)}"
                )
            if self.correct not in CHOICE_LABELS:
                raise ValueError(f"correct must be one of {CHOICE_LABELS}: {self.correct!r}")
        elif self.choices or self.correct is not None:
            raise ValueError(f"{self.kind.value} questions take no choices")

    @property
    def answer(self) -> str:
        """Answer recorded in the answer key."""
        if self.kind is QuestionKind.MULTIPLE_CHOICE:
            return self.correct  # type: ignore[return-value]
        return VARIES

    def to_dict(self) -> dict:
        data = {
            "type": self.kind.value,
            "number": self.number,
            "prompt": self.prompt,
            "stem": self.stem,
        }
        if self.kind is QuestionKind.MULTIPLE_CHOICE:
            data["choices"] = list(self.choices)
            data["correct"] = self.correct
        return data


@dataclass(frozen=True)
class AnswerRecord:
    """Answer key entry: question number and recorded answer."""

    number: int
    answer: str

    @classmethod
    def for_question(cls, question: Question) -> "AnswerRecord":
        return cls(number=question.number, answer=question.answer)

    @property
    def label(self) -> str:
        """Text drawn in the answer key grid, e.g. "3. B"."""
        return f"{self.number}. {self.answer}"
