"""
Module: builder.generator

Purpose:
    Produce the ordered question descriptors for one worksheet.
    Pure function of (count, type selector, topic) apart from the
    multiple-choice answer policy, which is injectable.

Key Functions:
    - generate_questions(): Build the question sequence
    - seeded_policy(): Reproducible choice policy from a seed

Algorithm:
    - "mixed": item i gets MIXED_CYCLE[i % 4]
    - concrete kind: every item is that kind
    - unknown selector: every item degrades to short answer

Dependencies:
    - random (std)
    - core.models.questions: Question, QuestionKind

Used By:
    - builder.controller: Main build pipeline
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Sequence

from dynamicsheets.core.models.questions import (
    CHOICE_LABELS,
    MIXED_CYCLE,
    Question,
    QuestionKind,
)

logger = logging.getLogger(__name__)

MIXED = "mixed"
DEFAULT_BASE_TEXT = "Practice Item"

ChoicePolicy = Callable[[Sequence[str]], str]

_PROMPTS = {
    QuestionKind.MULTIPLE_CHOICE: "Choose the best answer:",
    QuestionKind.SHORT_ANSWER: "Respond briefly:",
    QuestionKind.FILL_BLANK: "Complete the sentence:",
    QuestionKind.GRAPHIC_ORGANIZER: "Complete the organizer:",
}
_FALLBACK_PROMPT = "Respond:"


def seeded_policy(seed: int) -> ChoicePolicy:
    """Return a choice policy backed by random.Random(seed)."""
    return random.Random(seed).choice


def generate_questions(
    num_questions: int,
    question_type: str,
    topic: str = "",
    *,
    choice_policy: Optional[ChoicePolicy] = None,
) -> List[Question]:
    """
    Generate the ordered question sequence for a worksheet.

    Args:
        num_questions: Number of questions (0 yields an empty list)
        question_type: "mixed" or a QuestionKind value
        topic: Topic used as the stem; "Practice Item" when blank
        choice_policy: Picks the correct label for multiple choice
            (default: random.choice)

    Returns:
        List of exactly num_questions Questions, numbered from 1

    Example:
        >>> qs = generate_questions(5, "mixed", "Fractions")
        >>> [q.kind.value for q in qs][:2]
        ['multiple_choice', 'short_answer']
    """
    policy = choice_policy or random.choice
    base_text = topic.strip() if topic and topic.strip() else DEFAULT_BASE_TEXT

    questions = []
    for i in range(max(0, num_questions)):
        if question_type == MIXED:
            questions.append(_make_question(MIXED_CYCLE[i % len(MIXED_CYCLE)], base_text, i + 1, policy))
        else:
            questions.append(_make_question_for(question_type, base_text, i + 1, policy))

    logger.debug(f"Generated {len(questions)} questions (type={question_type!r})")
    return questions


def _make_question_for(question_type: str, base_text: str, number: int, policy: ChoicePolicy) -> Question:
    try:
        kind = QuestionKind(question_type)
    except ValueError:
        # Unknown selector degrades to short answer with a generic prompt
        return Question(
            kind=QuestionKind.SHORT_ANSWER,
            number=number,
            prompt=f"Q{number}. {_FALLBACK_PROMPT}",
            stem=base_text,
        )
    return _make_question(kind, base_text, number, policy)


def _make_question(kind: QuestionKind, base_text: str, number: int, policy: ChoicePolicy) -> Question:
    prompt = f"Q{number}. {_PROMPTS[kind]}"
    if kind is not QuestionKind.MULTIPLE_CHOICE:
        return Question(kind=kind, number=number, prompt=prompt, stem=base_text)

    correct = policy(CHOICE_LABELS)
    if correct not in CHOICE_LABELS:
        raise ValueError(f"choice policy returned unknown label: {correct!r}")
    choices = tuple(
        f"{label}. {base_text} — option {idx + 1}" for idx, label in enumerate(CHOICE_LABELS)
    )
    return Question(
        kind=kind,
        number=number,
        prompt=prompt,
        stem=base_text,
        choices=choices,
        correct=correct,
    )
