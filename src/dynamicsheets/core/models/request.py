"""
Module: request

Purpose:
    WorksheetRequest - the immutable input to one generation run - and its
    parsing from a loosely typed payload (JSON body or CLI arguments).

Key Classes:
    - WorksheetRequest: Parsed generation request
    - InvalidRequestError: Raised before any rendering begins

Key Functions:
    - safe_filename(): Derive the download filename from a title

Dependencies:
    - dataclasses (std)
    - re (std)

Used By:
    - builder.controller: Input to build_worksheet()
    - web.app: Parses POST bodies
    - cli: Builds requests from arguments
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

DEFAULT_TITLE = "Worksheet"
DEFAULT_NUM_QUESTIONS = 10
DEFAULT_QUESTION_TYPE = "mixed"
DEFAULT_MAX_QUESTIONS = 30

_TRUTHY = {"yes", "true", "1", "on"}
_UNSAFE_FILENAME_CHAR = re.compile(r"[^A-Za-z0-9\-_]")


class InvalidRequestError(ValueError):
    """Raised when a generation request cannot be accepted."""


def safe_filename(title: str) -> str:
    """
    Derive the suggested download filename from a worksheet title.

    Each character outside [A-Za-z0-9-_] is replaced by an underscore.

    Example:
        >>> safe_filename("Fractions: Grade 4!")
        'Fractions__Grade_4_.pdf'
    """
    return _UNSAFE_FILENAME_CHAR.sub("_", str(title)) + ".pdf"


def parse_flag(value: Any) -> bool:
    """Interpret a boolean-like flag ("yes", "true", "1", "on" or True)."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class WorksheetRequest:
    """
    Generation request (immutable).

    Attributes:
        title: Worksheet title, also used for the filename
        directions: Optional directions paragraph
        question_type: "mixed" or a concrete kind; unknown values are kept
            and degrade to short answer at generation time
        num_questions: Number of questions to generate
        include_answer_key: Whether to append the answer key page
        standards: Aligned standard codes shown in the footer
        topic: Optional topic used as question stem
        seed: Optional seed making multiple-choice answers reproducible
    """

    title: str = DEFAULT_TITLE
    directions: str = ""
    question_type: str = DEFAULT_QUESTION_TYPE
    num_questions: int = DEFAULT_NUM_QUESTIONS
    include_answer_key: bool = True
    standards: tuple[str, ...] = ()
    topic: str = ""
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.num_questions < 0:
            raise InvalidRequestError(f"numQuestions must not be negative: {self.num_questions}")

    @property
    def filename(self) -> str:
        return safe_filename(self.title)

    @classmethod
    def from_payload(
        cls,
        payload: Optional[Mapping[str, Any]],
        *,
        max_questions: int = DEFAULT_MAX_QUESTIONS,
    ) -> "WorksheetRequest":
        """
        Parse a request payload using the camelCase wire names.

        Args:
            payload: Mapping such as a decoded JSON body (None = all defaults)
            max_questions: Upper bound on numQuestions

        Returns:
            WorksheetRequest with defaults applied

        Raises:
            InvalidRequestError: If a field has an unusable value
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise InvalidRequestError("Request body must be a JSON object")

        title = payload.get("title")
        if title is None or str(title) == "":
            title = DEFAULT_TITLE

        num_questions = _parse_count(payload.get("numQuestions", DEFAULT_NUM_QUESTIONS))
        if num_questions > max_questions:
            raise InvalidRequestError(
                f"numQuestions must be at most {max_questions}: {num_questions}"
            )

        seed = payload.get("seed")
        if seed is not None:
            seed = _parse_count(seed, field="seed", allow_negative=True)

        return cls(
            title=str(title),
            directions=str(payload.get("directions") or ""),
            question_type=str(payload.get("questionType") or DEFAULT_QUESTION_TYPE),
            num_questions=num_questions,
            include_answer_key=parse_flag(payload.get("includeAnswerKey", "yes")),
            standards=_parse_standards(payload.get("standards")),
            topic=str(payload.get("topic") or ""),
            seed=seed,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "directions": self.directions,
            "questionType": self.question_type,
            "numQuestions": self.num_questions,
            "includeAnswerKey": "yes" if self.include_answer_key else "no",
            "standards": list(self.standards),
            "topic": self.topic,
        }
        if self.seed is not None:
            payload["seed"] = self.seed
        return payload


def _parse_count(value: Any, *, field: str = "numQuestions", allow_negative: bool = False) -> int:
    if isinstance(value, bool):
        raise InvalidRequestError(f"{field} must be an integer: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidRequestError(f"{field} must be an integer: {value!r}")
        value = int(value)
    try:
        count = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise InvalidRequestError(f"{field} must be an integer: {value!r}") from e
    if count < 0 and not allow_negative:
        raise InvalidRequestError(f"{field} must not be negative: {count}")
    return count


def _parse_standards(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, (list, tuple)):
        raise InvalidRequestError("standards must be a list of codes")
    return tuple(str(code) for code in value if str(code).strip())
