"""
Core Models Package

Immutable data models shared by the builder, the standards importer and
the HTTP surface. All models are frozen dataclasses.
"""

from .questions import (
    CHOICE_LABELS,
    MIXED_CYCLE,
    VARIES,
    AnswerRecord,
    Question,
    QuestionKind,
)
from .request import InvalidRequestError, WorksheetRequest, safe_filename
from .standards import Framework, Standard, StandardsPack

__all__ = [
    "CHOICE_LABELS",
    "MIXED_CYCLE",
    "VARIES",
    "AnswerRecord",
    "Question",
    "QuestionKind",
    "InvalidRequestError",
    "WorksheetRequest",
    "safe_filename",
    "Framework",
    "Standard",
    "StandardsPack",
]
