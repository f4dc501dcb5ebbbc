"""
DynamicSheets Core Package

Shared data models: worksheet requests, generated questions, answer key
records and curriculum standards packs.
"""

from .models import (
    AnswerRecord,
    Framework,
    InvalidRequestError,
    Question,
    QuestionKind,
    Standard,
    StandardsPack,
    WorksheetRequest,
)

__all__ = [
    "AnswerRecord",
    "Framework",
    "InvalidRequestError",
    "Question",
    "QuestionKind",
    "Standard",
    "StandardsPack",
    "WorksheetRequest",
]
