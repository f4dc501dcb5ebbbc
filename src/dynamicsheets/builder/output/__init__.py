"""
Module: builder.output

Purpose:
    Worksheet rendering: the questions document and its answer key page.

Key Functions:
    - render_worksheet(): Render all sections onto a sink
    - render_answer_key(): Draw the answer key grid page
    - answer_key_cell(): Grid position of an answer record
"""

from .answer_key import answer_key_cell, render_answer_key
from .renderer import render_worksheet

__all__ = [
    "answer_key_cell",
    "render_answer_key",
    "render_worksheet",
]
