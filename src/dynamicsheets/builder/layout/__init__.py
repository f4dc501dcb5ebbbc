"""
Module: builder.layout

Purpose:
    Page layout for worksheets: the cursor-driven layout engine, the
    per-page footer hook and the sink/measurement collaborators it draws
    through.

Key Classes:
    - LayoutEngine: Streams blocks onto pages with page breaks
    - LayoutCursor: Current vertical position on the active page
    - FooterHook: Idempotent per-page footer stamper
    - ReportLabSink / ReportLabMeasurer: ReportLab-backed collaborators

Used By:
    - builder.output: Worksheet and answer key rendering
"""

from .cursor import LayoutCursor
from .engine import LayoutEngine
from .footer import FooterHook, aligned_with_text
from .sink import DocumentSink, ReportLabMeasurer, ReportLabSink, TextMeasurer

__all__ = [
    "LayoutCursor",
    "LayoutEngine",
    "FooterHook",
    "aligned_with_text",
    "DocumentSink",
    "ReportLabMeasurer",
    "ReportLabSink",
    "TextMeasurer",
]
