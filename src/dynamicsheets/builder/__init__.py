"""
Module: builder

Purpose:
    Worksheet building pipeline: generate questions, lay them out onto
    pages with footers, append the answer key and return PDF bytes.

Key Functions:
    - generate_questions(): Question sequence for a request
    - build_worksheet(): Main entry point for worksheet generation

Key Classes:
    - LayoutConfig: Page geometry and block spacing
    - BuildResult / BuildError / RenderingError

Dependencies:
    - reportlab: PDF generation
    - dynamicsheets.core.models: Request and question models

Used By:
    - dynamicsheets.web.app: Generation endpoint
    - dynamicsheets.cli: generate command
"""

from .config import LayoutConfig
from .generator import generate_questions, seeded_policy
from .controller import build_worksheet, BuildResult, BuildError, RenderingError

__all__ = [
    # Config
    "LayoutConfig",
    # Generation
    "generate_questions",
    "seeded_policy",
    # Controller
    "build_worksheet",
    "BuildResult",
    "BuildError",
    "RenderingError",
]
