"""
Module: web

Purpose:
    Flask HTTP surface for worksheet generation and standards packs.

Key Functions:
    - create_app(): Application factory

Key Classes:
    - AppConfig: Server configuration
"""

from .app import create_app
from .config import AppConfig

__all__ = [
    "create_app",
    "AppConfig",
]
