"""
Module: web.config

Purpose:
    Server configuration dataclass. Immutable with validation on
    construction; `from_env()` reads DYNAMICSHEETS_* variables.

Key Classes:
    - AppConfig: Settings for the Flask app and the serve command
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dynamicsheets.core.models.request import DEFAULT_MAX_QUESTIONS

ENV_PREFIX = "DYNAMICSHEETS_"


def _env_flag(value: Optional[str]) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    """
    Configuration for the HTTP service (immutable).

    Attributes:
        max_questions: Upper bound on numQuestions per request
        max_content_length: Largest accepted request body in bytes
        host: Bind address for `serve`
        port: Bind port for `serve`
        debug: Flask debug mode
        load_samples: Register the bundled sample packs at startup
    """

    max_questions: int = DEFAULT_MAX_QUESTIONS
    max_content_length: int = 2 * 1024 * 1024  # 2MB
    host: str = "127.0.0.1"
    port: int = 5000
    debug: bool = False
    load_samples: bool = False

    def __post_init__(self) -> None:
        if self.max_questions < 1:
            raise ValueError(f"max_questions must be positive: {self.max_questions}")
        if self.max_content_length <= 0:
            raise ValueError(f"max_content_length must be positive: {self.max_content_length}")
        if not (0 < self.port < 65536):
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            max_questions=int(env.get(ENV_PREFIX + "MAX_QUESTIONS", defaults.max_questions)),
            max_content_length=int(env.get(ENV_PREFIX + "MAX_CONTENT_LENGTH", defaults.max_content_length)),
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=int(env.get(ENV_PREFIX + "PORT", defaults.port)),
            debug=_env_flag(env.get(ENV_PREFIX + "DEBUG", defaults.debug)),
            load_samples=_env_flag(env.get(ENV_PREFIX + "LOAD_SAMPLES", defaults.load_samples)),
        )
