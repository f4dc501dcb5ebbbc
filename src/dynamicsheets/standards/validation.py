"""Standards pack validation.

Minimal shape checks for imported pack JSON before it reaches the
registry: the pack must be an object with a non-blank ``id``; the
``frameworks`` and ``standards`` arrays, when present, must hold
objects. Everything else is optional and defaults to empty values.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from dynamicsheets.core.models.standards import StandardsPack

logger = logging.getLogger(__name__)


class MalformedPackError(ValueError):
    """Raised when pack data cannot be imported."""


LIST_FIELDS_FRAMEWORK = ("subjects", "grade_bands")
LIST_FIELDS_STANDARD = ("grades", "tags")


def _check_list_fields(data: dict, fields: tuple, where: str) -> None:
    """Multi-value fields must be a list of strings or a single string."""
    for name in fields:
        value = data.get(name)
        if value is None or isinstance(value, str):
            continue
        if not isinstance(value, list) or not all(isinstance(v, (str, int, float)) for v in value):
            raise MalformedPackError(f"{where}: {name} must be a list of strings")


def validate_pack(data: Any) -> StandardsPack:
    """Validate raw pack data and return the typed pack.

    Args:
        data: Decoded JSON value.

    Returns:
        StandardsPack built from the data.

    Raises:
        MalformedPackError: If validation fails.
    """
    if not isinstance(data, dict):
        raise MalformedPackError("Pack must be a JSON object")

    pack_id = data.get("id")
    if pack_id is None or not str(pack_id).strip():
        raise MalformedPackError("Pack missing 'id'")

    frameworks = data.get("frameworks", [])
    if frameworks is None:
        frameworks = []
    if not isinstance(frameworks, list):
        raise MalformedPackError(f"Pack '{pack_id}': frameworks must be a list")

    for i, fw in enumerate(frameworks):
        if not isinstance(fw, dict):
            raise MalformedPackError(f"Pack '{pack_id}': framework {i} must be an object")
        _check_list_fields(fw, LIST_FIELDS_FRAMEWORK, f"Pack '{pack_id}': framework '{fw.get('id', i)}'")
        standards = fw.get("standards", [])
        if standards is not None and not isinstance(standards, list):
            raise MalformedPackError(
                f"Pack '{pack_id}': standards of framework '{fw.get('id', i)}' must be a list"
            )
        for standard in standards or []:
            if not isinstance(standard, dict):
                raise MalformedPackError(
                    f"Pack '{pack_id}': standards of framework '{fw.get('id', i)}' must be objects"
                )
            _check_list_fields(
                standard, LIST_FIELDS_STANDARD,
                f"Pack '{pack_id}': standard '{standard.get('code', '')}'",
            )
            if not str(standard.get("code", "")).strip():
                logger.warning(
                    f"Pack '{pack_id}': framework '{fw.get('id', i)}' has a standard without a code"
                )

    try:
        return StandardsPack.from_dict(data)
    except (TypeError, ValueError) as e:
        raise MalformedPackError(f"Pack '{pack_id}': {e}") from e


def parse_pack_json(text: str) -> StandardsPack:
    """Decode pack JSON text and validate it."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedPackError(f"Invalid JSON pack: {e}") from e
    return validate_pack(data)


def load_pack_file(path: Union[str, Path]) -> StandardsPack:
    """Read and validate a pack JSON file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MalformedPackError(f"Cannot read pack {path}: {e}") from e
    return parse_pack_json(text)


def pack_to_json(pack: StandardsPack) -> str:
    """Serialize a pack as indented JSON (the download format)."""
    return json.dumps(pack.to_dict(), indent=2, ensure_ascii=False)
