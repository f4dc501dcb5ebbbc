"""
Module: standards.selection

Purpose:
    The standards chosen for a worksheet, in selection order and unique
    by code. Its codes become the request's standards list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List


@dataclass(frozen=True)
class SelectedStandard:
    code: str
    name: str = ""
    framework: str = ""


class StandardSelection:
    """Ordered list of standards chosen for a worksheet, unique by code."""

    def __init__(self) -> None:
        self._items: List[SelectedStandard] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[SelectedStandard]:
        return iter(self._items)

    def __contains__(self, code: object) -> bool:
        return any(item.code == code for item in self._items)

    def add(self, code: str, name: str = "", framework: str = "") -> bool:
        """Append a standard; returns False if the code is already selected."""
        if code in self:
            return False
        self._items.append(SelectedStandard(code=code, name=name or code, framework=framework))
        return True

    def remove(self, code: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.code != code]
        return len(self._items) != before

    def codes(self) -> List[str]:
        """Codes in selection order, as sent in a generation request."""
        return [item.code for item in self._items]

    def clear(self) -> None:
        self._items.clear()
