"""
Module: standards

Purpose:
    Curriculum standards data models: a Pack bundles Frameworks, a
    Framework holds Standards. Immutable, with to_dict()/from_dict() for
    the JSON pack format.

Key Classes:
    - Standard: One curriculum requirement
    - Framework: Named taxonomy of standards with grade bands
    - StandardsPack: Named, versioned bundle of frameworks

Dependencies:
    - dataclasses (std)

Used By:
    - standards.validation: Builds packs from raw JSON
    - standards.registry: Stores registered packs
    - standards.csv_import: Produces packs from CSV rows
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _str_tuple(values: Any) -> tuple[str, ...]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class Standard:
    """
    A single curriculum requirement.

    Attributes:
        code: Identifier, unique within its framework (e.g. "4.NF.A.1")
        statement: Descriptive text
        grades: Grade band labels the standard applies to
        tags: Free-form tags
    """

    code: str
    statement: str = ""
    grades: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match over code, statement and tags."""
        haystack = f"{self.code} {self.statement} {' '.join(self.tags)}".lower()
        return query.lower() in haystack

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "statement": self.statement,
            "grades": list(self.grades),
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Standard":
        return cls(
            code=str(data.get("code", "")),
            statement=str(data.get("statement") or ""),
            grades=_str_tuple(data.get("grades")),
            tags=_str_tuple(data.get("tags")),
        )


@dataclass(frozen=True)
class Framework:
    """
    A named taxonomy of standards (e.g. a state's math standards).

    Attributes:
        id: Framework identifier
        name: Display name
        subjects: Subjects covered
        grade_bands: Grade band labels offered for filtering
        standards: Ordered standards
    """

    id: str
    name: str = ""
    subjects: tuple[str, ...] = ()
    grade_bands: tuple[str, ...] = ()
    standards: tuple[Standard, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "subjects": list(self.subjects),
            "grade_bands": list(self.grade_bands),
            "standards": [s.to_dict() for s in self.standards],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Framework":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            subjects=_str_tuple(data.get("subjects")),
            grade_bands=_str_tuple(data.get("grade_bands")),
            standards=tuple(Standard.from_dict(s) for s in data.get("standards") or ()),
        )


@dataclass(frozen=True)
class StandardsPack:
    """
    A named, versioned bundle of frameworks.

    Attributes:
        id: Registry key (required, non-blank)
        name: Display name
        version: Free-form version string
        scope: e.g. "national" or "state"
        frameworks: Ordered frameworks

    Example:
        >>> pack = StandardsPack(id="p1", name="Sample")
        >>> pack.framework_count
        0
    """

    id: str
    name: str = ""
    version: str = ""
    scope: str = ""
    frameworks: tuple[Framework, ...] = ()

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("pack id must be non-blank")

    @property
    def framework_count(self) -> int:
        return len(self.frameworks)

    @property
    def standard_count(self) -> int:
        return sum(len(fw.standards) for fw in self.frameworks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "scope": self.scope,
            "frameworks": [fw.to_dict() for fw in self.frameworks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StandardsPack":
        return cls(
            id=str(data.get("id", "")).strip(),
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            scope=str(data.get("scope") or ""),
            frameworks=tuple(Framework.from_dict(fw) for fw in data.get("frameworks") or ()),
        )

    @classmethod
    def single_framework(
        cls,
        *,
        id: str,
        name: str,
        version: str,
        scope: str,
        framework: Framework,
    ) -> "StandardsPack":
        return cls(id=id, name=name, version=version, scope=scope, frameworks=(framework,))

