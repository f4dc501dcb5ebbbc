"""
Module: standards.registry

Purpose:
    Session-scoped registry of loaded standards packs. Frameworks of every
    registered pack are kept in one searchable list tagged with the id of
    the pack that registered them.

Key Classes:
    - PackRegistry: Register, look up and search packs and frameworks
    - RegisteredFramework: Framework plus owning pack id

Used By:
    - web.app: Pack and framework endpoints
    - cli: Resolving standard codes for the generate command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from typing import Any, Dict, Iterable, List, Optional, Union

from dynamicsheets.core.models.standards import Framework, Standard, StandardsPack
from dynamicsheets.standards.validation import parse_pack_json, validate_pack

logger = logging.getLogger(__name__)

SAMPLE_PACKS = (
    "ccss-ela-sample.json",
    "ccss-math-sample.json",
    "ngss-sample.json",
)


@dataclass(frozen=True)
class RegisteredFramework:
    """A framework tagged with the id of the pack that registered it."""
    framework: Framework
    pack_id: str

    @property
    def id(self) -> str:
        return self.framework.id

    @property
    def name(self) -> str:
        return self.framework.name

    def to_dict(self) -> Dict[str, Any]:
        data = self.framework.to_dict()
        data["_packId"] = self.pack_id
        return data


class PackRegistry:
    """Session-scoped collection of loaded standards packs.

    Packs are keyed by id (last write wins); their frameworks are appended
    to a flat, searchable list tagged with the owning pack id. Re-registering
    a pack id appends its frameworks again.
    """

    def __init__(self) -> None:
        self._packs: Dict[str, StandardsPack] = {}
        self._frameworks: List[RegisteredFramework] = []

    def __len__(self) -> int:
        return len(self._packs)

    def __contains__(self, pack_id: object) -> bool:
        return pack_id in self._packs

    @property
    def packs(self) -> Dict[str, StandardsPack]:
        return dict(self._packs)

    @property
    def frameworks(self) -> List[RegisteredFramework]:
        return list(self._frameworks)

    def register(self, pack: Union[StandardsPack, Dict[str, Any]]) -> StandardsPack:
        """Register a pack (validated first when given as raw data)."""
        if not isinstance(pack, StandardsPack):
            pack = validate_pack(pack)
        if pack.id in self._packs:
            logger.info(f"Replacing pack '{pack.id}'")
        self._packs[pack.id] = pack
        for fw in pack.frameworks:
            self._frameworks.append(RegisteredFramework(framework=fw, pack_id=pack.id))
        logger.info(
            f"Registered pack '{pack.id}' ({pack.framework_count} frameworks, "
            f"{pack.standard_count} standards)"
        )
        return pack

    def get(self, pack_id: str) -> Optional[StandardsPack]:
        return self._packs.get(pack_id)

    def find_framework(self, framework_id: str) -> Optional[RegisteredFramework]:
        """First registered framework with the given id."""
        for entry in self._frameworks:
            if entry.id == framework_id:
                return entry
        return None

    def framework_label(self, entry: RegisteredFramework) -> str:
        pack = self._packs.get(entry.pack_id)
        pack_name = pack.name if pack and pack.name else "Pack"
        return f"{entry.name} ({pack_name})"

    def search_standards(
        self,
        framework_id: str,
        grade_band: Optional[str] = None,
        query: Optional[str] = None,
    ) -> List[Standard]:
        """Standards of a framework filtered by grade band and text query.

        The grade filter only excludes standards that list grades; the
        query is a case-insensitive substring match over code, statement
        and tags. An unknown framework yields an empty list.
        """
        entry = self.find_framework(framework_id)
        if entry is None:
            return []

        results = []
        for standard in entry.framework.standards:
            if grade_band and standard.grades and grade_band not in standard.grades:
                continue
            if query and not standard.matches(query):
                continue
            results.append(standard)
        return results

    def find_standard(self, code: str) -> Optional[tuple[RegisteredFramework, Standard]]:
        """Look a standard code up across all registered frameworks."""
        for entry in self._frameworks:
            for standard in entry.framework.standards:
                if standard.code == code:
                    return entry, standard
        return None

    def load_samples(self, names: Iterable[str] = SAMPLE_PACKS) -> List[StandardsPack]:
        """Register the sample packs bundled with the package."""
        loaded = []
        samples = resources.files("dynamicsheets.standards") / "samples"
        for name in names:
            text = (samples / name).read_text(encoding="utf-8")
            loaded.append(self.register(parse_pack_json(text)))
        logger.info(f"Loaded {len(loaded)} sample packs")
        return loaded

    def clear(self) -> None:
        self._packs.clear()
        self._frameworks.clear()
