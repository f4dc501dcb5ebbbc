"""CSV → standards pack conversion.

Turns a spreadsheet export of state standards (one header row) into a
single-framework pack. The user maps columns to the code, statement,
grades and tags fields; grades and tags cells hold several values
separated by a per-field delimiter (default ``|``). Rows without a code
or statement are dropped.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from dynamicsheets.core.models.standards import Framework, Standard, StandardsPack

logger = logging.getLogger(__name__)

DEFAULT_MULTI_DELIMITER = "|"
DEFAULT_GRADE_BANDS = ("K-2", "3-5", "6-8", "9-10", "11-12")


class CsvImportError(ValueError):
    """Raised when a CSV export cannot be converted."""


@dataclass(frozen=True)
class ColumnMapping:
    """Which CSV header supplies each standard field."""
    code: str
    statement: str
    grades: Optional[str] = None
    tags: Optional[str] = None
    grades_delimiter: str = DEFAULT_MULTI_DELIMITER
    tags_delimiter: str = DEFAULT_MULTI_DELIMITER


@dataclass(frozen=True)
class PackMetadata:
    """Pack and framework fields for the converted pack."""
    id: str = "state-pack"
    name: str = "State Standards Pack"
    version: str = field(default_factory=lambda: date.today().isoformat())
    scope: str = "state"
    framework_id: str = "state-fw"
    framework_name: str = "State Framework"
    subjects: Tuple[str, ...] = ("ELA",)
    grade_bands: Tuple[str, ...] = DEFAULT_GRADE_BANDS


def split_list(value: str, delimiter: str) -> Tuple[str, ...]:
    """Split a multi-value cell, trimming parts and dropping blanks."""
    delimiter = str(delimiter or "").strip() or DEFAULT_MULTI_DELIMITER
    return tuple(part.strip() for part in str(value).split(delimiter) if part.strip())


def read_rows(text: str, delimiter: str = ",") -> pd.DataFrame:
    """Parse delimiter-separated text with one header row, every cell as a string."""
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            index_col=False,
        )
    except pd.errors.EmptyDataError as e:
        raise CsvImportError("CSV is empty") from e
    except ValueError as e:
        raise CsvImportError(f"Cannot parse CSV: {e}") from e
    frame.columns = [str(c).strip() for c in frame.columns]
    return frame.fillna("")


def csv_headers(text: str, delimiter: str = ",") -> List[str]:
    """Header names offered for column mapping."""
    return list(read_rows(text, delimiter).columns)


def convert_csv(
    text: str,
    mapping: ColumnMapping,
    metadata: Optional[PackMetadata] = None,
    *,
    delimiter: str = ",",
) -> StandardsPack:
    """Convert CSV text into a pack with exactly one framework.

    Args:
        text: CSV text including the header row.
        mapping: Column mapping (code and statement are required).
        metadata: Pack/framework fields (defaults to PackMetadata()).
        delimiter: Field separator of the CSV text.

    Returns:
        The converted StandardsPack.

    Raises:
        CsvImportError: If the mapping is incomplete or the CSV unreadable.
    """
    if not mapping.code:
        raise CsvImportError("Map the Code column.")
    if not mapping.statement:
        raise CsvImportError("Map the Description column.")

    metadata = metadata or PackMetadata()
    if not str(metadata.id).strip():
        raise CsvImportError("Pack id must not be blank")
    frame = read_rows(text, delimiter)
    for role, column in (("code", mapping.code), ("statement", mapping.statement)):
        if column not in frame.columns:
            raise CsvImportError(f"Column '{column}' mapped to {role} is not in the CSV header")

    grades_col = mapping.grades if mapping.grades in frame.columns else None
    tags_col = mapping.tags if mapping.tags in frame.columns else None
    if mapping.grades and grades_col is None:
        logger.warning(f"Grades column '{mapping.grades}' not found, grades left empty")
    if mapping.tags and tags_col is None:
        logger.warning(f"Tags column '{mapping.tags}' not found, tags left empty")

    standards = []
    dropped = 0
    for row in frame.to_dict(orient="records"):
        code = str(row[mapping.code]).strip()
        statement = str(row[mapping.statement]).strip()
        if not code or not statement:
            dropped += 1
            continue
        standards.append(Standard(
            code=code,
            statement=statement,
            grades=split_list(row[grades_col], mapping.grades_delimiter) if grades_col else (),
            tags=split_list(row[tags_col], mapping.tags_delimiter) if tags_col else (),
        ))

    if dropped:
        logger.warning(f"Dropped {dropped} rows without code or statement")
    logger.info(f"Converted {len(standards)} standards into pack '{metadata.id}'")

    framework = Framework(
        id=metadata.framework_id,
        name=metadata.framework_name,
        subjects=tuple(metadata.subjects),
        grade_bands=tuple(metadata.grade_bands),
        standards=tuple(standards),
    )
    return StandardsPack.single_framework(
        id=metadata.id,
        name=metadata.name,
        version=metadata.version,
        scope=metadata.scope,
        framework=framework,
    )
