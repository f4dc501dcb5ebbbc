"""Curriculum standards packs.

Validation and import of JSON packs, the session-scoped pack registry,
the chosen-standards selection and CSV → pack conversion.
"""
from .csv_import import ColumnMapping, CsvImportError, PackMetadata, convert_csv, csv_headers
from .registry import PackRegistry, RegisteredFramework
from .selection import SelectedStandard, StandardSelection
from .validation import (
    MalformedPackError,
    load_pack_file,
    pack_to_json,
    parse_pack_json,
    validate_pack,
)

__all__ = [
    "ColumnMapping",
    "CsvImportError",
    "PackMetadata",
    "convert_csv",
    "csv_headers",
    "PackRegistry",
    "RegisteredFramework",
    "SelectedStandard",
    "StandardSelection",
    "MalformedPackError",
    "load_pack_file",
    "pack_to_json",
    "parse_pack_json",
    "validate_pack",
]
