"""
Command-line entry point.

Usage:
    # Render a worksheet from flags
    dynamicsheets generate --title "Fractions" --type mixed --count 8 -o fractions.pdf

    # Render from a JSON request body, aligning with standards from a pack
    dynamicsheets generate --request request.json --pack math.json --standard 4.NF.A.1

    # Convert a state standards CSV export into a pack
    dynamicsheets convert-csv standards.csv --code-col Code --statement-col Description

    # Run the HTTP service
    dynamicsheets serve --port 5000
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dynamicsheets.builder import BuildError, build_worksheet
from dynamicsheets.core.models.request import InvalidRequestError, WorksheetRequest
from dynamicsheets.standards import (
    ColumnMapping,
    CsvImportError,
    MalformedPackError,
    PackMetadata,
    PackRegistry,
    StandardSelection,
    convert_csv,
    load_pack_file,
    pack_to_json,
)
from dynamicsheets.standards.csv_import import DEFAULT_MULTI_DELIMITER
from dynamicsheets.web import AppConfig, create_app

logger = logging.getLogger("dynamicsheets.cli")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dynamicsheets", description="Printable worksheet builder")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Render a worksheet PDF")
    gen.add_argument("--request", type=Path, help="JSON file with a generation request body")
    gen.add_argument("--title", help="Worksheet title")
    gen.add_argument("--directions", help="Directions paragraph")
    gen.add_argument("--type", dest="question_type", help="mixed, multiple_choice, short_answer, fill_blank or graphic_organizer")
    gen.add_argument("--count", type=int, dest="num_questions", help="Number of questions")
    gen.add_argument("--topic", help="Topic used in question stems")
    gen.add_argument("--no-answer-key", action="store_true", help="Omit the answer key page")
    gen.add_argument("--standard", action="append", default=[], help="Aligned standard code (repeatable)")
    gen.add_argument("--pack", action="append", type=Path, default=[], help="Standards pack JSON to resolve codes against (repeatable)")
    gen.add_argument("--seed", type=int, help="Seed for reproducible multiple-choice answers")
    gen.add_argument("-o", "--output", type=Path, help="Output PDF path (default: derived from title)")

    conv = sub.add_parser("convert-csv", help="Convert a standards CSV export into a pack")
    conv.add_argument("csv", type=Path, help="CSV file with one header row")
    conv.add_argument("--code-col", required=True, help="Header of the code column")
    conv.add_argument("--statement-col", required=True, help="Header of the statement column")
    conv.add_argument("--grades-col", help="Header of the grades column")
    conv.add_argument("--tags-col", help="Header of the tags column")
    conv.add_argument("--grades-delimiter", default=DEFAULT_MULTI_DELIMITER)
    conv.add_argument("--tags-delimiter", default=DEFAULT_MULTI_DELIMITER)
    conv.add_argument("--delimiter", default=",", help="CSV field separator")
    defaults = PackMetadata()
    conv.add_argument("--pack-id", default=defaults.id)
    conv.add_argument("--pack-name", default=defaults.name)
    conv.add_argument("--pack-version", default=defaults.version)
    conv.add_argument("--scope", default=defaults.scope)
    conv.add_argument("--framework-id", default=defaults.framework_id)
    conv.add_argument("--framework-name", default=defaults.framework_name)
    conv.add_argument("--subjects", default=",".join(defaults.subjects))
    conv.add_argument("--grade-bands", default=",".join(defaults.grade_bands))
    conv.add_argument("-o", "--output", type=Path, help="Output JSON path (default: <pack-id>.json)")

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", help="Bind address")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.add_argument("--load-samples", action="store_true", help="Register bundled sample packs")

    return parser


def _split(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _resolve_standards(codes: List[str], pack_paths: List[Path]) -> List[str]:
    """Collect requested codes through a selection, checking them against loaded packs."""
    registry = PackRegistry()
    for path in pack_paths:
        registry.register(load_pack_file(path))

    selection = StandardSelection()
    for code in codes:
        found = registry.find_standard(code) if len(registry) else None
        if found is None:
            if len(registry):
                logger.warning(f"Standard {code} not found in the loaded packs")
            selection.add(code)
        else:
            entry, standard = found
            selection.add(standard.code, standard.statement, entry.name)
    return selection.codes()


def _cmd_generate(args: argparse.Namespace) -> int:
    payload: dict = {}
    if args.request:
        try:
            payload = json.loads(args.request.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read request {args.request}: {e}")
            return 2
        if not isinstance(payload, dict):
            logger.error("Request file must contain a JSON object")
            return 2

    overrides = {
        "title": args.title,
        "directions": args.directions,
        "questionType": args.question_type,
        "numQuestions": args.num_questions,
        "topic": args.topic,
        "seed": args.seed,
    }
    payload.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_answer_key:
        payload["includeAnswerKey"] = "no"

    existing = payload.get("standards") or []
    if isinstance(existing, str):
        existing = [existing]
    codes = [str(code) for code in existing] + args.standard
    try:
        payload["standards"] = _resolve_standards(codes, args.pack)
        request = WorksheetRequest.from_payload(payload)
        result = build_worksheet(request)
    except (InvalidRequestError, MalformedPackError, BuildError) as e:
        logger.error(str(e))
        return 1

    output = args.output or Path(result.filename)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(result.pdf_bytes)
    logger.info(f"Wrote {result.page_count} pages to {output}")
    return 0


def _cmd_convert(args: argparse.Namespace) -> int:
    mapping = ColumnMapping(
        code=args.code_col,
        statement=args.statement_col,
        grades=args.grades_col,
        tags=args.tags_col,
        grades_delimiter=args.grades_delimiter,
        tags_delimiter=args.tags_delimiter,
    )
    metadata = PackMetadata(
        id=args.pack_id,
        name=args.pack_name,
        version=args.pack_version,
        scope=args.scope,
        framework_id=args.framework_id,
        framework_name=args.framework_name,
        subjects=_split(args.subjects),
        grade_bands=_split(args.grade_bands),
    )
    try:
        text = args.csv.read_text(encoding="utf-8-sig")
        pack = convert_csv(text, mapping, metadata, delimiter=args.delimiter)
    except (OSError, CsvImportError) as e:
        logger.error(str(e))
        return 1

    output = args.output or Path(f"{pack.id}.json")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(pack_to_json(pack), encoding="utf-8")
    logger.info(f"Wrote pack '{pack.id}' with {pack.standard_count} standards to {output}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    base = AppConfig.from_env()
    config = AppConfig(
        max_questions=base.max_questions,
        max_content_length=base.max_content_length,
        host=args.host or base.host,
        port=args.port or base.port,
        debug=base.debug,
        load_samples=args.load_samples or base.load_samples,
    )
    app = create_app(config)
    app.run(host=config.host, port=config.port, debug=config.debug)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    if args.command == "generate":
        return _cmd_generate(args)
    if args.command == "convert-csv":
        return _cmd_convert(args)
    return _cmd_serve(args)


if __name__ == "__main__":
    sys.exit(main())
