"""
Module: web.app

Purpose:
    Flask HTTP surface: the worksheet generation endpoint and the
    standards pack endpoints used by the browser form.

Key Functions:
    - create_app(): Application factory

Routes:
    - POST /api/generate-pdf: Render a worksheet, respond with the PDF
    - POST /api/packs: Register a JSON pack
    - POST /api/packs/samples: Register the bundled sample packs
    - POST /api/packs/csv-headers: Header names of a CSV export
    - POST /api/packs/convert: Convert CSV to a pack (optionally register)
    - GET  /api/frameworks: Registered frameworks with labels
    - GET  /api/frameworks/<id>/standards: Filtered standards

State:
    The pack registry is owned by the app instance
    (app.extensions["dynamicsheets.registry"]); generation requests
    share nothing with each other.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, Response, current_app, jsonify, request

from dynamicsheets import __version__
from dynamicsheets.builder import RenderingError, build_worksheet
from dynamicsheets.core.models.request import InvalidRequestError, WorksheetRequest
from dynamicsheets.standards import (
    ColumnMapping,
    CsvImportError,
    MalformedPackError,
    PackMetadata,
    PackRegistry,
    convert_csv,
    csv_headers,
)
from dynamicsheets.standards.csv_import import DEFAULT_MULTI_DELIMITER

from .config import AppConfig

logger = logging.getLogger(__name__)

REGISTRY_KEY = "dynamicsheets.registry"
CONFIG_KEY = "dynamicsheets.config"
GENERATION_FAILED = "Failed to generate PDF"


def create_app(config: Optional[AppConfig] = None, registry: Optional[PackRegistry] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Server configuration (default AppConfig.from_env())
        registry: Pack registry to serve (default: a new, empty one)
    """
    config = config or AppConfig.from_env()
    registry = registry if registry is not None else PackRegistry()
    if config.load_samples:
        registry.load_samples()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_content_length
    app.extensions[CONFIG_KEY] = config
    app.extensions[REGISTRY_KEY] = registry

    _register_routes(app)
    return app


def _registry() -> PackRegistry:
    return current_app.extensions[REGISTRY_KEY]


def _config() -> AppConfig:
    return current_app.extensions[CONFIG_KEY]


def _error(message: str, status: int, **headers: str):
    return jsonify({"error": message}), status, headers


def _json_body() -> Any:
    return request.get_json(silent=True)


def _json_object() -> Optional[dict]:
    """Decoded JSON body when it is an object, otherwise None."""
    body = _json_body()
    return body if isinstance(body, dict) else None


def _generation_payload() -> Optional[dict]:
    payload = _json_body()
    if payload is None and request.form:
        payload = request.form.to_dict()
        payload["standards"] = request.form.getlist("standards")
    return payload


def _register_routes(app: Flask) -> None:

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": __version__})

    @app.route("/api/generate-pdf", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def generate_pdf():
        if request.method != "POST":
            return _error("Method not allowed", 405, Allow="POST")

        try:
            worksheet = WorksheetRequest.from_payload(
                _generation_payload(), max_questions=_config().max_questions
            )
        except InvalidRequestError as e:
            return _error(str(e), 400)

        try:
            result = build_worksheet(worksheet)
        except RenderingError:
            logger.exception(f"Generation failed for {worksheet.title!r}")
            return _error(GENERATION_FAILED, 500)

        return Response(
            result.pdf_bytes,
            mimetype="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
        )

    @app.route("/api/packs", methods=["POST"])
    def import_pack():
        try:
            pack = _registry().register(_json_body())
        except MalformedPackError as e:
            return _error(str(e), 400)
        return jsonify(_pack_summary(pack)), 201

    @app.route("/api/packs/samples", methods=["POST"])
    def load_samples():
        packs = _registry().load_samples()
        return jsonify({"packs": [_pack_summary(p) for p in packs]})

    @app.route("/api/packs/csv-headers", methods=["POST"])
    def headers():
        body = _json_object()
        if body is None:
            return _error("Request body must be a JSON object", 400)
        try:
            names = csv_headers(str(body.get("csv") or ""), str(body.get("delimiter") or ","))
        except CsvImportError as e:
            return _error(str(e), 400)
        return jsonify({"headers": names})

    @app.route("/api/packs/convert", methods=["POST"])
    def convert():
        body = _json_object()
        if body is None or not body.get("csv"):
            return _error("Upload a CSV first.", 400)

        columns = body.get("columns") or {}
        pack_fields = body.get("pack") or {}
        if not isinstance(columns, dict):
            return _error("columns must be a JSON object", 400)
        if not isinstance(pack_fields, dict):
            return _error("pack must be a JSON object", 400)
        mapping = ColumnMapping(
            code=str(columns.get("code") or ""),
            statement=str(columns.get("statement") or ""),
            grades=str(columns.get("grades") or "") or None,
            tags=str(columns.get("tags") or "") or None,
            grades_delimiter=str(body.get("gradesDelimiter") or DEFAULT_MULTI_DELIMITER),
            tags_delimiter=str(body.get("tagsDelimiter") or DEFAULT_MULTI_DELIMITER),
        )
        try:
            pack = convert_csv(
                str(body["csv"]),
                mapping,
                _pack_metadata(pack_fields),
                delimiter=str(body.get("delimiter") or ","),
            )
        except CsvImportError as e:
            return _error(str(e), 400)

        registered = bool(body.get("register"))
        if registered:
            _registry().register(pack)
        return jsonify({"pack": pack.to_dict(), "registered": registered})

    @app.route("/api/frameworks", methods=["GET"])
    def frameworks():
        registry = _registry()
        return jsonify({
            "frameworks": [
                {
                    "id": entry.id,
                    "name": entry.name,
                    "label": registry.framework_label(entry),
                    "gradeBands": list(entry.framework.grade_bands),
                    "_packId": entry.pack_id,
                }
                for entry in registry.frameworks
            ]
        })

    @app.route("/api/frameworks/<framework_id>/standards", methods=["GET"])
    def standards(framework_id: str):
        registry = _registry()
        entry = registry.find_framework(framework_id)
        if entry is None:
            return _error(f"Unknown framework: {framework_id}", 404)
        found = registry.search_standards(
            framework_id,
            grade_band=request.args.get("grade") or None,
            query=request.args.get("q") or None,
        )
        return jsonify({
            "framework": entry.name,
            "standards": [s.to_dict() for s in found],
        })


def _pack_summary(pack) -> dict:
    return {
        "id": pack.id,
        "name": pack.name,
        "frameworks": pack.framework_count,
        "standards": pack.standard_count,
    }


def _split_csv_list(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None or value == "":
        return default
    if not isinstance(value, (list, tuple)):
        value = str(value).split(",")
    return tuple(str(v).strip() for v in value if str(v).strip())


def _pack_metadata(fields: dict) -> PackMetadata:
    defaults = PackMetadata()

    def text(key: str, fallback: str) -> str:
        return str(fields.get(key) or fallback).strip()

    return PackMetadata(
        id=text("id", defaults.id),
        name=text("name", defaults.name),
        version=text("version", defaults.version),
        scope=text("scope", defaults.scope),
        framework_id=text("frameworkId", defaults.framework_id),
        framework_name=text("frameworkName", defaults.framework_name),
        subjects=_split_csv_list(fields.get("subjects"), defaults.subjects),
        grade_bands=_split_csv_list(fields.get("gradeBands"), defaults.grade_bands),
    )
