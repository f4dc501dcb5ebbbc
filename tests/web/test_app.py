"""
Tests for the Flask HTTP surface, using the Flask test client.
"""

import io

import pytest
from pypdf import PdfReader

from dynamicsheets.standards import PackRegistry
from dynamicsheets.web import AppConfig, create_app


@pytest.fixture
def app():
    app = create_app(AppConfig(), PackRegistry())
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class TestGeneratePdf:
    """Tests for POST /api/generate-pdf."""

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_generate_when_not_post_then_405_with_allow(self, client, method):
        response = getattr(client, method)("/api/generate-pdf")

        assert response.status_code == 405
        assert response.headers["Allow"] == "POST"
        assert response.get_json() == {"error": "Method not allowed"}

    def test_generate_when_valid_then_pdf_attachment(self, client):
        response = client.post("/api/generate-pdf", json={
            "title": "Fractions: Grade 4!",
            "numQuestions": 3,
            "standards": ["4.NF.A.1"],
        })

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert response.headers["Content-Disposition"] == 'attachment; filename="Fractions__Grade_4_.pdf"'
        reader = PdfReader(io.BytesIO(response.data))
        assert "Aligned with: 4.NF.A.1" in reader.pages[0].extract_text()

    def test_generate_when_empty_body_then_defaults(self, client):
        response = client.post("/api/generate-pdf", json={})

        assert response.status_code == 200
        assert 'filename="Worksheet.pdf"' in response.headers["Content-Disposition"]

    def test_generate_when_form_data_then_accepted(self, client):
        response = client.post("/api/generate-pdf", data={
            "title": "Form",
            "numQuestions": "2",
            "includeAnswerKey": "no",
            "standards": ["RL.4.1", "RL.4.2"],
        })

        assert response.status_code == 200
        assert len(PdfReader(io.BytesIO(response.data)).pages) == 1

    def test_generate_when_bad_count_then_400(self, client):
        response = client.post("/api/generate-pdf", json={"numQuestions": "lots"})

        assert response.status_code == 400
        assert "numQuestions" in response.get_json()["error"]

    def test_generate_when_count_above_config_bound_then_400(self):
        client = create_app(AppConfig(max_questions=5), PackRegistry()).test_client()
        response = client.post("/api/generate-pdf", json={"numQuestions": 6})
        assert response.status_code == 400

    def test_generate_when_rendering_fails_then_500(self, client, monkeypatch):
        from dynamicsheets.builder import RenderingError
        from dynamicsheets.web import app as app_module

        def failing_build(request):
            raise RenderingError("Failed to generate PDF: boom")

        monkeypatch.setattr(app_module, "build_worksheet", failing_build)

        response = client.post("/api/generate-pdf", json={})

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to generate PDF"}


class TestPackEndpoints:
    """Tests for the standards pack routes."""

    def test_import_pack_when_valid_then_201_summary(self, client, math_pack_data):
        response = client.post("/api/packs", json=math_pack_data)

        assert response.status_code == 201
        assert response.get_json() == {"id": "p1", "name": "Pack One", "frameworks": 2, "standards": 4}

    def test_import_pack_when_missing_id_then_400(self, client):
        response = client.post("/api/packs", json={"name": "x"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Pack missing 'id'"

    def test_frameworks_when_registered_then_labels_and_pack_ids(self, client, math_pack_data):
        client.post("/api/packs", json=math_pack_data)

        frameworks = client.get("/api/frameworks").get_json()["frameworks"]

        assert [f["label"] for f in frameworks] == ["Math (Pack One)", "ELA (Pack One)"]
        assert {f["_packId"] for f in frameworks} == {"p1"}

    def test_standards_when_filtered_then_matching_only(self, client, math_pack_data):
        client.post("/api/packs", json=math_pack_data)

        body = client.get("/api/frameworks/fw-math/standards?grade=6-8").get_json()

        assert body["framework"] == "Math"
        assert [s["code"] for s in body["standards"]] == ["6.RP.A.1", "MP.1"]

    def test_standards_when_unknown_framework_then_404(self, client):
        assert client.get("/api/frameworks/nope/standards").status_code == 404

    def test_load_samples_when_posted_then_registered(self, client):
        body = client.post("/api/packs/samples").get_json()

        assert len(body["packs"]) == 3
        assert len(client.get("/api/frameworks").get_json()["frameworks"]) == 3

    def test_csv_headers_when_posted_then_names(self, client):
        response = client.post("/api/packs/csv-headers", json={"csv": "Code,Description\nA,B\n"})
        assert response.get_json() == {"headers": ["Code", "Description"]}

    def test_convert_when_register_then_pack_returned_and_registered(self, app, client):
        response = client.post("/api/packs/convert", json={
            "csv": "Code,Description,Grades\nA.1,First,K-2|3-5\n",
            "columns": {"code": "Code", "statement": "Description", "grades": "Grades"},
            "pack": {"id": "tx", "name": "Texas", "subjects": "Math, Science"},
            "register": True,
        })

        body = response.get_json()
        assert response.status_code == 200
        assert body["registered"] is True
        assert body["pack"]["id"] == "tx"
        framework = body["pack"]["frameworks"][0]
        assert framework["subjects"] == ["Math", "Science"]
        assert framework["standards"][0]["grades"] == ["K-2", "3-5"]
        assert "tx" in app.extensions["dynamicsheets.registry"]

    def test_convert_when_no_csv_then_400(self, client):
        response = client.post("/api/packs/convert", json={"columns": {}})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Upload a CSV first."

    def test_convert_when_code_unmapped_then_400(self, client):
        response = client.post("/api/packs/convert", json={"csv": "Code\nA\n", "columns": {"statement": "Code"}})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Map the Code column."


class TestMalformedPackInput:
    """Malformed pack input is rejected with 400, never a server error."""

    def test_import_pack_when_grades_is_number_then_400(self, client):
        response = client.post("/api/packs", json={
            "id": "p1",
            "frameworks": [{"id": "f", "standards": [{"code": "A", "grades": 5}]}],
        })

        assert response.status_code == 400
        assert "grades must be a list" in response.get_json()["error"]

    def test_import_pack_when_body_is_list_then_400(self, client):
        assert client.post("/api/packs", json=["p1"]).status_code == 400

    def test_csv_headers_when_body_is_list_then_400(self, client):
        response = client.post("/api/packs/csv-headers", json=["a"])

        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"

    @pytest.mark.parametrize("field", ["columns", "pack"])
    def test_convert_when_nested_field_not_object_then_400(self, client, field):
        body = {
            "csv": "Code,Description\nA.1,First\n",
            "columns": {"code": "Code", "statement": "Description"},
        }
        body[field] = ["Code"]

        response = client.post("/api/packs/convert", json=body)

        assert response.status_code == 400
        assert response.get_json()["error"] == f"{field} must be a JSON object"

    def test_convert_when_delimiters_are_numbers_then_converted(self, client):
        response = client.post("/api/packs/convert", json={
            "csv": "Code,Description,Grades,Tags\nA.1,First,K-2|3-4,x\n",
            "columns": {"code": "Code", "statement": "Description", "grades": "Grades", "tags": "Tags"},
            "gradesDelimiter": 5,
            "tagsDelimiter": 7,
        })

        assert response.status_code == 200
        standard = response.get_json()["pack"]["frameworks"][0]["standards"][0]
        assert standard["grades"] == ["K-2|3-4"]

    def test_convert_when_pack_id_blank_then_400(self, client):
        response = client.post("/api/packs/convert", json={
            "csv": "Code,Description\nA.1,First\n",
            "columns": {"code": "Code", "statement": "Description"},
            "pack": {"id": "   "},
        })

        assert response.status_code == 400
        assert response.get_json()["error"] == "Pack id must not be blank"

    def test_convert_when_subjects_is_number_then_single_subject(self, client):
        response = client.post("/api/packs/convert", json={
            "csv": "Code,Description\nA.1,First\n",
            "columns": {"code": "Code", "statement": "Description"},
            "pack": {"subjects": 5},
        })

        assert response.status_code == 200
        assert response.get_json()["pack"]["frameworks"][0]["subjects"] == ["5"]


class TestHealth:

    def test_health_when_called_then_ok(self, client):
        assert client.get("/api/health").get_json()["status"] == "ok"
