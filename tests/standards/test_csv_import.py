"""
Unit tests for CSV → pack conversion.
"""

import logging
from datetime import date

import pytest

from dynamicsheets.standards.csv_import import (
    ColumnMapping,
    CsvImportError,
    PackMetadata,
    convert_csv,
    csv_headers,
    split_list,
)

CSV_TEXT = (
    "Code,Description,Grades,Tags\n"
    "RL.4.1,Refer to details,3-5|6-8,reading| evidence \n"
    ",Missing code,3-5,\n"
    "RL.4.2,,3-5,\n"
    "RL.4.3,Describe a character,,\n"
)


@pytest.fixture
def mapping():
    return ColumnMapping(code="Code", statement="Description", grades="Grades", tags="Tags")


class TestSplitList:

    def test_split_when_padded_then_trimmed_without_blanks(self):
        assert split_list(" a | b ||c ", "|") == ("a", "b", "c")

    def test_split_when_blank_delimiter_then_pipe(self):
        assert split_list("a|b", " ") == ("a", "b")


class TestCsvHeaders:

    def test_headers_when_padded_then_stripped(self):
        assert csv_headers(" Code , Description\nA,B\n") == ["Code", "Description"]

    def test_headers_when_empty_then_raises(self):
        with pytest.raises(CsvImportError, match="empty"):
            csv_headers("")

    def test_headers_when_semicolon_delimited_then_split(self):
        assert csv_headers("Code;Description\n", ";") == ["Code", "Description"]


class TestConvertCsv:
    """Tests for convert_csv()."""

    def test_convert_when_rows_then_one_framework_without_incomplete_rows(self, mapping):
        pack = convert_csv(CSV_TEXT, mapping)

        assert pack.framework_count == 1
        standards = pack.frameworks[0].standards
        assert [s.code for s in standards] == ["RL.4.1", "RL.4.3"]
        assert standards[0].grades == ("3-5", "6-8")
        assert standards[0].tags == ("reading", "evidence")
        assert standards[1].grades == ()

    def test_convert_when_no_metadata_then_defaults(self, mapping):
        pack = convert_csv(CSV_TEXT, mapping)

        assert pack.id == "state-pack"
        assert pack.name == "State Standards Pack"
        assert pack.version == date.today().isoformat()
        assert pack.scope == "state"
        fw = pack.frameworks[0]
        assert (fw.id, fw.name) == ("state-fw", "State Framework")
        assert fw.subjects == ("ELA",)
        assert fw.grade_bands == ("K-2", "3-5", "6-8", "9-10", "11-12")

    def test_convert_when_metadata_then_applied(self, mapping):
        metadata = PackMetadata(id="tx", name="Texas", version="2024", framework_id="teks", subjects=("Math",))
        pack = convert_csv(CSV_TEXT, mapping, metadata)
        assert (pack.id, pack.name, pack.version) == ("tx", "Texas", "2024")
        assert pack.frameworks[0].id == "teks"
        assert pack.frameworks[0].subjects == ("Math",)

    def test_convert_when_code_unmapped_then_raises(self):
        with pytest.raises(CsvImportError, match="Code"):
            convert_csv(CSV_TEXT, ColumnMapping(code="", statement="Description"))

    def test_convert_when_statement_unmapped_then_raises(self):
        with pytest.raises(CsvImportError, match="Description"):
            convert_csv(CSV_TEXT, ColumnMapping(code="Code", statement=""))

    def test_convert_when_mapped_column_absent_then_raises(self):
        with pytest.raises(CsvImportError, match="not in the CSV header"):
            convert_csv(CSV_TEXT, ColumnMapping(code="Identifier", statement="Description"))

    @pytest.mark.parametrize("pack_id", ["", "   "])
    def test_convert_when_pack_id_blank_then_raises(self, mapping, pack_id):
        with pytest.raises(CsvImportError, match="Pack id must not be blank"):
            convert_csv(CSV_TEXT, mapping, PackMetadata(id=pack_id))

    def test_convert_when_delimiter_not_a_string_then_coerced(self):
        text = "Code,Description,Grades\nA.1,Stmt,K-2 5 3-5\n"
        mapping = ColumnMapping(code="Code", statement="Description", grades="Grades", grades_delimiter=5)
        assert convert_csv(text, mapping).frameworks[0].standards[0].grades == ("K-2", "3-5")

    def test_convert_when_optional_column_absent_then_empty_and_warns(self, caplog):
        mapping = ColumnMapping(code="Code", statement="Description", tags="Keywords")
        with caplog.at_level(logging.WARNING):
            pack = convert_csv(CSV_TEXT, mapping)
        assert all(s.tags == () for s in pack.frameworks[0].standards)
        assert "Keywords" in caplog.text

    def test_convert_when_custom_multi_delimiter_then_used(self):
        text = "Code,Description,Grades\nA.1,Stmt,K-2;3-5\n"
        mapping = ColumnMapping(code="Code", statement="Description", grades="Grades", grades_delimiter=";")
        assert convert_csv(text, mapping).frameworks[0].standards[0].grades == ("K-2", "3-5")

    def test_convert_when_quoted_commas_then_single_cell(self):
        text = 'Code,Description\nA.1,"Compare, contrast"\n'
        pack = convert_csv(text, ColumnMapping(code="Code", statement="Description"))
        assert pack.frameworks[0].standards[0].statement == "Compare, contrast"
