"""
Unit tests for the negative keyword spreadsheet parser.

Run: pytest tests/unit/test_keyword_sheet_parser.py -v
"""

from io import BytesIO

import pytest

from exceptions import SpreadsheetMissingColumnsError, SpreadsheetParseError
from models.negative_keyword import TEMPLATE_HEADERS
from parsers.keyword_sheet_parser import parse_keyword_sheet
from services.normalizer_service import normalize_records


# ===================
# VALID FILE TESTS
# ===================

class TestValidFileParsing:
    """Tests for successfully parsing valid files."""

    def test_template_headers_parse(self, make_workbook):
        file = make_workbook([
            [123456789, 987654321, "免费", 1],
            [123456789, 987654321, "教程", 0],
        ])

        records = parse_keyword_sheet(file)

        assert records == [
            {"advertiser_id": 123456789, "unit_id": 987654321, "keyword": "免费", "match_type": 1},
            {"advertiser_id": 123456789, "unit_id": 987654321, "keyword": "教程", "match_type": 0},
        ]

    def test_english_headers_parse(self, make_workbook):
        file = make_workbook(
            [[1, 10, "free", 1]],
            columns=["Advertiser ID", "Unit ID", "Negative Keyword", "Match Type"],
        )

        records = parse_keyword_sheet(file)

        assert records == [
            {"advertiser_id": 1, "unit_id": 10, "keyword": "free", "match_type": 1},
        ]

    def test_headers_match_ignoring_case_and_spaces(self, make_workbook):
        file = make_workbook(
            [[1, 10, "free", 1]],
            columns=["  ADVERTISER   ID ", "unit_id", "Keyword", "match type"],
        )

        records = parse_keyword_sheet(file)

        assert records[0]["advertiser_id"] == 1
        assert records[0]["keyword"] == "free"

    def test_column_order_does_not_matter(self, make_workbook):
        file = make_workbook(
            [["free", 1, 10, 1]],
            columns=["keyword", "match_type", "advertiser_id", "unit_id"],
        )

        records = parse_keyword_sheet(file)

        assert records == [
            {"keyword": "free", "match_type": 1, "advertiser_id": 10, "unit_id": 1},
        ]

    def test_extra_columns_are_ignored(self, make_workbook):
        file = make_workbook(
            [[1, 10, "free", 1, "note"]],
            columns=list(TEMPLATE_HEADERS.values()) + ["备注"],
        )

        records = parse_keyword_sheet(file)

        assert set(records[0]) == {"advertiser_id", "unit_id", "keyword", "match_type"}

    def test_empty_cells_become_none(self, make_workbook):
        file = make_workbook([
            [1, None, "free", 1],
            [1, 10, None, 0],
        ])

        records = parse_keyword_sheet(file)

        assert records[0]["unit_id"] is None
        assert records[1]["keyword"] is None

    def test_header_only_sheet_has_no_records(self, make_workbook):
        records = parse_keyword_sheet(make_workbook([]))

        assert records == []

    def test_reads_file_path(self, make_workbook, tmp_path):
        path = tmp_path / "keywords.xlsx"
        path.write_bytes(make_workbook([[1, 10, "free", 1]]).getvalue())

        records = parse_keyword_sheet(path)

        assert len(records) == 1

    def test_parsed_rows_normalize(self, make_workbook):
        """Rows with empty cells are dropped by the normalizer, not the parser."""
        file = make_workbook([
            [1, 10, "free", 1],
            [1, 10, "tutorial", 0],
            [1, 10, "free", 0],
            [2, None, "crack", 1],
            [2, 20, "crack", 1],
        ])

        groups = normalize_records(parse_keyword_sheet(file))

        assert [g.key for g in groups] == ["1-10", "2-20"]
        assert [(k.keyword, k.phrase_match_type) for k in groups[0].keywords] == [
            ("free", 1),
            ("tutorial", 0),
        ]


# ===================
# INVALID FILE TESTS
# ===================

class TestInvalidFiles:
    """Tests for files that fail the whole upload."""

    def test_non_excel_bytes(self):
        with pytest.raises(SpreadsheetParseError) as exc_info:
            parse_keyword_sheet(BytesIO(b"advertiser,unit\n1,2\n"))

        assert exc_info.value.code == "SPREADSHEET_PARSE_ERROR"
        assert exc_info.value.status_code == 422
        assert "original_error" in exc_info.value.details

    def test_empty_file(self):
        with pytest.raises(SpreadsheetParseError):
            parse_keyword_sheet(BytesIO(b""))

    def test_missing_column(self, make_workbook):
        columns = list(TEMPLATE_HEADERS.values())[:3]
        file = make_workbook([[1, 10, "free"]], columns=columns)

        with pytest.raises(SpreadsheetMissingColumnsError) as exc_info:
            parse_keyword_sheet(file)

        error = exc_info.value
        assert error.code == "SPREADSHEET_MISSING_COLUMNS"
        assert error.details["missing_columns"] == [TEMPLATE_HEADERS["match_type"]]
        assert error.details["found_columns"] == columns

    def test_missing_columns_is_a_parse_error(self, make_workbook):
        file = make_workbook([["x"]], columns=["something else"])

        with pytest.raises(SpreadsheetParseError) as exc_info:
            parse_keyword_sheet(file)

        assert len(exc_info.value.details["missing_columns"]) == 4


def test_package_exports_only_parser():
    """Column constants are owned by models, not re-exported here."""
    import parsers

    assert parsers.__all__ == ["parse_keyword_sheet"]
    assert not hasattr(parsers, "TEMPLATE_HEADERS")
