"""Unit tests for upload parsing.

Tests format detection, lenient CSV parsing and the JSON shapes the
intake accepts.

Run with: pytest tests/unit/test_parser.py -v
"""

import json

import pytest

from caseintake.errors import ParseError
from caseintake.ingestion.parser import (
    FileFormat,
    decode_content,
    detect_format,
    parse_csv,
    parse_json,
    parse_records,
    parse_upload,
)


class TestDetectFormat:
    """Tests for format inference."""

    def test_json_mimetype(self):
        assert detect_format("upload", "application/json") is FileFormat.JSON

    def test_json_mimetype_with_charset(self):
        assert detect_format("upload", "application/json; charset=utf-8") is FileFormat.JSON

    def test_json_extension(self):
        """Test that the filename decides when no JSON mimetype is declared."""
        assert detect_format("Export.JSON", "application/octet-stream") is FileFormat.JSON

    def test_defaults_to_csv(self):
        assert detect_format("intake.csv", "text/csv") is FileFormat.CSV
        assert detect_format("intake.txt", None) is FileFormat.CSV


class TestDecodeContent:
    def test_strips_utf8_bom(self):
        assert decode_content(b"\xef\xbb\xbfname\n") == "name\n"

    def test_replaces_invalid_bytes(self):
        """Test that undecodable bytes do not raise."""
        assert "\ufffd" in decode_content(b"name\n\xff\xfe\n")

    def test_accepts_text(self):
        assert decode_content("\ufeffname") == "name"


class TestParseCsv:
    """Tests for lenient CSV parsing."""

    def test_header_row_names_fields(self):
        records = parse_csv("name,phone\nJane,123\n")

        assert records == [{"name": "Jane", "phone": "123"}]

    def test_skips_blank_lines_and_trims_values(self):
        records = parse_csv("name , phone\n\n  Jane  , 123 \n   \n")

        assert records == [{"name": "Jane", "phone": "123"}]

    def test_short_rows_are_padded(self):
        records = parse_csv("name,phone,species\nJane\n")

        assert records == [{"name": "Jane", "phone": "", "species": ""}]

    def test_extra_cells_are_dropped(self):
        records = parse_csv("name\nJane,extra,more\n")

        assert records == [{"name": "Jane"}]

    def test_quoted_fields(self):
        records = parse_csv('name,notes\n"Doe, Jane","said ""hi"""\n')

        assert records[0]["name"] == "Doe, Jane"
        assert records[0]["notes"] == 'said "hi"'

    def test_empty_input(self):
        assert parse_csv("") == []
        assert parse_csv("name,phone\n") == []

    def test_never_raises_on_odd_input(self):
        """Test that unbalanced quotes still yield records instead of an error."""
        records = parse_csv('name,phone\n"Jane,123\nSam,456\n')

        assert isinstance(records, list)


class TestParseJson:
    """Tests for the accepted JSON shapes."""

    def test_array_of_objects(self):
        records = parse_json('[{"name": "Jane"}, {"name": "Sam"}]')

        assert [r["name"] for r in records] == ["Jane", "Sam"]

    def test_records_wrapper(self):
        records = parse_json('{"records": [{"name": "Jane"}], "meta": {"count": 1}}')

        assert records == [{"name": "Jane"}]

    def test_first_list_of_objects(self):
        """Test that an unnamed wrapper list is found."""
        records = parse_json('{"exported": "2024-01-01", "cases": [{"name": "Jane"}]}')

        assert records == [{"name": "Jane"}]

    def test_single_object_is_one_record(self):
        records = parse_json('{"name": "Jane", "phone": "123"}')

        assert records == [{"name": "Jane", "phone": "123"}]

    def test_non_object_items_are_ignored(self):
        records = parse_json('[{"name": "Jane"}, 5, "x", null]')

        assert records == [{"name": "Jane"}]

    def test_scalar_document_has_no_records(self):
        assert parse_json("42") == []

    def test_malformed_json_names_the_file(self):
        with pytest.raises(ParseError) as exc_info:
            parse_json("{not json", "broken.json")

        assert exc_info.value.filename == "broken.json"
        assert "broken.json" in exc_info.value.message


class TestParseRecords:
    def test_dispatches_on_format(self, sample_json_records):
        content = json.dumps(sample_json_records).encode("utf-8")

        records = parse_records("partner.json", content)

        assert len(records) == 2
        assert records[0]["contact_name"] == "Alex Kim"

    def test_csv_upload(self, csv_upload):
        records = parse_upload(csv_upload)

        assert len(records) == 2
        assert records[1]["name"] == "Sam Lee"
        assert records[1]["status"] == ""

    def test_broken_json_upload(self, broken_json_upload):
        with pytest.raises(ParseError):
            parse_upload(broken_json_upload)
