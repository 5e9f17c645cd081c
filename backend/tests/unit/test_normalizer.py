"""Unit tests for record normalization.

Run with: pytest tests/unit/test_normalizer.py -v
"""

from caseintake.ingestion.normalizer import (
    FIELD_ALIASES,
    normalize_record,
    normalize_records,
    pick_first,
)


class TestPickFirst:
    def test_first_non_empty_alias_wins(self):
        raw = {"phone_number": "  ", "phone": "904-555-1234"}

        assert pick_first(raw, ("phone_number", "phone")) == "904-555-1234"

    def test_alias_order_decides(self):
        raw = {"name": "Second", "contact_name": "First"}

        assert pick_first(raw, FIELD_ALIASES["contact_name"]) == "First"

    def test_missing_keys(self):
        assert pick_first({}, ("a", "b")) == ""

    def test_nested_values_are_ignored(self):
        assert pick_first({"notes": {"text": "x"}}, ("notes",)) == ""
        assert pick_first({"notes": ["x"]}, ("notes",)) == ""


class TestNormalizeRecord:
    """Tests for mapping raw records onto the case schema."""

    def test_aliased_csv_headers(self):
        record = normalize_record(
            {"name": "Jane Doe", "phone": "9045551234", "species": "Dog"},
            source_system="intake.csv",
        )

        assert record.contact_name == "Jane Doe"
        assert record.phone_number == "9045551234"
        assert record.pet_species == "Dog"
        assert record.status == "open"
        assert record.source_system == "intake.csv"
        assert record.case_external_id is None

    def test_assigns_fresh_case_id(self):
        first = normalize_record({"name": "Jane"})
        second = normalize_record({"name": "Jane"})

        assert first.case_id
        assert first.case_id != second.case_id

    def test_external_id_aliases(self):
        assert normalize_record({"case_external_id": "A-1"}).case_external_id == "A-1"
        assert normalize_record({"case_id": "B-2"}).case_external_id == "B-2"
        assert normalize_record({"id": 42}).case_external_id == "42"

    def test_request_alias_precedes_initial_request(self):
        record = normalize_record({"initial_request": "Later", "request": "Sooner"})

        assert record.initial_request == "Sooner"

    def test_numbers_become_text(self):
        record = normalize_record({"phone": 9045551234, "pet": 7})

        assert record.phone_number == "9045551234"
        assert record.pet_name == "7"

    def test_blank_status_defaults_to_open(self):
        assert normalize_record({"status": "   "}).status == "open"

    def test_unrecognized_status_passes_through(self):
        """Test that normalization does not reject legacy status values."""
        assert normalize_record({"status": "pending"}).status == "pending"

    def test_record_without_known_keys(self):
        """Test that normalization is total."""
        record = normalize_record({"unrelated": "value"})

        assert record.contact_name == ""
        assert record.phone_number == ""
        assert record.status == "open"
        assert record.source_system == "unknown"

    def test_empty_source_becomes_unknown(self):
        assert normalize_record({}, source_system="").source_system == "unknown"


def test_normalize_records_preserves_order(sample_json_records):
    records = normalize_records(sample_json_records, source_system="partner.json")

    assert [r.contact_name for r in records] == ["Alex Kim", "Pat Ortiz"]
    assert records[0].case_external_id == "EXT-100"
    assert records[0].pet_name == "Rex"
    assert records[1].case_external_id == "42"
    assert records[1].notes == "Call back"
    assert all(r.source_system == "partner.json" for r in records)
