"""Unit tests for case request and record models.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from caseintake.cases.models import (
    RECOGNIZED_OUTCOMES,
    RECOGNIZED_STATUSES,
    Case,
    CaseCreate,
    CaseOutcome,
    CaseStatus,
    CaseUpdate,
    NormalizedRecord,
)


class TestCaseCreate:
    """Tests for manual-entry validation."""

    def test_minimal_case(self):
        case = CaseCreate(phone_number="904-555-1234")

        assert case.status == CaseStatus.OPEN.value
        assert case.outcome == ""
        assert case.source_system == "manual"
        assert case.case_id is None

    def test_requires_contact_or_phone(self):
        with pytest.raises(ValidationError, match="contact_name or phone_number is required"):
            CaseCreate(pet_name="Rex")

    def test_blank_contact_and_phone_rejected(self):
        with pytest.raises(ValidationError):
            CaseCreate(contact_name="  ", phone_number="")

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError, match="status"):
            CaseCreate(contact_name="Jane", status="pending")

    def test_rejects_unknown_outcome(self):
        with pytest.raises(ValidationError, match="outcome"):
            CaseCreate(contact_name="Jane", outcome="adopted")

    @pytest.mark.parametrize("status", sorted(RECOGNIZED_STATUSES))
    def test_accepts_recognized_status(self, status):
        assert CaseCreate(contact_name="Jane", status=status).status == status

    @pytest.mark.parametrize("outcome", sorted(RECOGNIZED_OUTCOMES))
    def test_accepts_recognized_outcome(self, outcome):
        assert CaseCreate(contact_name="Jane", outcome=outcome).outcome == outcome

    def test_none_fields_become_empty(self):
        case = CaseCreate(contact_name="Jane", notes=None, status=None)

        assert case.notes == ""
        assert case.status == "open"

    def test_blank_identifiers_become_none(self):
        case = CaseCreate(contact_name="Jane", case_id=" ", case_external_id="")

        assert case.case_id is None
        assert case.case_external_id is None


class TestCaseUpdate:
    def test_update_validates_like_create(self):
        update = CaseUpdate(contact_name="Jane", status="closed", outcome="surrendered")

        assert update.status == "closed"
        assert update.outcome == CaseOutcome.SURRENDERED.value

    def test_update_requires_contact_or_phone(self):
        with pytest.raises(ValidationError):
            CaseUpdate(status="closed")


class TestStoredCase:
    """Tests for the tolerant stored-row model."""

    def test_loads_legacy_values(self):
        now = datetime(2024, 3, 1, 12, 0, 0)
        case = Case(
            id=1,
            case_id="c-1",
            status="pending",
            outcome="adopted",
            notes=None,
            created_at=now,
            updated_at=now,
        )

        assert case.status == "pending"
        assert case.notes == ""
        assert not case.has_recognized_status
        assert not case.has_recognized_outcome

    def test_recognized_values(self):
        now = datetime(2024, 3, 1)
        case = Case(id=1, case_id="c-1", status="open", created_at=now, updated_at=now)

        assert case.has_recognized_status
        assert case.has_recognized_outcome


class TestNormalizedRecord:
    def test_defaults(self):
        record = NormalizedRecord()

        assert record.status == "open"
        assert record.case_id is None
        assert record.contact_name == ""

    def test_numeric_external_id(self):
        assert NormalizedRecord(case_external_id=17).case_external_id == "17"

    def test_blank_external_id(self):
        assert NormalizedRecord(case_external_id="  ").case_external_id is None

    def test_tolerates_unknown_status(self):
        assert NormalizedRecord(status="pending").status == "pending"
