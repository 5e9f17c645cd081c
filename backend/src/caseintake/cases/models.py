"""Pydantic models for intake cases.

Request models validate at the edge: a case needs a contact name or a
phone number, and status/outcome must be one of the recognized values.
The stored ``Case`` model stays tolerant so rows written by older imports
with unrecognized values still load.
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enumerations
# =============================================================================


class CaseStatus(str, Enum):
    """Recognized case statuses."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class CaseOutcome(str, Enum):
    """Recognized case outcomes."""

    PET_KEPT_IN_HOME = "pet_kept_in_home"
    REFERRED_TO_VET = "referred_to_vet"
    SURRENDERED = "surrendered"
    RETURNED_TO_OWNER = "returned_to_owner"
    OTHER = "other"


RECOGNIZED_STATUSES = frozenset(s.value for s in CaseStatus)
RECOGNIZED_OUTCOMES = frozenset(o.value for o in CaseOutcome)

# Text columns every case carries, in table order
TEXT_FIELDS = (
    "contact_name",
    "phone_number",
    "pet_name",
    "pet_species",
    "pet_breed",
    "initial_request",
    "source_system",
    "status",
    "outcome",
    "notes",
)

# Fields a full update replaces
EDITABLE_FIELDS = (
    "contact_name",
    "phone_number",
    "pet_name",
    "pet_species",
    "pet_breed",
    "initial_request",
    "status",
    "outcome",
    "notes",
)


def new_case_id() -> str:
    """Generate a canonical case identifier."""
    return str(uuid4())


def _none_to_empty(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float, bool)):
        return str(value)
    return value


# =============================================================================
# Request Models
# =============================================================================


class CaseFields(BaseModel):
    """Editable case fields with edge validation."""

    contact_name: str = ""
    phone_number: str = ""
    pet_name: str = ""
    pet_species: str = ""
    pet_breed: str = ""
    initial_request: str = ""
    status: str = CaseStatus.OPEN.value
    outcome: str = ""
    notes: str = ""

    @field_validator(
        "contact_name",
        "phone_number",
        "pet_name",
        "pet_species",
        "pet_breed",
        "initial_request",
        "outcome",
        "notes",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return CaseStatus.OPEN.value
        return value

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str) -> str:
        value = value.strip()
        if value not in RECOGNIZED_STATUSES:
            raise ValueError(
                f"status must be one of {sorted(RECOGNIZED_STATUSES)}, got {value!r}"
            )
        return value

    @field_validator("outcome")
    @classmethod
    def _check_outcome(cls, value: str) -> str:
        value = value.strip()
        if value and value not in RECOGNIZED_OUTCOMES:
            raise ValueError(
                f"outcome must be empty or one of {sorted(RECOGNIZED_OUTCOMES)}, got {value!r}"
            )
        return value

    @model_validator(mode="after")
    def _require_contact(self) -> "CaseFields":
        if not self.contact_name.strip() and not self.phone_number.strip():
            raise ValueError("contact_name or phone_number is required")
        return self


class CaseCreate(CaseFields):
    """Request to create a case by manual entry."""

    case_id: str | None = Field(default=None, description="Assigned by the store if absent")
    case_external_id: str | None = None
    source_system: str = "manual"

    @field_validator("case_id", "case_external_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("source_system", mode="before")
    @classmethod
    def _default_source(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "manual"
        return value


class CaseUpdate(CaseFields):
    """Full replacement of a case's editable fields."""


# =============================================================================
# Stored Case
# =============================================================================


class Case(BaseModel):
    """A stored case row.

    ``status`` and ``outcome`` are plain strings here; legacy rows may hold
    values outside the recognized sets.
    """

    id: int
    case_id: str
    case_external_id: str | None = None
    contact_name: str = ""
    phone_number: str = ""
    pet_name: str = ""
    pet_species: str = ""
    pet_breed: str = ""
    initial_request: str = ""
    source_system: str = ""
    status: str = ""
    outcome: str = ""
    notes: str = ""
    deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @property
    def has_recognized_status(self) -> bool:
        return self.status in RECOGNIZED_STATUSES

    @property
    def has_recognized_outcome(self) -> bool:
        return not self.outcome or self.outcome in RECOGNIZED_OUTCOMES


# =============================================================================
# Ingestion Models
# =============================================================================


class NormalizedRecord(BaseModel):
    """A record in the canonical case schema, ready for review and commit.

    ``case_id`` is provisional until the record is committed. Commit requests
    carry these records in full; they never refer back to a preview.
    """

    case_id: str | None = None
    case_external_id: str | None = None
    contact_name: str = ""
    phone_number: str = ""
    pet_name: str = ""
    pet_species: str = ""
    pet_breed: str = ""
    initial_request: str = ""
    source_system: str = ""
    status: str = CaseStatus.OPEN.value
    outcome: str = ""
    notes: str = ""

    @field_validator(
        "contact_name",
        "phone_number",
        "pet_name",
        "pet_species",
        "pet_breed",
        "initial_request",
        "source_system",
        "outcome",
        "notes",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or value == "":
            return CaseStatus.OPEN.value
        return _none_to_empty(value)

    @field_validator("case_id", "case_external_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def has_contact(self) -> bool:
        """True when the record carries a contact name or a phone number."""
        return bool(self.contact_name.strip() or self.phone_number.strip())


class CommitRequest(BaseModel):
    """Self-contained batch of reviewed records to persist."""

    records: list[NormalizedRecord]


class CommitResult(BaseModel):
    """Outcome of a batch commit.

    ``inserted`` is the number of records submitted; records skipped by
    external-id dedup are included in it.
    """

    inserted: int


class FilePreview(BaseModel):
    """Preview of one uploaded file."""

    filename: str
    count: int = 0
    rows: list[NormalizedRecord] = Field(default_factory=list)
    error: str | None = None


class PreviewResponse(BaseModel):
    """Preview of every file in one upload."""

    previews: list[FilePreview]


class CaseSearchResponse(BaseModel):
    """Result wrapper for search and history queries."""

    results: list[Case]
