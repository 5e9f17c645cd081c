"""Mapping of arbitrary input records onto the canonical case schema.

``normalize_record`` is total: every raw record, even one with no
recognized keys, produces exactly one NormalizedRecord.
"""

from typing import Any, Mapping

from ..cases.models import CaseStatus, NormalizedRecord, new_case_id

# Canonical field -> input keys consulted in order; first non-empty wins
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "case_external_id": ("case_external_id", "case_id", "id"),
    "contact_name": ("contact_name", "name", "contact"),
    "phone_number": ("phone_number", "phone"),
    "pet_name": ("pet_name", "pet"),
    "pet_species": ("pet_species", "species"),
    "pet_breed": ("pet_breed", "breed"),
    "initial_request": ("request", "initial_request"),
    "status": ("status",),
    "outcome": ("outcome",),
    "notes": ("notes",),
}

FIELD_DEFAULTS: dict[str, str | None] = {
    "case_external_id": None,
    "status": CaseStatus.OPEN.value,
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (dict, list)):
        # Nested structures are not part of the schema
        return ""
    return str(value).strip()


def pick_first(raw: Mapping[str, Any], aliases: tuple[str, ...]) -> str:
    """Return the first non-empty value among ``aliases``, or ``""``."""
    for key in aliases:
        if key in raw:
            value = _as_text(raw[key])
            if value:
                return value
    return ""


def normalize_record(
    raw: Mapping[str, Any],
    source_system: str = "unknown",
) -> NormalizedRecord:
    """Normalize one raw record into the canonical schema.

    Args:
        raw: Loosely-typed record from the parser
        source_system: Originating filename or declared source

    Returns:
        A NormalizedRecord with a fresh provisional case_id
    """
    values: dict[str, Any] = {}
    for field, aliases in FIELD_ALIASES.items():
        value = pick_first(raw, aliases) if isinstance(raw, Mapping) else ""
        values[field] = value or FIELD_DEFAULTS.get(field, "")

    return NormalizedRecord(
        case_id=new_case_id(),
        source_system=source_system or "unknown",
        **values,
    )


def normalize_records(
    records: list[Mapping[str, Any]],
    source_system: str = "unknown",
) -> list[NormalizedRecord]:
    """Normalize a sequence of raw records, preserving order."""
    return [normalize_record(record, source_system) for record in records]
