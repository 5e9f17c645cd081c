"""Case records: models, phone canonicalization and persistent storage.

Usage:
    from caseintake.cases import CaseStore, CaseCreate

    store = CaseStore(session_factory)
    case = await store.create(CaseCreate(contact_name="Jane Doe"))
    history = await store.history("904-555-1234")
"""

from .models import (
    Case,
    CaseCreate,
    CaseOutcome,
    CaseStatus,
    CaseUpdate,
    NormalizedRecord,
)
from .phone import normalize_phone, phones_match
from .store import CaseStore

__all__ = [
    "Case",
    "CaseCreate",
    "CaseOutcome",
    "CaseStatus",
    "CaseStore",
    "CaseUpdate",
    "NormalizedRecord",
    "normalize_phone",
    "phones_match",
]
