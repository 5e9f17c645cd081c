"""API endpoints for case lifecycle management.

Create, read, update, soft-delete and recover cases, plus name/phone
search and phone-number visit history.
"""

from fastapi import APIRouter, Depends, Query

from ..cases.models import Case, CaseCreate, CaseSearchResponse, CaseUpdate
from ..cases.store import CaseStore
from .auth import get_current_identity
from .dependencies import get_case_store

router = APIRouter(
    prefix="/cases",
    tags=["cases"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("/search", response_model=CaseSearchResponse)
async def search_cases(
    q: str = "",
    limit: int | None = Query(default=None, ge=1),
    show_deleted: bool = False,
    store: CaseStore = Depends(get_case_store),
) -> CaseSearchResponse:
    """Search by contact name or phone; deleted cases only with show_deleted."""
    results = await store.search(q, limit=limit, include_deleted=show_deleted)
    return CaseSearchResponse(results=results)


@router.get("/history", response_model=CaseSearchResponse)
async def phone_history(
    phone: str = "",
    store: CaseStore = Depends(get_case_store),
) -> CaseSearchResponse:
    """All past cases for a phone number, deleted ones included."""
    results = await store.history(phone)
    return CaseSearchResponse(results=results)


@router.post("", response_model=Case, status_code=201)
async def create_case(
    request: CaseCreate,
    store: CaseStore = Depends(get_case_store),
) -> Case:
    """Create a case by manual entry."""
    return await store.create(request)


@router.get("/{case_id}", response_model=Case)
async def get_case(
    case_id: str,
    store: CaseStore = Depends(get_case_store),
) -> Case:
    """Get case details."""
    return await store.get(case_id)


@router.put("/{case_id}", response_model=Case)
async def update_case(
    case_id: str,
    request: CaseUpdate,
    store: CaseStore = Depends(get_case_store),
) -> Case:
    """Replace the editable fields of a case."""
    return await store.update(case_id, request)


@router.delete("/{case_id}", response_model=Case)
async def delete_case(
    case_id: str,
    store: CaseStore = Depends(get_case_store),
) -> Case:
    """Soft-delete a case."""
    return await store.soft_delete(case_id)


@router.post("/{case_id}/recover", response_model=Case)
async def recover_case(
    case_id: str,
    store: CaseStore = Depends(get_case_store),
) -> Case:
    """Recover a soft-deleted case."""
    return await store.recover(case_id)
