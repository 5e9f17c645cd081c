"""API endpoints for bulk intake.

Preview and commit are two independent calls. The preview response is
the only staging area: the client edits and selects rows, then posts the
complete records to commit.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from ..cases.models import CommitRequest, CommitResult, PreviewResponse
from ..ingestion.commit import CommitEngine
from ..ingestion.parser import UploadedFile
from ..ingestion.preview import build_preview
from .auth import CurrentIdentity, get_current_identity
from .dependencies import get_commit_engine

router = APIRouter(
    prefix="/ingest",
    tags=["ingestion"],
    dependencies=[Depends(get_current_identity)],
)


@router.post("/preview", response_model=PreviewResponse)
async def preview_upload(
    files: list[UploadFile] = File(...),
) -> PreviewResponse:
    """Parse and normalize uploaded CSV/JSON files for review.

    A malformed file is reported on its own entry; the other files are
    still previewed.
    """
    uploads = []
    for f in files:
        content = await f.read()
        await f.close()
        uploads.append(
            UploadedFile(
                filename=f.filename or "upload",
                mimetype=f.content_type,
                content=content,
            )
        )
    return build_preview(uploads)


@router.post("/commit", response_model=CommitResult)
async def commit_records(
    request: CommitRequest,
    identity: CurrentIdentity,
    engine: CommitEngine = Depends(get_commit_engine),
) -> CommitResult:
    """Persist reviewed records in one transaction."""
    return await engine.commit(request.records, identity)
