"""Stateless preview of uploaded intake files.

Each call parses and normalizes the uploads and returns a bounded sample
per file. Nothing is stored: the caller holds the rows, edits and selects
them, and sends the complete set back to the commit endpoint.
"""

from typing import Sequence

from ..cases.models import FilePreview, PreviewResponse
from ..config import get_settings
from ..errors import ParseError, ValidationError
from ..logging import log_preview_file
from .normalizer import normalize_records
from .parser import UploadedFile, parse_upload


def preview_file(upload: UploadedFile, row_limit: int) -> FilePreview:
    """Preview a single file; a parse failure is reported on the result."""
    try:
        raw_records = parse_upload(upload)
    except ParseError as e:
        log_preview_file(upload.filename, 0, error=e.reason)
        return FilePreview(filename=upload.filename, error=e.message)

    normalized = normalize_records(raw_records, source_system=upload.filename)
    log_preview_file(upload.filename, len(normalized))
    return FilePreview(
        filename=upload.filename,
        count=len(normalized),
        rows=normalized[:row_limit],
    )


def build_preview(
    uploads: Sequence[UploadedFile],
    row_limit: int | None = None,
) -> PreviewResponse:
    """Preview every uploaded file independently.

    Args:
        uploads: Files delivered by the upload transport
        row_limit: Rows returned per file (defaults to the configured limit);
            ``count`` always reports the full number of records

    Returns:
        One FilePreview per upload, in upload order

    Raises:
        ValidationError: If no files were uploaded
    """
    if not uploads:
        raise ValidationError("No files uploaded", field="files")

    if row_limit is None:
        row_limit = get_settings().preview_row_limit
    if row_limit < 1:
        raise ValidationError("row_limit must be at least 1", field="row_limit")

    return PreviewResponse(previews=[preview_file(u, row_limit) for u in uploads])
