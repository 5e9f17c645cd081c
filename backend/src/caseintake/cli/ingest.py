"""CLI commands for bulk intake from local files."""

import json
import mimetypes
import sys
from pathlib import Path

import click

from ..cases.models import NormalizedRecord
from ..errors import CaseIntakeError
from ..identity import Identity
from ..ingestion.commit import CommitEngine, require_contacts
from ..ingestion.parser import UploadedFile
from ..ingestion.preview import build_preview
from ._runtime import run_with_factory


def _load_uploads(paths: tuple[str, ...]) -> list[UploadedFile]:
    uploads = []
    for path in paths:
        p = Path(path)
        mimetype, _ = mimetypes.guess_type(p.name)
        uploads.append(UploadedFile(filename=p.name, mimetype=mimetype, content=p.read_bytes()))
    return uploads


@click.group("ingest")
def ingest_group() -> None:
    """Preview and commit intake files."""
    pass


@ingest_group.command("preview")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--limit", "row_limit", default=None, type=int, help="Rows shown per file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def preview(files: tuple[str, ...], row_limit: int | None, as_json: bool) -> None:
    """Parse and normalize FILES without storing anything."""
    response = build_preview(_load_uploads(files), row_limit=row_limit)

    if as_json:
        click.echo(json.dumps(response.model_dump(mode="json"), indent=2))
        return

    for file_preview in response.previews:
        if file_preview.error:
            click.echo(f"{file_preview.filename}: ERROR {file_preview.error}", err=True)
            continue
        click.echo(f"{file_preview.filename}: {file_preview.count} records")
        for row in file_preview.rows:
            click.echo(
                f"  {row.contact_name or '-'} | {row.phone_number or '-'} | "
                f"{row.pet_species or '-'} | {row.status}"
            )


@ingest_group.command("commit")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--user-id", default="cli", help="Identity recorded for the commit")
def commit(files: tuple[str, ...], user_id: str) -> None:
    """Normalize every record in FILES and commit them as one batch.

    Files that fail to parse, or rows with neither a contact name nor a
    phone number, abort the command before anything is stored.
    """
    response = build_preview(_load_uploads(files), row_limit=sys.maxsize)

    failed = [p for p in response.previews if p.error]
    if failed:
        for p in failed:
            click.echo(f"{p.filename}: ERROR {p.error}", err=True)
        raise SystemExit(1)

    records: list[NormalizedRecord] = [row for p in response.previews for row in p.rows]
    try:
        require_contacts(records)
    except CaseIntakeError as e:
        click.echo(f"Commit rejected: {e.message}", err=True)
        raise SystemExit(1)

    async def _commit(factory):
        return await CommitEngine(factory).commit(records, Identity(id=user_id, role="staff"))

    try:
        result = run_with_factory(_commit)
    except CaseIntakeError as e:
        click.echo(f"Commit failed: {e.message}", err=True)
        raise SystemExit(1)

    click.echo(f"Submitted {result.inserted} records.")
