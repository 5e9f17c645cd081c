"""Transactional, idempotent bulk insert of reviewed intake records.

A batch is all-or-nothing. Records whose ``case_external_id`` already
exists are skipped without error (first write wins); any other failure
rolls back the entire batch.
"""

import time
from typing import Any, Mapping, Sequence

from sqlalchemy.exc import SQLAlchemyError

from ..cases.models import CommitResult, NormalizedRecord
from ..cases.store import (
    insert_ignoring_duplicate_external_id,
    record_to_row,
    utcnow,
)
from ..db import SessionFactory, session_scope
from ..errors import StorageError, ValidationError
from ..identity import Identity, require_active
from ..logging import log_commit_complete, log_commit_failed


def require_contacts(batch: Sequence[NormalizedRecord]) -> None:
    """Reject a batch holding records with neither contact name nor phone.

    Raises:
        ValidationError: Naming every offending row (1-based, batch order)
    """
    missing = [str(i) for i, record in enumerate(batch, start=1) if not record.has_contact]
    if missing:
        raise ValidationError(
            f"Missing contact_name and phone_number in rows: {', '.join(missing)}",
            field="records",
        )


class CommitEngine:
    """Persists a caller-supplied batch of normalized records."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def commit(
        self,
        records: Sequence[NormalizedRecord | Mapping[str, Any]],
        identity: Identity | None,
    ) -> CommitResult:
        """Insert a batch in one transaction.

        Args:
            records: Complete records to persist, in order
            identity: Authenticated caller; must be active

        Returns:
            CommitResult with the number of records submitted

        Raises:
            ValidationError: If the batch is empty or a record has no
                contact name and no phone number; nothing is persisted
            AuthError: If the caller is missing or inactive
            StorageError: On any non-dedup failure; nothing is persisted
        """
        if not records:
            raise ValidationError("No records to commit", field="records")
        require_active(identity)

        batch = [
            r if isinstance(r, NormalizedRecord) else NormalizedRecord.model_validate(r)
            for r in records
        ]
        require_contacts(batch)

        started = time.perf_counter()
        now = utcnow()
        rows = [record_to_row(record, now) for record in batch]

        try:
            async with session_scope(self._session_factory) as session:
                dialect_name = session.get_bind().dialect.name
                stmt = insert_ignoring_duplicate_external_id(dialect_name)
                await session.execute(stmt, rows)
        except SQLAlchemyError as e:
            log_commit_failed(len(batch), identity.id, str(e))
            raise StorageError(f"Commit failed: {e}") from e

        duration_ms = (time.perf_counter() - started) * 1000
        log_commit_complete(len(batch), identity.id, duration_ms)
        return CommitResult(inserted=len(batch))
