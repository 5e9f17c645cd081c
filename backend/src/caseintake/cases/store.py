"""Persistent case storage: CRUD, search and phone-history queries.

Every call opens its own scoped session from the factory handed to the
store; there is no shared session between calls.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator

from sqlalchemy import Insert, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..db import SessionFactory, session_scope
from ..errors import NotFoundError, StorageError, ValidationError
from ..logging import get_context_logger, log_case_mutation
from .models import (
    EDITABLE_FIELDS,
    Case,
    CaseCreate,
    CaseUpdate,
    NormalizedRecord,
    new_case_id,
)
from .phone import normalized_phone_column, require_phone_query
from .tables import cases_table

logger = get_context_logger(__name__, component="case_store")


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the way rows store it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def insert_ignoring_duplicate_external_id(dialect_name: str) -> Insert:
    """Build an INSERT that silently skips rows whose external id exists.

    Only a conflict on ``case_external_id`` is ignored; any other
    constraint violation still raises.
    """
    if dialect_name == "postgresql":
        stmt = postgresql.insert(cases_table)
    elif dialect_name == "sqlite":
        stmt = sqlite.insert(cases_table)
    else:
        raise StorageError(f"Unsupported database dialect: {dialect_name}")
    return stmt.on_conflict_do_nothing(index_elements=[cases_table.c.case_external_id])


def record_to_row(record: NormalizedRecord, now: datetime) -> dict[str, Any]:
    """Map a normalized record onto insertable column values."""
    return {
        "case_id": record.case_id or new_case_id(),
        "case_external_id": record.case_external_id,
        "contact_name": record.contact_name,
        "phone_number": record.phone_number,
        "pet_name": record.pet_name,
        "pet_species": record.pet_species,
        "pet_breed": record.pet_breed,
        "initial_request": record.initial_request,
        "source_system": record.source_system,
        "status": record.status or "open",
        "outcome": record.outcome,
        "notes": record.notes,
        "deleted": False,
        "created_at": now,
        "updated_at": now,
    }


def _row_to_case(row: Any) -> Case:
    """Convert a database row to a Case object."""
    return Case.model_validate(dict(row._mapping))


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CaseStore:
    """Case lifecycle operations over an explicit session factory.

    Cases are never physically removed: ``soft_delete`` and ``recover``
    only flip the ``deleted`` flag.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        default_limit: int | None = None,
        max_limit: int | None = None,
    ):
        """Initialize the store.

        Args:
            session_factory: Factory producing one session per operation
            default_limit: Search limit when the caller gives none
            max_limit: Upper bound applied to any search limit
        """
        settings = get_settings()
        self._session_factory = session_factory
        self.default_limit = default_limit or settings.search_default_limit
        self.max_limit = max_limit or settings.search_max_limit

    @property
    def session_factory(self) -> SessionFactory:
        return self._session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        """Scoped session that reports storage failures as StorageError."""
        try:
            async with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Storage operation failed: {e}")
            raise StorageError(f"Storage operation failed: {e}") from e

    async def _fetch(self, session: AsyncSession, case_id: str) -> Case:
        result = await session.execute(
            select(cases_table).where(cases_table.c.case_id == case_id)
        )
        row = result.fetchone()
        if row is None:
            raise NotFoundError("Case", case_id)
        return _row_to_case(row)

    @staticmethod
    def _require_case_id(case_id: str | None) -> str:
        if not case_id or not str(case_id).strip():
            raise ValidationError("case_id is required", field="case_id")
        return str(case_id).strip()

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(self, data: CaseCreate) -> Case:
        """Insert a manually entered case.

        Args:
            data: Validated case fields; ``case_id`` is generated if absent

        Returns:
            The stored case
        """
        now = utcnow()
        values = data.model_dump(exclude={"case_id"})
        values.update(
            case_id=data.case_id or new_case_id(),
            deleted=False,
            created_at=now,
            updated_at=now,
        )

        async with self._session() as session:
            await session.execute(cases_table.insert().values(**values))
            case = await self._fetch(session, values["case_id"])

        log_case_mutation(case.case_id, "created")
        return case

    async def update(self, case_id: str, data: CaseUpdate) -> Case:
        """Replace every editable field of a case.

        ``case_id``, ``created_at``, ``deleted``, ``source_system`` and
        ``case_external_id`` are left untouched.

        Raises:
            NotFoundError: If no case has this id
        """
        case_id = self._require_case_id(case_id)
        values = {field: getattr(data, field) for field in EDITABLE_FIELDS}
        values["updated_at"] = utcnow()

        async with self._session() as session:
            await self._fetch(session, case_id)
            await session.execute(
                update(cases_table)
                .where(cases_table.c.case_id == case_id)
                .values(**values)
            )
            case = await self._fetch(session, case_id)

        log_case_mutation(case_id, "updated")
        return case

    async def _set_deleted(self, case_id: str, deleted: bool) -> Case:
        case_id = self._require_case_id(case_id)
        async with self._session() as session:
            await self._fetch(session, case_id)
            await session.execute(
                update(cases_table)
                .where(cases_table.c.case_id == case_id)
                .values(deleted=deleted, updated_at=utcnow())
            )
            return await self._fetch(session, case_id)

    async def soft_delete(self, case_id: str) -> Case:
        """Hide a case from default views. Idempotent."""
        case = await self._set_deleted(case_id, True)
        log_case_mutation(case.case_id, "deleted")
        return case

    async def recover(self, case_id: str) -> Case:
        """Bring a soft-deleted case back. Idempotent."""
        case = await self._set_deleted(case_id, False)
        log_case_mutation(case.case_id, "recovered")
        return case

    # =========================================================================
    # Reads
    # =========================================================================

    async def get(self, case_id: str) -> Case:
        """Get a case by its canonical id, deleted or not.

        Raises:
            ValidationError: If case_id is empty
            NotFoundError: If no case has this id
        """
        case_id = self._require_case_id(case_id)
        async with self._session() as session:
            return await self._fetch(session, case_id)

    async def search(
        self,
        query: str = "",
        limit: int | None = None,
        include_deleted: bool = False,
    ) -> list[Case]:
        """Case-insensitive substring search on contact name or phone.

        Args:
            query: Text to look for; empty matches every case
            limit: Maximum results (defaults to the configured limit)
            include_deleted: Also return soft-deleted cases

        Returns:
            Matching cases, newest created first
        """
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        limit = min(limit, self.max_limit)

        stmt = select(cases_table)
        query = (query or "").strip()
        if query:
            pattern = f"%{_escape_like(query.lower())}%"
            stmt = stmt.where(
                or_(
                    cases_table.c.contact_name.ilike(pattern, escape="\\"),
                    cases_table.c.phone_number.ilike(pattern, escape="\\"),
                )
            )
        if not include_deleted:
            stmt = stmt.where(cases_table.c.deleted.is_(False))
        stmt = stmt.order_by(
            cases_table.c.created_at.desc(), cases_table.c.id.desc()
        ).limit(limit)

        async with self._session() as session:
            result = await session.execute(stmt)
            return [_row_to_case(row) for row in result.fetchall()]

    async def history(self, phone: str) -> list[Case]:
        """Every case for a phone number, including soft-deleted ones.

        Unlike ``search``, the deleted flag is ignored: past visits stay
        visible in a caller's history.

        Raises:
            ValidationError: If the phone has no digits
        """
        normalized = require_phone_query(phone)
        stmt = (
            select(cases_table)
            .where(normalized_phone_column(cases_table.c.phone_number) == normalized)
            .order_by(cases_table.c.created_at.desc(), cases_table.c.id.desc())
        )

        async with self._session() as session:
            result = await session.execute(stmt)
            return [_row_to_case(row) for row in result.fetchall()]
