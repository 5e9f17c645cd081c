"""Data helpers shared by the integration tests."""

from datetime import datetime
from typing import Any

from sqlalchemy import func, select

from caseintake.api.auth import create_access_token
from caseintake.cases.models import NormalizedRecord
from caseintake.cases.store import record_to_row, utcnow
from caseintake.cases.tables import cases_table
from caseintake.db import SessionFactory, session_scope
from caseintake.identity import Identity


async def insert_case(
    session_factory: SessionFactory,
    created_at: datetime | None = None,
    deleted: bool = False,
    **fields: Any,
) -> dict[str, Any]:
    """Insert one case row directly, bypassing validation."""
    row = record_to_row(NormalizedRecord(**fields), created_at or utcnow())
    row["deleted"] = deleted
    async with session_scope(session_factory) as session:
        await session.execute(cases_table.insert().values(**row))
    return row


async def count_cases(session_factory: SessionFactory, **filters: Any) -> int:
    """Count stored rows, optionally filtered by column equality."""
    stmt = select(func.count()).select_from(cases_table)
    for column, value in filters.items():
        stmt = stmt.where(cases_table.c[column] == value)
    async with session_scope(session_factory) as session:
        return await session.scalar(stmt)


def bearer(identity: Identity) -> dict[str, str]:
    """Authorization header carrying a token for ``identity``."""
    return {"Authorization": f"Bearer {create_access_token(identity)}"}
