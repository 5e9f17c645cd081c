"""Read-only aggregate queries over stored cases.

Every report excludes soft-deleted cases, the same convention the case
search uses by default.
"""

import csv
from datetime import datetime
from io import StringIO
from typing import Any, Iterable, Sequence

from pydantic import BaseModel
from sqlalchemy import func, literal_column, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from ..cases.store import utcnow
from ..cases.tables import cases_table
from ..db import SessionFactory, session_scope
from ..errors import StorageError
from .models import (
    DashboardSummary,
    MonthCount,
    OutcomeCount,
    RequestCount,
    SourceCount,
    SpeciesCount,
)

TOP_REQUESTS_LIMIT = 8

_active = cases_table.c.deleted.is_(False)


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """First instant of ``now``'s month and of the following month."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def _month_expr(dialect_name: str) -> ColumnElement:
    if dialect_name == "postgresql":
        return func.to_char(cases_table.c.created_at, literal_column("'YYYY-MM'"))
    return func.strftime(literal_column("'%Y-%m'"), cases_table.c.created_at)


def to_csv(rows: Iterable[BaseModel | dict[str, Any]], headers: Sequence[str]) -> str:
    """Render report rows as CSV text with a header line."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        data = row.model_dump() if isinstance(row, BaseModel) else row
        writer.writerow(["" if data.get(h) is None else data.get(h) for h in headers])
    return output.getvalue()


class ReportService:
    """Aggregates by outcome, species, month and source."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def _grouped(
        self, session: AsyncSession, column: ColumnElement, *where: ColumnElement
    ) -> list[tuple[str, int]]:
        count = func.count().label("count")
        stmt = (
            select(column.label("key"), count)
            .where(_active, *where)
            .group_by(column)
            .order_by(count.desc(), column)
        )
        result = await session.execute(stmt)
        return [(row.key or "", row.count) for row in result.fetchall()]

    async def _run(self, fn):
        try:
            async with session_scope(self._session_factory) as session:
                return await fn(session)
        except SQLAlchemyError as e:
            raise StorageError(f"Report query failed: {e}") from e

    async def outcomes(self) -> list[OutcomeCount]:
        """Case counts per outcome, most common first."""

        async def query(session):
            rows = await self._grouped(session, cases_table.c.outcome)
            return [OutcomeCount(outcome=k, count=c) for k, c in rows]

        return await self._run(query)

    async def species(self) -> list[SpeciesCount]:
        """Case counts per pet species, most common first."""

        async def query(session):
            rows = await self._grouped(session, cases_table.c.pet_species)
            return [SpeciesCount(species=k, count=c) for k, c in rows]

        return await self._run(query)

    async def monthly(self) -> list[MonthCount]:
        """Case counts per creation month (YYYY-MM), oldest first."""

        async def query(session):
            month = _month_expr(session.get_bind().dialect.name).label("month")
            stmt = (
                select(month, func.count().label("count"))
                .where(_active)
                .group_by(month)
                .order_by(month)
            )
            result = await session.execute(stmt)
            return [MonthCount(month=row.month, count=row.count) for row in result.fetchall()]

        return await self._run(query)

    async def summary(self, now: datetime | None = None) -> DashboardSummary:
        """Dashboard numbers; ``now`` fixes the current month (defaults to UTC now)."""
        start, end = month_bounds(now or utcnow())
        this_month = (cases_table.c.created_at >= start, cases_table.c.created_at < end)

        async def query(session):
            total_month = await session.scalar(
                select(func.count()).select_from(cases_table).where(_active, *this_month)
            )
            total_all = await session.scalar(
                select(func.count()).select_from(cases_table).where(_active)
            )
            open_cases = await session.scalar(
                select(func.count())
                .select_from(cases_table)
                .where(
                    _active,
                    or_(
                        cases_table.c.status.is_(None),
                        cases_table.c.status == "",
                        cases_table.c.status == "open",
                    ),
                )
            )
            requests = await self._grouped(session, cases_table.c.initial_request, *this_month)
            sources = await self._grouped(session, cases_table.c.source_system)
            return DashboardSummary(
                total_cases_this_month=total_month or 0,
                total_cases_all=total_all or 0,
                open_cases=open_cases or 0,
                top_requests_this_month=[
                    RequestCount(request=k or "(unspecified)", count=c)
                    for k, c in requests[:TOP_REQUESTS_LIMIT]
                ],
                cases_by_source=[
                    SourceCount(source=k or "(unknown)", count=c) for k, c in sources
                ],
            )

        return await self._run(query)
