"""Shared helpers for CLI commands."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from ..db import SessionFactory, create_engine, create_session_factory

T = TypeVar("T")


def run_with_factory(fn: Callable[[SessionFactory], Awaitable[T]], url: str | None = None) -> T:
    """Run ``fn`` with a session factory bound to a fresh engine."""

    async def _run() -> T:
        engine = create_engine(url=url)
        try:
            return await fn(create_session_factory(engine))
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def case_line(case: Any) -> str:
    """One-line human summary of a case."""
    flag = " [deleted]" if case.deleted else ""
    return (
        f"{case.case_id}  {case.created_at:%Y-%m-%d}  "
        f"{case.contact_name or '-'}  {case.phone_number or '-'}  "
        f"{case.status}{flag}"
    )
