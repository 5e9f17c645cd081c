"""Pytest fixtures for integration tests.

Each test gets its own SQLite database file (through aiosqlite) with the
schema created from the table definitions.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from caseintake.api.dependencies import get_session_factory
from caseintake.cases.store import CaseStore
from caseintake.db import SessionFactory, create_engine, create_schema, create_session_factory
from caseintake.identity import Identity
from caseintake.ingestion.commit import CommitEngine

from .helpers import bearer


# =========================
# Database Fixtures
# =========================


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine over a fresh SQLite file."""
    engine = create_engine(url=f"sqlite+aiosqlite:///{tmp_path / 'cases.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> SessionFactory:
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory) -> CaseStore:
    return CaseStore(session_factory, default_limit=50, max_limit=100)


@pytest.fixture
def commit_engine(session_factory) -> CommitEngine:
    return CommitEngine(session_factory)


@pytest.fixture
def staff_identity() -> Identity:
    return Identity(id="staff-1", email="staff@example.org", name="Staff Member")


# =========================
# API Fixtures
# =========================


@pytest.fixture
def auth_headers(staff_identity) -> dict[str, str]:
    return bearer(staff_identity)


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the application, wired to the test database."""
    from main import app

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
