"""Request-scoped component wiring.

The session factory lives on ``app.state`` (created in the application
lifespan); each request builds its components around it.
"""

from fastapi import Depends, Request

from ..cases.store import CaseStore
from ..db import SessionFactory
from ..ingestion.commit import CommitEngine
from ..reports.service import ReportService


def get_session_factory(request: Request) -> SessionFactory:
    """Session factory created at application startup."""
    return request.app.state.session_factory


def get_case_store(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> CaseStore:
    return CaseStore(session_factory)


def get_commit_engine(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> CommitEngine:
    return CommitEngine(session_factory)


def get_report_service(
    session_factory: SessionFactory = Depends(get_session_factory),
) -> ReportService:
    return ReportService(session_factory)
