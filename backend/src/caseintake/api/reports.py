"""API endpoints for dashboard and report exports.

All numbers exclude soft-deleted cases.
"""

from fastapi import APIRouter, Depends, Response

from ..reports.models import DashboardSummary, MonthCount, OutcomeCount, SpeciesCount
from ..reports.service import ReportService, to_csv
from .auth import get_current_identity
from .dependencies import get_report_service

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
    dependencies=[Depends(get_current_identity)],
)


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(
    service: ReportService = Depends(get_report_service),
) -> DashboardSummary:
    """Headline counts for the dashboard."""
    return await service.summary()


@router.get("/outcomes", response_model=dict[str, list[OutcomeCount]])
async def outcomes_report(
    service: ReportService = Depends(get_report_service),
) -> dict[str, list[OutcomeCount]]:
    return {"rows": await service.outcomes()}


@router.get("/outcomes.csv")
async def outcomes_csv(
    service: ReportService = Depends(get_report_service),
) -> Response:
    rows = await service.outcomes()
    return _csv_response(to_csv(rows, ["outcome", "count"]), "outcomes_report.csv")


@router.get("/species", response_model=dict[str, list[SpeciesCount]])
async def species_report(
    service: ReportService = Depends(get_report_service),
) -> dict[str, list[SpeciesCount]]:
    return {"rows": await service.species()}


@router.get("/species.csv")
async def species_csv(
    service: ReportService = Depends(get_report_service),
) -> Response:
    rows = await service.species()
    return _csv_response(to_csv(rows, ["species", "count"]), "species_report.csv")


@router.get("/monthly", response_model=dict[str, list[MonthCount]])
async def monthly_report(
    service: ReportService = Depends(get_report_service),
) -> dict[str, list[MonthCount]]:
    """Cases created per month."""
    return {"rows": await service.monthly()}
