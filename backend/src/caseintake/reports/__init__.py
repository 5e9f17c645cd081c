"""Read-only case reports for the dashboard and CSV exports."""

from .models import (
    DashboardSummary,
    MonthCount,
    OutcomeCount,
    RequestCount,
    SourceCount,
    SpeciesCount,
)
from .service import ReportService, to_csv

__all__ = [
    "DashboardSummary",
    "MonthCount",
    "OutcomeCount",
    "ReportService",
    "RequestCount",
    "SourceCount",
    "SpeciesCount",
    "to_csv",
]
