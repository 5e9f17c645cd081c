"""Response models for case reports."""

from pydantic import BaseModel


class OutcomeCount(BaseModel):
    outcome: str
    count: int


class SpeciesCount(BaseModel):
    species: str
    count: int


class MonthCount(BaseModel):
    month: str
    count: int


class RequestCount(BaseModel):
    request: str
    count: int


class SourceCount(BaseModel):
    source: str
    count: int


class DashboardSummary(BaseModel):
    """Headline numbers for the staff dashboard."""

    total_cases_this_month: int = 0
    total_cases_all: int = 0
    open_cases: int = 0
    top_requests_this_month: list[RequestCount] = []
    cases_by_source: list[SourceCount] = []
