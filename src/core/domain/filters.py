"""Filtros de listado y peticiones de agenda.

Son dataclasses simples: el llamador los rellena y los clientes los convierten
en el mapa plano de query params que espera el backend.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

SortOrder = Literal["asc", "desc"]


def _param_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _compact(params: dict[str, Any]) -> dict[str, Any]:
    return {k: _param_value(v) for k, v in params.items() if v is not None and v != ""}


@dataclass
class ApplicationFilter:
    status: Any = None
    job_id: int | None = None
    candidate_id: int | None = None
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    page_number: int = 1
    page_size: int = 10
    sort_by: str | None = None
    sort_order: SortOrder | None = None

    def to_params(self) -> dict[str, Any]:
        return _compact(
            {
                "pageNumber": self.page_number or 1,
                "pageSize": self.page_size or 10,
                "status": self.status,
                "jobId": self.job_id,
                "candidateId": self.candidate_id,
                "startDate": self.start_date,
                "endDate": self.end_date,
                "sortBy": self.sort_by,
                "sortOrder": self.sort_order,
            }
        )


@dataclass
class OfferFilter:
    status: str | None = None
    recruiter_id: int | None = None
    candidate_id: int | None = None
    job_id: int | None = None
    search_term: str | None = None
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    page_number: int = 1
    page_size: int = 20
    sort_by: str | None = None
    sort_order: SortOrder | None = None

    def to_params(self) -> dict[str, Any]:
        return _compact(
            {
                "pageNumber": self.page_number,
                "pageSize": self.page_size,
                "status": self.status,
                "recruiterId": self.recruiter_id,
                "candidateId": self.candidate_id,
                "jobId": self.job_id,
                "searchTerm": self.search_term.strip() if self.search_term else None,
                "startDate": self.start_date,
                "endDate": self.end_date,
                "sortBy": self.sort_by,
                "sortOrder": self.sort_order,
            }
        )


@dataclass
class CalendarFilter:
    timeframe: Literal["today", "week", "month", "all"] | None = None
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None
    interviewer_id: int | str | None = None
    job_id: int | None = None
    stage: str | None = None

    def to_params(self) -> dict[str, Any]:
        return _compact(
            {
                "timeframe": self.timeframe,
                "startDate": self.start_date,
                "endDate": self.end_date,
                "interviewerId": self.interviewer_id,
                "jobId": self.job_id,
                "stage": self.stage,
            }
        )


@dataclass
class FeedbackFilter:
    status: str | None = None
    verdict: str | None = None
    job_id: int | None = None
    interviewer_id: int | str | None = None
    start_date: date | datetime | None = None
    end_date: date | datetime | None = None

    def to_params(self) -> dict[str, Any]:
        return _compact(
            {
                "status": self.status,
                "verdict": self.verdict,
                "jobId": self.job_id,
                "interviewerId": self.interviewer_id,
                "startDate": self.start_date,
                "endDate": self.end_date,
            }
        )


@dataclass
class ScheduleInterviewRequest:
    """Petición de agenda tal como la rellena la UI.

    `payload` se fusiona encima del cuerpo final para campos que el backend
    pida y este cliente todavía no modele.
    """

    candidate_name: str
    stage: str
    scheduled_date: str
    scheduled_time: str
    timezone: str
    duration_minutes: int
    location_type: Literal["virtual", "onsite"] = "virtual"
    interviewers: list[str] = field(default_factory=list)
    candidate_id: int | None = None
    candidate_email: str | None = None
    job_id: int | None = None
    job_title: str | None = None
    meeting_link: str | None = None
    meeting_provider: str | None = None
    location_detail: str | None = None
    notes_for_candidate: str | None = None
    notes_for_interviewers: str | None = None
    reminders: list[str] = field(default_factory=list)
    send_calendar_invite: bool | None = None
    share_prep_docs: bool | None = None
    payload: dict[str, Any] | None = None
