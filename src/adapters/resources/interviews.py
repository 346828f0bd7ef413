"""Cliente de entrevistas: agenda, feedback y metadatos de programación.

Las lecturas degradan a un resultado vacío si el servidor responde 404 (el
módulo de entrevistas no existe en todos los despliegues).
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, TypeVar

from adapters.resources.base import BaseResourceClient
from core.domain.filters import CalendarFilter, FeedbackFilter, ScheduleInterviewRequest
from core.domain.models import (
    InterviewCalendarEvent,
    InterviewCalendarResponse,
    InterviewFeedbackEntry,
    InterviewScheduleMetadata,
)
from core.errors import ApiError
from core.services.calendar_normalizer import (
    normalize_calendar_event,
    normalize_calendar_response,
    normalize_feedback_response,
    normalize_schedule_metadata,
)
from core.services.dto_builder import INTERVIEW_SCHEDULE_DTO

T = TypeVar("T")

CALENDAR_ENDPOINT = "Interviews/calendar"
FEEDBACK_ENDPOINT = "Interviews/feedback"
SCHEDULE_METADATA_ENDPOINT = "Interviews/schedule/metadata"
SCHEDULE_ENDPOINT = "Interviews"


class InterviewsClient(BaseResourceClient):
    _path = SCHEDULE_ENDPOINT

    async def _read_or_empty(
        self,
        path: str,
        params: Mapping[str, Any] | None,
        normalize: Callable[[Any], T],
    ) -> T:
        try:
            raw = await self._api.get(path, params=params)
        except ApiError as exc:
            if exc.status_code != 404:
                raise
            raw = None
        return normalize(raw)

    async def calendar(self, filter: CalendarFilter | None = None) -> InterviewCalendarResponse:
        params = (filter or CalendarFilter()).to_params()
        return await self._read_or_empty(CALENDAR_ENDPOINT, params, normalize_calendar_response)

    async def schedule_metadata(self) -> InterviewScheduleMetadata:
        return await self._read_or_empty(SCHEDULE_METADATA_ENDPOINT, None, normalize_schedule_metadata)

    async def feedback(self, filter: FeedbackFilter | None = None) -> list[InterviewFeedbackEntry]:
        params = (filter or FeedbackFilter()).to_params()
        return await self._read_or_empty(FEEDBACK_ENDPOINT, params, normalize_feedback_response)

    async def schedule(self, request: ScheduleInterviewRequest) -> InterviewCalendarEvent:
        body = INTERVIEW_SCHEDULE_DTO.build(request)
        if request.payload:
            body.update(request.payload)
        raw = await self._api.post(SCHEDULE_ENDPOINT, json=body)
        return normalize_calendar_event(raw)
