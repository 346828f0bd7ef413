"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación y documentación autocontenida (Field) sin acoplar el Core
  a librerías de I/O.
- El backend mezcla camelCase y PascalCase; `WireModel` acepta ambos al leer.

Nota:
- Estos modelos describen *qué* devuelve el backend ya normalizado, no *cómo*
  se obtiene.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.domain.status import DEFAULT_STATUS_CODEC, ApplicationStatus
from core.services.coercion import string_list, to_amount, to_datetime, to_datetime_or_now, to_int, to_text

T = TypeVar("T")


def _camelize_keys(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    out = dict(data)
    for key, value in data.items():
        if isinstance(key, str) and key[:1].isupper():
            out.setdefault(key[:1].lower() + key[1:], value)
    return out


class WireModel(BaseModel):
    """Base para entidades leídas del backend (camelCase o PascalCase)."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_pascal_case(cls, data: Any) -> Any:
        return _camelize_keys(data)


class Page(BaseModel, Generic[T]):
    """Página de resultados, sea cual sea la forma en que la envió el servidor."""

    items: list[T] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0)
    page_number: int = Field(default=1, ge=0)
    page_size: int = Field(default=0, ge=0)
    has_previous_page: bool = False
    has_next_page: bool = False


class Session(BaseModel):
    """Instantánea de la sesión autenticada.

    La expiración y el aviso los calcula `SessionClock`; este modelo solo los
    transporta hacia la UI.
    """

    token: str = Field(..., min_length=1, description="Bearer token crudo.")
    user: dict[str, Any] = Field(default_factory=dict, description="Usuario/rol devuelto en el login.")
    expires_at: datetime | None = Field(default=None, description="Instante `exp` del token (UTC).")
    warning_minutes_left: int | None = Field(
        default=None,
        description="Minutos restantes cuando la sesión está por expirar; 0 = expirada.",
    )

    @property
    def role(self) -> str:
        return str(self.user.get("role") or self.user.get("Role") or "").lower()


class Job(WireModel):
    id: int | None = None
    public_id: str | None = None
    title: str = ""
    description: str = ""
    department: str = ""
    location: str = ""
    salary: float | None = None
    salary_range: str | None = None
    requirements: list[str] = Field(default_factory=list)
    posted_date: datetime | None = None
    closing_date: datetime | None = None
    is_active: bool = True
    row_version: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _lenient_id(cls, value: Any) -> Any:
        return to_int(value)

    @field_validator("title", "description", "department", "location", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        return to_text(value, "")

    @field_validator("salary", mode="before")
    @classmethod
    def _lenient_salary(cls, value: Any) -> Any:
        return to_amount(value)

    @field_validator("requirements", mode="before")
    @classmethod
    def _split_requirements(cls, value: Any) -> Any:
        # "Python, SQL" llega tal cual desde algunos endpoints públicos.
        return string_list(value)

    @field_validator("posted_date", "closing_date", mode="before")
    @classmethod
    def _lenient_dates(cls, value: Any) -> Any:
        return to_datetime(value)

    @field_validator("is_active", mode="before")
    @classmethod
    def _active_by_default(cls, value: Any) -> Any:
        return True if value is None else value


class Employment(WireModel):
    """Entrada del historial laboral del candidato."""

    designation: str | None = None
    organization: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    currently_working: bool = False

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _lenient_dates(cls, value: Any) -> Any:
        return to_datetime(value)

    @field_validator("currently_working", mode="before")
    @classmethod
    def _not_current_by_default(cls, value: Any) -> Any:
        return False if value is None else value


def _it_skill_names(value: Any) -> list[str]:
    # `itSkills` llega como [{"skill": "Python", "version": ...}, ...].
    if not isinstance(value, list):
        return string_list(value)
    names = [item.get("skill") or item.get("Skill") if isinstance(item, dict) else item for item in value]
    return string_list(names)


class Candidate(WireModel):
    id: int | None = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None
    resume_url: str | None = None
    resume_headline: str | None = None
    key_skills: list[str] = Field(default_factory=list)
    it_skills: list[str] = Field(default_factory=list)
    skills: str | None = Field(default=None, description="Campo heredado: habilidades separadas por comas.")
    experience: str | None = Field(default=None, description="Campo heredado, p. ej. '5 years'.")
    employment: list[Employment] = Field(default_factory=list)
    profile_summary: str | None = None
    is_deleted: bool = False
    row_version: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _lenient_id(cls, value: Any) -> Any:
        return to_int(value)

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        return to_text(value, "")

    @field_validator("key_skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> Any:
        return string_list(value)

    @field_validator("it_skills", mode="before")
    @classmethod
    def _it_skills(cls, value: Any) -> Any:
        return _it_skill_names(value)

    @field_validator("skills", "experience", mode="before")
    @classmethod
    def _legacy_text(cls, value: Any) -> Any:
        return to_text(value)

    @field_validator("employment", mode="before")
    @classmethod
    def _employment_rows(cls, value: Any) -> Any:
        return [row for row in value if isinstance(row, dict)] if isinstance(value, list) else []

    @field_validator("is_deleted", mode="before")
    @classmethod
    def _not_deleted_by_default(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def _hydrate_status(value: Any) -> Any:
    return DEFAULT_STATUS_CODEC.to_canonical(value) or value


class ApplicationStatusHistory(WireModel):
    id: int | None = None
    application_id: int | None = None
    status: ApplicationStatus | str | int | None = None
    changed_date: datetime | None = None
    changed_by: str | None = None
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _resolve_status(cls, value: Any) -> Any:
        return _hydrate_status(value)


class JobApplication(WireModel):
    id: int | None = None
    job_id: int | None = None
    candidate_id: int | None = None
    status: ApplicationStatus | str | int | None = None
    applied_date: datetime | None = None
    notes: str | None = None
    job: dict[str, Any] | None = None
    candidate: dict[str, Any] | None = None
    status_history: list[ApplicationStatusHistory] = Field(default_factory=list)
    row_version: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _resolve_status(cls, value: Any) -> Any:
        return _hydrate_status(value)

    @field_validator("status_history", mode="before")
    @classmethod
    def _none_history(cls, value: Any) -> Any:
        return value or []


class Onboarding(WireModel):
    id: int | None = None
    candidate_id: int | None = None
    candidate_name: str | None = None
    job_title: str | None = None
    start_date: datetime | None = None
    status: str | None = None
    progress: float | None = None


class OfferStatus(str, Enum):
    ACCEPTED = "Accepted"
    PENDING = "Pending"
    NEGOTIATION = "Negotiation"
    DRAFT = "Draft"
    DECLINED = "Declined"
    WITHDRAWN = "Withdrawn"
    EXPIRED = "Expired"


class OfferLetter(BaseModel):
    """Carta de oferta normalizada desde cualquier forma del servidor."""

    id: str
    candidate_id: int | float | None = None
    candidate_name: str = "Unknown candidate"
    candidate_email: str | None = None
    job_id: int | float | None = None
    role: str = "Untitled role"
    recruiter: str | None = None
    recruiter_id: int | float | None = None
    recruiter_name: str | None = None
    sent_on: datetime | None = None
    target_start: datetime | None = None
    status: OfferStatus = OfferStatus.PENDING
    last_touched: datetime | None = None
    compensation: Any = None
    location: str | None = None
    attachments: int | float | None = None
    notes: str | None = None
    acceptance_probability: float | None = Field(default=None, ge=0.0, le=1.0)
    offer_link: str | None = None
    metadata: dict[str, Any] | None = None


class InterviewFormat(str, Enum):
    VIRTUAL = "Virtual"
    IN_PERSON = "In person"
    ONSITE = "Onsite"


class FeedbackVerdict(str, Enum):
    ADVANCE = "Advance"
    HOLD = "Hold for next round"
    REJECT = "Reject"


class InterviewCalendarEvent(BaseModel):
    id: str
    candidate_id: Any = None
    candidate: Any = "Pending assignment"
    candidate_email: str | None = None
    role: str = "Untitled role"
    job_id: Any = None
    stage: str = "Interview"
    interviewer_id: int | str | None = None
    interviewer: Any = "Hiring team"
    date_time: datetime
    duration: str | None = None
    duration_minutes: int | None = None
    location: Any = None
    type: InterviewFormat = InterviewFormat.VIRTUAL
    meeting_link: str | None = None
    notes: str | None = None
    timezone: str | None = None


class InterviewCalendarResponse(BaseModel):
    events: list[InterviewCalendarEvent] = Field(default_factory=list)
    total_count: int = 0
    generated_at: datetime | None = None


class InterviewTimeSlot(BaseModel):
    id: str | None = None
    label: str
    start: datetime
    timezone: str = "UTC"
    duration_minutes: int | None = None


class LocationOption(BaseModel):
    id: str
    label: str


class InterviewScheduleMetadata(BaseModel):
    stage_options: list[str] = Field(default_factory=list)
    interviewer_options: list[str] = Field(default_factory=list)
    timezone_options: list[str] = Field(default_factory=list)
    reminder_options: list[str] = Field(default_factory=list)
    location_options: list[LocationOption] = Field(default_factory=list)
    suggested_slots: list[InterviewTimeSlot] = Field(default_factory=list)
    default_timezone: str | None = None
    meeting_providers: list[str] = Field(default_factory=list)
    default_provider: str | None = None


class InterviewFeedbackEntry(BaseModel):
    id: str
    candidate: Any = "Unknown candidate"
    role: str = "Unknown role"
    stage: str = "Interview"
    interviewer: Any = "Panel"
    submitted_on: datetime
    score: float = 0
    verdict: FeedbackVerdict = FeedbackVerdict.REJECT
    strengths: list[str] = Field(default_factory=list)
    reservations: list[str] = Field(default_factory=list)
    notes: str | None = None
    status: str = "Pending decision"
    next_actions: str | None = None


class MatchRequirements(BaseModel):
    skills_required: bool = False
    experience_required: bool = False


class JobMatch(BaseModel):
    """Resultado de comparar el perfil de un candidato con una oferta."""

    job: Job
    match_percentage: int = Field(default=0, ge=0, le=100)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    requirements_met: MatchRequirements = Field(default_factory=MatchRequirements)


class NotificationType(str, Enum):
    SKILL_MATCH = "skill-match"
    JOB_POSTING = "job-posting"
    APPLICATION_UPDATE = "application-update"


class Notification(WireModel):
    """Aviso para un candidato.

    Por qué `type` admite texto libre:
    - El backend puede añadir tipos nuevos; un tipo desconocido no debe
      dejar fuera la notificación entera.
    """

    id: str | None = None
    candidate_id: int | None = None
    job_id: int | None = None
    job_title: str = ""
    message: str = ""
    match_percentage: int = 0
    type: NotificationType | str = NotificationType.JOB_POSTING
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    action_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _lenient_id(cls, value: Any) -> Any:
        return to_text(value)

    @field_validator("job_title", "message", mode="before")
    @classmethod
    def _lenient_text(cls, value: Any) -> Any:
        return to_text(value, "")

    @field_validator("candidate_id", "job_id", mode="before")
    @classmethod
    def _lenient_ids(cls, value: Any) -> Any:
        return to_int(value)

    @field_validator("match_percentage", mode="before")
    @classmethod
    def _lenient_percentage(cls, value: Any) -> Any:
        return to_int(value, 0)

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> Any:
        if value is None:
            return NotificationType.JOB_POSTING
        try:
            return NotificationType(value)
        except ValueError:
            return value

    @field_validator("created_at", mode="before")
    @classmethod
    def _created_or_now(cls, value: Any) -> Any:
        return to_datetime_or_now(value)

    @field_validator("read", mode="before")
    @classmethod
    def _unread_by_default(cls, value: Any) -> Any:
        return False if value is None else value
