"""Construcción de DTOs canónicos a partir de entrada laxa.

Responsabilidad:
- Resolver cada campo desde una lista ordenada de alias (camelCase,
  PascalCase, snake_case) en un único sitio (`resolve_alias`).
- Normalizar valores (trim, listas delimitadas, fechas ISO-8601, importes).
- Decidir qué campos opcionales viajan (id, row version, secretos).

El builder es puro: misma entrada, mismo DTO. No hace I/O ni consulta el reloj.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from core.domain.status import DEFAULT_STATUS_CODEC, StatusCodec, StatusEncoding


class FieldKind(str, Enum):
    RAW = "raw"
    TEXT = "text"
    LIST = "list"
    DATE = "date"
    CURRENCY = "currency"
    STATUS = "status"


class Gate(str, Enum):
    ID = "id"
    ROW_VERSION = "row_version"
    SECRET = "secret"


@dataclass(frozen=True)
class FieldSpec:
    """Un campo del DTO: de dónde se lee y con qué claves se emite."""

    wire_keys: tuple[str, ...]
    aliases: tuple[str, ...]
    kind: FieldKind = FieldKind.RAW
    gate: Gate | None = None
    fallback_aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class BuildOptions:
    include_id: bool = False
    include_row_version: bool = False
    include_secrets: bool = False
    status_encoding: StatusEncoding = StatusEncoding.CANONICAL

    def allows(self, gate: Gate | None) -> bool:
        if gate is None:
            return True
        if gate is Gate.ID:
            return self.include_id
        if gate is Gate.ROW_VERSION:
            return self.include_row_version
        return self.include_secrets


CREATE_OPTIONS = BuildOptions()
UPDATE_OPTIONS = BuildOptions(include_id=True, include_row_version=True)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def name_aliases(pascal_name: str, *extra: str) -> tuple[str, ...]:
    """`FirstName` -> ("firstName", "FirstName", "first_name", *extra)."""

    camel = pascal_name[:1].lower() + pascal_name[1:]
    out: list[str] = []
    for alias in (camel, pascal_name, _snake(pascal_name), *extra):
        if alias not in out:
            out.append(alias)
    return tuple(out)


def pascal(
    name: str,
    kind: FieldKind = FieldKind.RAW,
    *,
    gate: Gate | None = None,
    also: Sequence[str] = (),
    fallback: Sequence[str] = (),
) -> FieldSpec:
    return FieldSpec(
        wire_keys=(name,),
        aliases=name_aliases(name, *also),
        kind=kind,
        gate=gate,
        fallback_aliases=tuple(fallback),
    )


def camel(name: str, kind: FieldKind = FieldKind.RAW, *, also: Sequence[str] = ()) -> FieldSpec:
    pascal_name = name[:1].upper() + name[1:]
    return FieldSpec(wire_keys=(name,), aliases=name_aliases(pascal_name, *also), kind=kind)


def dual(name: str, kind: FieldKind = FieldKind.RAW, *, also: Sequence[str] = ()) -> FieldSpec:
    """Campo emitido a la vez en camelCase y PascalCase."""

    pascal_name = name[:1].upper() + name[1:]
    return FieldSpec(
        wire_keys=(name, pascal_name),
        aliases=name_aliases(pascal_name, *also),
        kind=kind,
    )


def as_mapping(source: Any) -> Mapping[str, Any]:
    if source is None:
        return {}
    if isinstance(source, Mapping):
        return source
    if isinstance(source, BaseModel):
        return source.model_dump()
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return dataclasses.asdict(source)
    if hasattr(source, "__dict__"):
        return vars(source)
    raise TypeError(f"Cannot read DTO fields from {type(source).__name__}")


def resolve_alias(source: Mapping[str, Any], aliases: Sequence[str]) -> Any | None:
    """Devuelve el valor del primer alias presente (None cuenta como ausente)."""

    for alias in aliases:
        value = source.get(alias)
        if value is not None:
            return value
    return None


_LIST_SPLIT_RE = re.compile(r"[\r\n,;]+")
_LEADING_NUMBER_RE = re.compile(r"\d[\d,]*")

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%Y/%m/%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)


def normalize_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def normalize_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set)):
        items = [str(v).strip() for v in value]
    elif isinstance(value, str):
        items = [part.strip() for part in _LIST_SPLIT_RE.split(value)]
    else:
        return None
    return [item for item in items if item]


def format_iso(moment: datetime) -> str:
    """ISO-8601 en UTC con milisegundos y sufijo `Z`."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_datetime(value: Any) -> datetime | None:
    """Parsea fechas en las formas habituales del backend y de formularios.

    Devuelve `None` si no se puede interpretar; nunca lanza.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        # Epoch en milisegundos, como lo emite JavaScript.
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def normalize_date(value: Any) -> str | None:
    if value is None or value == "":
        return None
    parsed = parse_datetime(value)
    if parsed is not None:
        return format_iso(parsed)
    if isinstance(value, str):
        # Sin interpretar: mejor que decida el servidor que perder el dato.
        return value.strip() or None
    return None


def extract_leading_number(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    match = _LEADING_NUMBER_RE.search(str(value))
    if not match:
        return None
    return int(match.group(0).replace(",", ""))


class DtoBuilder:
    """Convierte entrada laxa en el DTO canónico de un recurso."""

    def __init__(self, fields: Sequence[FieldSpec], codec: StatusCodec = DEFAULT_STATUS_CODEC) -> None:
        self._fields = tuple(fields)
        self._codec = codec

    @property
    def fields(self) -> tuple[FieldSpec, ...]:
        return self._fields

    def build(self, source: Any, options: BuildOptions = CREATE_OPTIONS) -> dict[str, Any]:
        data = as_mapping(source)
        dto: dict[str, Any] = {}
        for entry in self._fields:
            if not options.allows(entry.gate):
                continue
            value = self._field_value(entry, data, options)
            if value is None:
                continue
            for key in entry.wire_keys:
                dto[key] = value
        return dto

    def _field_value(self, entry: FieldSpec, data: Mapping[str, Any], options: BuildOptions) -> Any:
        raw = resolve_alias(data, entry.aliases)

        if entry.kind is FieldKind.CURRENCY:
            if raw is not None:
                if isinstance(raw, (int, float)) and not isinstance(raw, bool):
                    return raw
                parsed = extract_leading_number(raw)
                return parsed if parsed is not None else raw
            return extract_leading_number(resolve_alias(data, entry.fallback_aliases))

        if raw is None:
            return None
        if entry.kind is FieldKind.TEXT:
            return normalize_text(raw)
        if entry.kind is FieldKind.LIST:
            return normalize_list(raw)
        if entry.kind is FieldKind.DATE:
            return normalize_date(raw)
        if entry.kind is FieldKind.STATUS:
            status = self._codec.to_canonical(raw)
            if status is None:
                return normalize_text(raw)
            return self._codec.encode(status, options.status_encoding)
        return raw


JOB_FIELDS: tuple[FieldSpec, ...] = (
    pascal("Title", FieldKind.TEXT),
    pascal("Description", FieldKind.TEXT),
    pascal("Department", FieldKind.TEXT),
    pascal("Location", FieldKind.TEXT),
    pascal("IsActive"),
    pascal("SalaryRange"),
    pascal("Salary", FieldKind.CURRENCY, fallback=name_aliases("SalaryRange")),
    pascal("Requirements", FieldKind.LIST),
    pascal("ClosingDate", FieldKind.DATE),
    pascal("Id", gate=Gate.ID),
    pascal("RowVersion", gate=Gate.ROW_VERSION),
)

CANDIDATE_FIELDS: tuple[FieldSpec, ...] = (
    pascal("FirstName", FieldKind.TEXT),
    pascal("LastName", FieldKind.TEXT),
    pascal("Email", FieldKind.TEXT),
    pascal("Phone", FieldKind.TEXT),
    pascal("ResumeUrl", FieldKind.TEXT),
    pascal("ResumeHeadline", FieldKind.TEXT),
    pascal("KeySkills", FieldKind.LIST, also=("skills",)),
    pascal("Employment"),
    pascal("Education"),
    pascal("ItSkills", also=("ITSkills",)),
    pascal("Projects"),
    pascal("ProfileSummary", FieldKind.TEXT),
    pascal("Accomplishments", FieldKind.TEXT),
    pascal("CareerProfile", FieldKind.TEXT),
    pascal("PersonalDetails"),
    pascal("Password", gate=Gate.SECRET),
    pascal("Id", gate=Gate.ID),
    pascal("RowVersion", gate=Gate.ROW_VERSION),
)

APPLICATION_CREATE_FIELDS: tuple[FieldSpec, ...] = (
    pascal("JobId"),
    pascal("CandidateId"),
    pascal("CoverLetter", FieldKind.TEXT),
    pascal("Notes", FieldKind.TEXT),
    pascal("Status", FieldKind.STATUS),
)

APPLICATION_STATUS_FIELDS: tuple[FieldSpec, ...] = (
    dual("applicationId", also=("id", "Id")),
    dual("status", FieldKind.STATUS),
    dual("notes", FieldKind.TEXT),
)

OFFER_FIELDS: tuple[FieldSpec, ...] = (
    pascal("CandidateId"),
    pascal("JobId"),
    pascal("RecruiterId"),
    pascal("Role", FieldKind.TEXT, also=("jobTitle", "JobTitle")),
    pascal("Compensation", FieldKind.TEXT, also=("package", "Package")),
    pascal("Salary", FieldKind.CURRENCY, fallback=name_aliases("Compensation")),
    pascal("Location", FieldKind.TEXT),
    pascal("SentOn", FieldKind.DATE, also=("sentDate", "SentDate")),
    pascal("TargetStart", FieldKind.DATE, also=("startDate", "StartDate")),
    pascal("Status", FieldKind.STATUS),
    pascal("Notes", FieldKind.TEXT),
    pascal("OfferLink", FieldKind.TEXT),
    pascal("Id", gate=Gate.ID),
    pascal("RowVersion", gate=Gate.ROW_VERSION),
)

INTERVIEW_SCHEDULE_FIELDS: tuple[FieldSpec, ...] = (
    camel("candidateId"),
    camel("candidateName", FieldKind.TEXT),
    camel("candidateEmail", FieldKind.TEXT),
    camel("jobId"),
    camel("jobTitle", FieldKind.TEXT),
    camel("stage", FieldKind.TEXT),
    camel("interviewers", FieldKind.LIST),
    camel("scheduledDate", FieldKind.TEXT),
    camel("scheduledTime", FieldKind.TEXT),
    camel("timezone", FieldKind.TEXT),
    camel("durationMinutes"),
    camel("locationType", FieldKind.TEXT),
    camel("meetingLink", FieldKind.TEXT),
    camel("meetingProvider", FieldKind.TEXT),
    camel("locationDetail", FieldKind.TEXT),
    camel("notesForCandidate", FieldKind.TEXT),
    camel("notesForInterviewers", FieldKind.TEXT),
    camel("reminders", FieldKind.LIST),
    camel("sendCalendarInvite"),
    camel("sharePrepDocs"),
)

JOB_DTO = DtoBuilder(JOB_FIELDS)
CANDIDATE_DTO = DtoBuilder(CANDIDATE_FIELDS)
APPLICATION_CREATE_DTO = DtoBuilder(APPLICATION_CREATE_FIELDS)
APPLICATION_STATUS_DTO = DtoBuilder(APPLICATION_STATUS_FIELDS)
OFFER_DTO = DtoBuilder(OFFER_FIELDS)
INTERVIEW_SCHEDULE_DTO = DtoBuilder(INTERVIEW_SCHEDULE_FIELDS)
