"""Normalización de las lecturas de entrevistas (agenda, feedback, metadata).

El backend devuelve la misma información con formas distintas: contenedores
`items`/`events`/`data`, claves camelCase o PascalCase, formato libre en el
tipo de entrevista. Cada campo tiene una cadena de precedencia fija y un valor
por defecto documentado; nada de esto lanza.
"""

from __future__ import annotations

import re
from typing import Any

from core.domain.models import (
    FeedbackVerdict,
    InterviewCalendarEvent,
    InterviewCalendarResponse,
    InterviewFeedbackEntry,
    InterviewFormat,
    InterviewScheduleMetadata,
    InterviewTimeSlot,
    LocationOption,
)
from core.services.coercion import (
    coerce_id,
    first_list,
    first_of,
    mapping,
    pick,
    string_list,
    to_datetime,
    to_datetime_or_now,
    to_int,
    to_number,
    to_text,
)

_DIGITS_RE = re.compile(r"(\d+)")


def classify_format(value: Any) -> InterviewFormat:
    text = value.strip().lower() if isinstance(value, str) else ""
    if "virtual" in text or "zoom" in text or "teams" in text:
        return InterviewFormat.VIRTUAL
    if "onsite" in text or "office" in text:
        return InterviewFormat.ONSITE
    if "person" in text:
        return InterviewFormat.IN_PERSON
    return InterviewFormat.VIRTUAL


def classify_verdict(value: Any) -> FeedbackVerdict:
    text = value.strip().lower() if isinstance(value, str) else ""
    if text.startswith("adv"):
        return FeedbackVerdict.ADVANCE
    if text.startswith("hold"):
        return FeedbackVerdict.HOLD
    return FeedbackVerdict.REJECT


def resolve_duration(raw: Any) -> int | None:
    direct = pick(raw, "durationMinutes", "DurationMinutes", "duration", "Duration")
    if isinstance(direct, (int, float)) and not isinstance(direct, bool):
        return to_int(direct)
    if isinstance(direct, str):
        match = re.match(r"\s*(\d+)", direct)
        if match:
            return int(match.group(1))
        return None
    label = pick(raw, "durationLabel", "DurationLabel")
    if isinstance(label, str):
        match = _DIGITS_RE.search(label)
        if match:
            return int(match.group(1))
    return None


def format_duration(label: Any, minutes: int | None) -> str | None:
    if isinstance(label, str) and label.strip():
        return label.strip()
    if minutes is not None and minutes > 0:
        return f"{minutes} mins"
    return None


def normalize_calendar_event(raw: Any) -> InterviewCalendarEvent:
    minutes = resolve_duration(raw)
    return InterviewCalendarEvent(
        id=coerce_id(raw, ("id", "Id", "interviewId", "InterviewId", "publicId", "PublicId", "code", "Code"), "int"),
        candidate_id=pick(raw, "candidateId", "CandidateId"),
        candidate=first_of(pick(raw, "candidate", "candidateName", "CandidateName"), "Pending assignment"),
        candidate_email=to_text(pick(raw, "candidateEmail", "CandidateEmail")),
        role=to_text(pick(raw, "role", "roleTitle", "jobTitle", "JobTitle"), "Untitled role"),
        job_id=pick(raw, "jobId", "JobId"),
        stage=to_text(pick(raw, "stage", "Stage", "phase"), "Interview"),
        interviewer_id=_id_value(pick(raw, "interviewerId", "InterviewerId")),
        interviewer=first_of(pick(raw, "interviewer", "interviewerName", "InterviewerName"), "Hiring team"),
        date_time=to_datetime_or_now(pick(raw, "dateTime", "scheduledStart", "startTime", "start")),
        duration=format_duration(pick(raw, "duration", "durationLabel"), minutes),
        duration_minutes=minutes,
        location=pick(raw, "location", "Location", "venue"),
        type=classify_format(pick(raw, "type", "format", "mode")),
        meeting_link=to_text(pick(raw, "meetingLink", "MeetingLink", "joinUrl", "JoinUrl")),
        notes=to_text(pick(raw, "notes", "Notes", "description", "Description")),
        timezone=to_text(pick(raw, "timezone", "timeZone", "Timezone")),
    )


def _id_value(value: Any) -> int | str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value
    return to_text(value)


def normalize_calendar_response(raw: Any) -> InterviewCalendarResponse:
    if not raw:
        return InterviewCalendarResponse()
    if isinstance(raw, list):
        events = [normalize_calendar_event(item) for item in raw]
        return InterviewCalendarResponse(events=events, total_count=len(events))
    events = [normalize_calendar_event(item) for item in first_list(raw, ("items", "events", "data"))]
    return InterviewCalendarResponse(
        events=events,
        total_count=to_int(pick(raw, "totalCount", "TotalCount"), len(events)),
        generated_at=to_datetime(pick(raw, "generatedAt", "GeneratedAt")),
    )


def normalize_feedback_entry(raw: Any) -> InterviewFeedbackEntry:
    return InterviewFeedbackEntry(
        id=coerce_id(raw, ("id", "feedbackId", "FeedbackId", "code"), "fb"),
        candidate=first_of(pick(raw, "candidate", "candidateName", "CandidateName"), "Unknown candidate"),
        role=to_text(pick(raw, "role", "roleTitle", "jobTitle", "JobTitle"), "Unknown role"),
        stage=to_text(pick(raw, "stage", "Stage"), "Interview"),
        interviewer=first_of(pick(raw, "interviewer", "interviewerName", "InterviewerName"), "Panel"),
        submitted_on=to_datetime_or_now(pick(raw, "submittedOn", "submittedAt", "SubmittedOn", "SubmittedAt")),
        score=to_number(pick(raw, "score", "Score"), 0),
        verdict=classify_verdict(pick(raw, "verdict", "Verdict")),
        strengths=string_list(pick(raw, "strengths", "Strengths")),
        reservations=string_list(pick(raw, "reservations", "Reservations")),
        notes=to_text(pick(raw, "notes", "Notes")),
        status=to_text(pick(raw, "status", "Status"), "Pending decision"),
        next_actions=to_text(pick(raw, "nextActions", "NextActions")),
    )


def normalize_feedback_response(raw: Any) -> list[InterviewFeedbackEntry]:
    if not raw:
        return []
    entries = raw if isinstance(raw, list) else first_list(raw, ("items", "feedback", "data"))
    return [normalize_feedback_entry(entry) for entry in entries]


def normalize_time_slot(raw: Any) -> InterviewTimeSlot | None:
    if not raw or not isinstance(raw, dict):
        return None
    start = to_datetime(pick(raw, "start", "startTime", "startUtc", "dateTime"))
    if start is None:
        return None
    zone = to_text(pick(raw, "timezone", "timeZone", "zone"), "") or ""
    duration = pick(raw, "durationMinutes", "duration")
    return InterviewTimeSlot(
        id=to_text(pick(raw, "id", "key")),
        label=to_text(pick(raw, "label", "name"), f"{zone} slot") or f"{zone} slot",
        start=start,
        timezone=zone or "UTC",
        duration_minutes=to_int(duration) if isinstance(duration, (int, float)) else None,
    )


def _location_option(option: Any) -> LocationOption | None:
    if isinstance(option, dict):
        ident = first_of(option.get("id"), option.get("value"), option.get("key"), "")
        label = first_of(option.get("label"), option.get("name"), option.get("title"), "")
    else:
        ident = label = option if option is not None else ""
    label_text = str(label).strip()
    if not label_text:
        return None
    return LocationOption(id=str(ident), label=label_text)


def normalize_schedule_metadata(raw: Any) -> InterviewScheduleMetadata:
    source = mapping(raw)
    if not source:
        return InterviewScheduleMetadata()

    locations_raw = first_of(source.get("locationOptions"), source.get("locations"))
    locations = [_location_option(option) for option in locations_raw] if isinstance(locations_raw, list) else []
    slots_raw = first_of(source.get("suggestedSlots"), source.get("slots"))
    slots = [normalize_time_slot(slot) for slot in slots_raw] if isinstance(slots_raw, list) else []
    default_provider = source.get("defaultProvider")

    return InterviewScheduleMetadata(
        stage_options=string_list(pick(source, "stageOptions", "stages", "stage")),
        interviewer_options=string_list(pick(source, "interviewerOptions", "interviewers", "interviewer")),
        timezone_options=string_list(pick(source, "timezoneOptions", "timezones", "timezone")),
        reminder_options=string_list(pick(source, "reminderOptions", "reminders", "reminder")),
        location_options=[option for option in locations if option is not None],
        suggested_slots=[slot for slot in slots if slot is not None],
        default_timezone=to_text(source.get("defaultTimezone")),
        meeting_providers=string_list(source.get("meetingProviders")),
        default_provider=default_provider if isinstance(default_provider, str) else None,
    )
