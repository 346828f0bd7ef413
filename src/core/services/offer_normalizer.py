"""Normalización de cartas de oferta.

Por qué existe:
- Según el despliegue, la oferta viene plana (`candidateName`, `jobTitle`) o
  anidada (`candidate.firstName`, `recruiter.fullName`), en camelCase o
  PascalCase.
- El estado puede llegar como texto libre ("signed", "Negotiating") o como
  entero; la UI solo conoce `OfferStatus`.
"""

from __future__ import annotations

import math
from typing import Any

from core.domain.models import OfferLetter, OfferStatus
from core.services.coercion import coerce_id, first_of, mapping, pick, to_datetime, to_number, to_text

_STATUS_LOOKUP: dict[str, OfferStatus] = {
    "accepted": OfferStatus.ACCEPTED,
    "signed": OfferStatus.ACCEPTED,
    "completed": OfferStatus.ACCEPTED,
    "pending": OfferStatus.PENDING,
    "awaiting": OfferStatus.PENDING,
    "negotiation": OfferStatus.NEGOTIATION,
    "negotiating": OfferStatus.NEGOTIATION,
    "draft": OfferStatus.DRAFT,
    "drafted": OfferStatus.DRAFT,
    "reviewing": OfferStatus.DRAFT,
    "declined": OfferStatus.DECLINED,
    "rejected": OfferStatus.DECLINED,
    "withdrawn": OfferStatus.WITHDRAWN,
    "rescinded": OfferStatus.WITHDRAWN,
    "expired": OfferStatus.EXPIRED,
    "lapsed": OfferStatus.EXPIRED,
}

# Orden importa: "signed" antes que "declined".
_STATUS_FRAGMENTS: tuple[tuple[str, OfferStatus], ...] = (
    ("sign", OfferStatus.ACCEPTED),
    ("nego", OfferStatus.NEGOTIATION),
    ("draft", OfferStatus.DRAFT),
    ("declin", OfferStatus.DECLINED),
)

_NUMERIC_STATUS: dict[int, OfferStatus] = {
    0: OfferStatus.DRAFT,
    1: OfferStatus.PENDING,
    2: OfferStatus.NEGOTIATION,
    3: OfferStatus.ACCEPTED,
    4: OfferStatus.DECLINED,
    5: OfferStatus.WITHDRAWN,
}


def normalize_offer_status(value: Any) -> OfferStatus:
    if value is None or isinstance(value, bool):
        return OfferStatus.PENDING
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return OfferStatus.PENDING
        return _NUMERIC_STATUS.get(int(value), OfferStatus.PENDING)

    text = str(value).strip().lower()
    if not text:
        return OfferStatus.PENDING
    if text in _STATUS_LOOKUP:
        return _STATUS_LOOKUP[text]
    for fragment, status in _STATUS_FRAGMENTS:
        if fragment in text:
            return status
    return OfferStatus.PENDING


def _clamp(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _leading_float(text: str) -> float | None:
    """Como `parseFloat`: el prefijo numérico más largo, o None."""

    for end in range(len(text), 0, -1):
        try:
            return float(text[:end])
        except ValueError:
            continue
    return None


def normalize_probability(value: Any) -> float | None:
    """Probabilidad de aceptación en [0, 1].

    Acepta "65%", "65", 0.65 o 65; valores mayores que 1 se leen como
    porcentaje.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        if trimmed.endswith("%"):
            numeric = _leading_float(trimmed[:-1].strip())
            if numeric is not None:
                return _clamp(numeric / 100)
        parsed = _leading_float(trimmed)
        if parsed is None:
            return None
        return _clamp(parsed / 100 if parsed > 1 else parsed)
    if isinstance(value, (int, float)):
        return _clamp(value / 100 if value > 1 else float(value))
    return None


def _candidate_name(raw: Any, candidate: Any) -> str:
    first = first_of(pick(candidate, "firstName", "FirstName"), pick(raw, "candidateFirstName", "CandidateFirstName"))
    last = first_of(pick(candidate, "lastName", "LastName"), pick(raw, "candidateLastName", "CandidateLastName"))
    full = first_of(
        pick(candidate, "fullName", "FullName"),
        pick(raw, "candidateName", "CandidateName", "candidate"),
    )
    name = " ".join(str(part) for part in (first, last) if part).strip()
    if name:
        return name
    if isinstance(full, str) and full.strip():
        return full.strip()
    return "Unknown candidate"


def normalize_offer(raw: Any) -> OfferLetter:
    source = mapping(raw)
    candidate = mapping(pick(source, "candidate", "Candidate"))
    recruiter = mapping(pick(source, "recruiter", "Recruiter"))
    job = mapping(pick(source, "job", "Job"))

    recruiter_name = to_text(
        first_of(
            pick(recruiter, "fullName", "FullName", "name", "Name"),
            pick(source, "recruiterName", "RecruiterName"),
        )
    )
    recruiter_label = to_text(
        first_of(
            pick(recruiter, "name", "Name", "fullName", "FullName"),
            pick(source, "recruiter", "Recruiter") if not recruiter else None,
        )
    )
    metadata = pick(source, "metadata", "Metadata")

    return OfferLetter(
        id=coerce_id(source, ("id", "Id", "offerId", "OfferId", "code", "Code"), "offer"),
        candidate_id=to_number(first_of(pick(candidate, "id", "Id"), pick(source, "candidateId", "CandidateId"))),
        candidate_name=_candidate_name(source, candidate),
        candidate_email=to_text(
            first_of(pick(candidate, "email", "Email"), pick(source, "candidateEmail", "CandidateEmail"))
        ),
        job_id=to_number(first_of(pick(source, "jobId", "JobId"), pick(job, "id", "Id"))),
        role=to_text(first_of(pick(source, "role", "Role", "jobTitle", "JobTitle"), pick(job, "title", "Title")))
        or "Untitled role",
        recruiter=recruiter_label or recruiter_name,
        recruiter_id=to_number(first_of(pick(recruiter, "id", "Id"), pick(source, "recruiterId", "RecruiterId"))),
        recruiter_name=recruiter_name,
        sent_on=to_datetime(pick(source, "sentOn", "SentOn", "sentDate", "SentDate")),
        target_start=to_datetime(
            pick(source, "targetStart", "TargetStart", "startDate", "StartDate", "proposedStart", "ProposedStart")
        ),
        status=normalize_offer_status(pick(source, "status", "Status")),
        last_touched=to_datetime(
            pick(source, "lastTouched", "LastTouched", "updatedAt", "UpdatedAt", "lastUpdated", "LastUpdated")
        ),
        compensation=pick(source, "compensation", "Compensation", "package", "Package"),
        location=to_text(pick(source, "location", "Location", "jobLocation", "JobLocation")),
        attachments=to_number(pick(source, "attachments", "Attachments", "documentsCount", "DocumentsCount")),
        notes=to_text(pick(source, "notes", "Notes", "comment", "Comment")),
        acceptance_probability=normalize_probability(
            pick(
                source,
                "acceptanceProbability",
                "AcceptanceProbability",
                "probability",
                "Probability",
                "likelihood",
                "Likelihood",
            )
        ),
        offer_link=to_text(pick(source, "offerLink", "OfferLink", "documentUrl", "DocumentUrl", "url", "Url")),
        metadata=metadata if isinstance(metadata, dict) else None,
    )
