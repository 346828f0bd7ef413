"""Construcción de notificaciones para candidatos.

El backend guarda y entrega las notificaciones; aquí solo se arman las que
envía el equipo de RR. HH. (afinidad, nueva oferta, cambio de estado).
"""

from __future__ import annotations

from typing import Iterable

from core.domain.models import JobMatch, Notification, NotificationType
from core.services.skill_matching import match_message


def _job_url(job_id: int | None) -> str:
    return f"/dashboard/jobs/{job_id}"


def skill_match_notification(candidate_id: int, match: JobMatch, message: str | None = None) -> Notification:
    return Notification(
        candidate_id=candidate_id,
        job_id=match.job.id,
        job_title=match.job.title,
        message=message or match_message(match),
        match_percentage=match.match_percentage,
        type=NotificationType.SKILL_MATCH,
        action_url=_job_url(match.job.id),
    )


def job_posting_notification(candidate_id: int, job_id: int, job_title: str, message: str) -> Notification:
    return Notification(
        candidate_id=candidate_id,
        job_id=job_id,
        job_title=job_title,
        message=message,
        type=NotificationType.JOB_POSTING,
        action_url=_job_url(job_id),
    )


def application_update_notification(
    candidate_id: int,
    job_id: int,
    job_title: str,
    status: str,
    message: str = "",
) -> Notification:
    text = f'Your application status for "{job_title}" has been updated to: {status}. {message}'
    return Notification(
        candidate_id=candidate_id,
        job_id=job_id,
        job_title=job_title,
        message=text.rstrip(),
        type=NotificationType.APPLICATION_UPDATE,
        action_url="/candidate-dashboard",
    )


def count_unread(notifications: Iterable[Notification]) -> int:
    return sum(1 for notification in notifications if not notification.read)
