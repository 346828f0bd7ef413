"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    InterviewCalendarEvent,
    Job,
    JobApplication,
    JobMatch,
    Notification,
    OfferLetter,
    Page,
    Session,
)
from core.services.skill_matching import match_tier

_TIER_STYLES = {"excellent": "green", "good": "blue", "fair": "yellow", "poor": "red"}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Vive junto al resto de componentes de presentación.
    - Solo se muestra tras un login interactivo.
    """

    title = Text("Recruit Portal", style="bold cyan")
    subtitle = Text("Jobs • Applications • Offers • Interviews", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _when(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def page_caption(page: Page) -> str:
    return f"Page {page.page_number}/{max(page.total_pages, 1)} • {page.total_count} total"


def build_jobs_table(page: Page[Job]) -> Table:
    table = Table(title="Jobs", caption=page_caption(page))
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Department", style="magenta")
    table.add_column("Location")
    table.add_column("Closes", style="dim")
    table.add_column("Active", style="green")
    for job in page.items:
        table.add_row(
            str(job.id or job.public_id or "-"),
            job.title,
            job.department,
            job.location,
            _when(job.closing_date),
            "yes" if job.is_active else "no",
        )
    return table


def build_applications_table(page: Page[JobApplication]) -> Table:
    table = Table(title="Applications", caption=page_caption(page))
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Job", style="white")
    table.add_column("Candidate")
    table.add_column("Status", style="green")
    table.add_column("Applied", style="dim")
    for application in page.items:
        status = application.status
        table.add_row(
            str(application.id or "-"),
            str(application.job_id or "-"),
            str(application.candidate_id or "-"),
            getattr(status, "value", None) or str(status or "-"),
            _when(application.applied_date),
        )
    return table


def build_offers_table(page: Page[OfferLetter]) -> Table:
    table = Table(title="Offer letters", caption=page_caption(page))
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Candidate", style="white")
    table.add_column("Role")
    table.add_column("Status", style="green")
    table.add_column("Acceptance", justify="right")
    table.add_column("Sent", style="dim")
    for offer in page.items:
        probability = offer.acceptance_probability
        table.add_row(
            offer.id,
            offer.candidate_name,
            offer.role,
            offer.status.value,
            f"{probability:.0%}" if probability is not None else "-",
            _when(offer.sent_on),
        )
    return table


def build_calendar_table(events: Iterable[InterviewCalendarEvent]) -> Table:
    table = Table(title="Interview calendar")
    table.add_column("When", style="cyan", no_wrap=True)
    table.add_column("Candidate", style="white")
    table.add_column("Role")
    table.add_column("Stage", style="magenta")
    table.add_column("Format", style="green")
    table.add_column("Duration", style="dim")
    for event in events:
        table.add_row(
            _when(event.date_time),
            str(event.candidate),
            event.role,
            event.stage,
            event.type.value,
            event.duration or "-",
        )
    return table


def build_matches_table(matches: Iterable[JobMatch]) -> Table:
    table = Table(title="Job matches")
    table.add_column("Job", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Match", justify="right")
    table.add_column("Experience")
    table.add_column("Missing skills", style="dim")
    for match in matches:
        style = _TIER_STYLES[match_tier(match.match_percentage)]
        table.add_row(
            str(match.job.id or match.job.public_id or "-"),
            match.job.title,
            Text(f"{match.match_percentage}%", style=style),
            "ok" if match.requirements_met.experience_required else "short",
            ", ".join(match.missing_skills) or "-",
        )
    return table


def build_notifications_table(notifications: Iterable[Notification]) -> Table:
    table = Table(title="Notifications")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("When", style="dim")
    table.add_column("Type", style="magenta")
    table.add_column("Message", style="white")
    for notification in notifications:
        kind = notification.type
        table.add_row(
            notification.id or "-",
            _when(notification.created_at),
            getattr(kind, "value", None) or str(kind),
            Text(notification.message, style="dim" if notification.read else "bold"),
        )
    return table


def build_session_panel(session: Session | None) -> Panel:
    """Panel con el estado de la sesión persistida (nunca muestra el token)."""

    if session is None:
        return Panel(Text("Not signed in", style="yellow"), title="Session", border_style="yellow")

    body = Text()
    user = session.user
    body.append(f"User: {user.get('email') or user.get('name') or user.get('id') or 'unknown'}\n")
    body.append(f"Role: {session.role or '-'}\n")
    if session.expires_at is None:
        body.append("Expires: never (token carries no exp claim)", style="dim")
        style = "green"
    else:
        body.append(f"Expires: {_when(session.expires_at)} UTC")
        style = "green"
        if session.warning_minutes_left == 0:
            body.append("\nSession expired", style="bold red")
            style = "red"
        elif session.warning_minutes_left is not None:
            body.append(f"\nExpires in {session.warning_minutes_left} min", style="bold yellow")
            style = "yellow"
    return Panel(body, title="Session", border_style=style)
