"""CLI principal (Typer + Rich).

Por qué Typer:
- Subcomandos declarativos (`jobs list`, `offers list`...) con ayuda gratis.
- Rich se encarga de tablas, paneles y del handler de logging.

Cada comando arma un `Portal` nuevo, ejecuta una corrutina con
`asyncio.run` y cierra el transporte al terminar.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.portal import Portal, build_portal
from cli import doctor
from cli.ui_components import (
    build_applications_table,
    build_calendar_table,
    build_jobs_table,
    build_matches_table,
    build_notifications_table,
    build_offers_table,
    build_session_panel,
    print_banner,
)
from core.config import AppSettings
from core.domain.filters import ApplicationFilter, CalendarFilter, OfferFilter
from core.errors import LoginFailedError, PortalError
from core.services.skill_matching import find_matching_jobs

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Recruitment portal client.")
jobs_app = typer.Typer(no_args_is_help=True, help="Job postings.")
applications_app = typer.Typer(no_args_is_help=True, help="Job applications.")
offers_app = typer.Typer(no_args_is_help=True, help="Offer letters.")
interviews_app = typer.Typer(no_args_is_help=True, help="Interview scheduling.")
notifications_app = typer.Typer(no_args_is_help=True, help="Candidate notifications.")

app.add_typer(jobs_app, name="jobs")
app.add_typer(applications_app, name="applications")
app.add_typer(offers_app, name="offers")
app.add_typer(interviews_app, name="interviews")
app.add_typer(notifications_app, name="notifications")
app.add_typer(doctor.app, name="doctor")

console = Console()


class ConsoleNavigator:
    """Traduce la navegación forzada (401) en un aviso de consola."""

    def navigate(self, path: str, params: dict[str, str]) -> None:
        console.print(f"[yellow]Session expired.[/yellow] Sign in again ({path}).")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log retries and endpoint negotiation."),
) -> None:
    settings = AppSettings()
    configure_logging("INFO" if verbose else settings.log_level)


def _execute(action: Callable[[Portal], Awaitable[T]]) -> T:
    async def _runner() -> T:
        async with build_portal(navigator=ConsoleNavigator()) as portal:
            portal.session.restore()
            return await action(portal)

    try:
        return asyncio.run(_runner())
    except LoginFailedError as exc:
        console.print(f"[red]Login failed:[/red] tried {len(exc.attempts)} combinations")
        raise typer.Exit(code=1) from exc
    except PortalError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    except httpx.HTTPError as exc:
        console.print(f"[red]Backend unreachable:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def login(
    identifier: str = typer.Argument(..., help="Email or username."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Negotiate the login contract and persist the session."""

    async def _login(portal: Portal) -> Any:
        return await portal.session.login(identifier, password)

    session = _execute(_login)
    print_banner(console)
    console.print(build_session_panel(session))


@app.command()
def logout() -> None:
    """Clear the persisted session."""

    async def _logout(portal: Portal) -> None:
        portal.session.logout()

    _execute(_logout)
    console.print("[green]Signed out.[/green]")


@app.command()
def session() -> None:
    """Show the persisted session and its expiry."""

    async def _show(portal: Portal) -> Any:
        return portal.session.session

    console.print(build_session_panel(_execute(_show)))


@jobs_app.command("list")
def jobs_list(
    page: int = typer.Option(1, min=1),
    size: int = typer.Option(10, min=1),
    public: bool = typer.Option(False, "--public", help="Use the unauthenticated listing."),
) -> None:
    async def _list(portal: Portal) -> Any:
        if public:
            return await portal.jobs.list_public(page, size)
        return await portal.jobs.list(page, size)

    console.print(build_jobs_table(_execute(_list)))


@jobs_app.command("create")
def jobs_create(
    title: str = typer.Option(...),
    description: str = typer.Option(""),
    department: str = typer.Option(""),
    location: str = typer.Option(""),
    salary: Optional[str] = typer.Option(None, help="Number or range, e.g. '90,000 - 110,000'."),
    requirements: Optional[str] = typer.Option(None, help="Comma or newline separated."),
    closing_date: Optional[str] = typer.Option(None, help="Any common date format."),
) -> None:
    data = {
        "title": title,
        "description": description,
        "department": department,
        "location": location,
        "salaryRange": salary,
        "requirements": requirements,
        "closingDate": closing_date,
        "isActive": True,
    }

    async def _create(portal: Portal) -> Any:
        return await portal.jobs.create(data)

    job = _execute(_create)
    console.print(f"[green]Created job[/green] {job.id if job else ''} {title}")


@jobs_app.command("delete")
def jobs_delete(job_id: int = typer.Argument(...)) -> None:
    async def _delete(portal: Portal) -> None:
        await portal.jobs.delete(job_id)

    _execute(_delete)
    console.print(f"[green]Deleted job[/green] {job_id}")


@jobs_app.command("match")
def jobs_match(
    candidate_id: int = typer.Argument(..., help="Candidate whose profile is compared."),
    size: int = typer.Option(50, min=1, help="How many open jobs to compare against."),
) -> None:
    async def _match(portal: Portal) -> Any:
        candidate = await portal.candidates.get(candidate_id)
        if candidate is None:
            return None
        page = await portal.jobs.list(1, size)
        return find_matching_jobs(candidate, page.items)

    matches = _execute(_match)
    if matches is None:
        console.print(f"[red]Candidate {candidate_id} not found[/red]")
        raise typer.Exit(code=1)
    console.print(build_matches_table(matches))


@applications_app.command("list")
def applications_list(
    status: Optional[str] = typer.Option(None),
    job_id: Optional[int] = typer.Option(None),
    page: int = typer.Option(1, min=1),
    size: int = typer.Option(10, min=1),
) -> None:
    flt = ApplicationFilter(status=status, job_id=job_id, page_number=page, page_size=size)

    async def _list(portal: Portal) -> Any:
        return await portal.applications.list(flt)

    console.print(build_applications_table(_execute(_list)))


@applications_app.command("set-status")
def applications_set_status(
    application_id: int = typer.Argument(...),
    status: str = typer.Argument(..., help="New, Shortlisted, Rejected or Hired."),
    notes: Optional[str] = typer.Option(None),
) -> None:
    async def _update(portal: Portal) -> Any:
        return await portal.applications.update_status(
            {"applicationId": application_id, "status": status, "notes": notes}
        )

    _execute(_update)
    console.print(f"[green]Application {application_id} set to[/green] {status}")


@offers_app.command("list")
def offers_list(
    status: Optional[str] = typer.Option(None),
    search: Optional[str] = typer.Option(None),
    page: int = typer.Option(1, min=1),
    size: int = typer.Option(20, min=1),
) -> None:
    flt = OfferFilter(status=status, search_term=search, page_number=page, page_size=size)

    async def _list(portal: Portal) -> Any:
        return await portal.offers.list(flt)

    console.print(build_offers_table(_execute(_list)))


@interviews_app.command("calendar")
def interviews_calendar(
    timeframe: Optional[str] = typer.Option(None, help="today, week, month or all."),
    stage: Optional[str] = typer.Option(None),
) -> None:
    flt = CalendarFilter(timeframe=timeframe, stage=stage)  # type: ignore[arg-type]

    async def _calendar(portal: Portal) -> Any:
        return await portal.interviews.calendar(flt)

    response = _execute(_calendar)
    console.print(build_calendar_table(response.events))


@notifications_app.command("list")
def notifications_list(candidate_id: int = typer.Argument(...)) -> None:
    async def _list(portal: Portal) -> Any:
        return await portal.notifications.for_candidate(candidate_id)

    console.print(build_notifications_table(_execute(_list)))


@notifications_app.command("read")
def notifications_read(
    notification_id: Optional[str] = typer.Argument(None),
    all_for: Optional[int] = typer.Option(None, "--all-for", help="Mark every notification of this candidate."),
) -> None:
    if notification_id is None and all_for is None:
        raise typer.BadParameter("Pass a notification id or --all-for CANDIDATE_ID.")

    async def _read(portal: Portal) -> None:
        if all_for is not None:
            await portal.notifications.mark_all_read(all_for)
        else:
            await portal.notifications.mark_read(notification_id)

    _execute(_read)
    console.print("[green]Marked as read[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
