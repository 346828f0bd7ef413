"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import json

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.session_store import FileSessionStore
from core.config import AppSettings, write_user_env_vars
from core.services.session_clock import token_expiry

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    # Any HTTP answer (even 404) means the backend is reachable.
    try:
        async with build_async_client(settings) as client:
            response = await client.get("")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_session(settings: AppSettings) -> tuple[str, str]:
    store = FileSessionStore(settings.resolved_session_file())
    token = store.load_token()
    if not token:
        return "NONE", f"No session at {store.path}"
    expires_at = token_expiry(token)
    if expires_at is None:
        return "OK", "Token has no exp claim (non-expiring)"
    return "OK", f"Token expires {expires_at:%Y-%m-%d %H:%M} UTC"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Recruit Portal Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base URL", "OK", settings.api_base_url)
    table.add_row("Login endpoints", "OK", ", ".join(settings.auth_login_endpoints))
    table.add_row("Offer endpoints", "OK", ", ".join(settings.offer_endpoints))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    # Session
    session_status, session_detail = _check_session(settings)
    table.add_row("Persisted session", session_status, session_detail)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] run `recruit-portal doctor configure` to point the client at your backend."
        )


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    endpoints = typer.prompt(
        "Login endpoints (comma separated, in order)",
        default=",".join(settings.auth_login_endpoints),
        show_default=True,
    ).strip()

    if not base_url:
        raise typer.BadParameter("base URL is required")
    parsed = [part.strip() for part in endpoints.split(",") if part.strip()]
    if not parsed:
        raise typer.BadParameter("at least one login endpoint is required")

    env_path = write_user_env_vars(
        {
            "RECRUIT_PORTAL_API_BASE_URL": base_url.rstrip("/"),
            # pydantic-settings lee las listas como JSON.
            "RECRUIT_PORTAL_AUTH_LOGIN_ENDPOINTS": json.dumps(parsed),
        }
    )

    _console.print(f"[green]Saved portal config to:[/green] {env_path}")
