"""Raíz de composición: arma sesión, transporte y clientes de recurso.

Orden de construcción (hay un ciclo sesión <-> transporte):
1. `SessionManager` con su store y su reloj.
2. `ApiClient` con el token del store y el hook 401 del manager.
3. `LoginNegotiator` sobre ese `ApiClient`, enlazado al manager.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from adapters.http_client import ApiClient
from adapters.resources import (
    ApplicationsClient,
    CandidatesClient,
    InterviewsClient,
    JobsClient,
    NotificationsClient,
    OffersClient,
    OnboardingClient,
)
from adapters.session_store import FileSessionStore
from core.config import AppSettings
from core.interfaces.session_store import SessionStore
from core.services.login_negotiator import LoginNegotiator
from core.services.session_clock import SessionClock
from core.services.session_manager import Navigator, SessionManager


@dataclass
class Portal:
    settings: AppSettings
    api: ApiClient
    session: SessionManager
    jobs: JobsClient
    candidates: CandidatesClient
    applications: ApplicationsClient
    offers: OffersClient
    interviews: InterviewsClient
    onboarding: OnboardingClient
    notifications: NotificationsClient

    async def __aenter__(self) -> "Portal":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self.session.clock.stop()
        await self.api.aclose()


def build_portal(
    settings: AppSettings | None = None,
    *,
    store: SessionStore | None = None,
    navigator: Navigator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Portal:
    settings = settings or AppSettings()
    store = store or FileSessionStore(settings.resolved_session_file())
    clock = SessionClock(
        tick_seconds=settings.session_tick_seconds,
        warning_minutes=settings.session_warning_minutes,
    )
    manager = SessionManager(store, clock, navigator=navigator)
    api = ApiClient(
        settings,
        token_provider=store.load_token,
        on_unauthorized=manager.handle_unauthorized,
        transport=transport,
    )
    manager.bind_negotiator(LoginNegotiator(api, settings.auth_login_endpoints))
    return Portal(
        settings=settings,
        api=api,
        session=manager,
        jobs=JobsClient(api),
        candidates=CandidatesClient(api),
        applications=ApplicationsClient(api),
        offers=OffersClient(api),
        interviews=InterviewsClient(api),
        onboarding=OnboardingClient(api),
        notifications=NotificationsClient(api),
    )
