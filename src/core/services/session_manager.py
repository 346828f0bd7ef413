"""Ciclo de vida de la sesión.

`SessionManager` se construye explícitamente en la raíz de composición y se
pasa a quien lo necesite (hook HTTP, CLI). No hay estado global: el token
persistido vive en el `SessionStore` y la expiración en el `SessionClock`.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from core.domain.models import Session
from core.errors import PortalError
from core.interfaces.session_store import SessionStore
from core.services.login_negotiator import LoginNegotiator, LoginResult
from core.services.session_clock import SessionClock

logger = logging.getLogger(__name__)

HR_LOGIN_PATH = "/hr-login"
CANDIDATE_LOGIN_PATH = "/candidate-login"
_HR_ROLES = frozenset({"hr", "admin", "manager"})


class Navigator(Protocol):
    def navigate(self, path: str, params: dict[str, str]) -> None:
        ...


def login_path_for(user: dict[str, Any] | None) -> str:
    role = str((user or {}).get("role") or (user or {}).get("Role") or "").lower()
    return HR_LOGIN_PATH if role in _HR_ROLES else CANDIDATE_LOGIN_PATH


class SessionManager:
    def __init__(
        self,
        store: SessionStore,
        clock: SessionClock,
        negotiator: LoginNegotiator | None = None,
        navigator: Navigator | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._negotiator = negotiator
        self._navigator = navigator

    @property
    def clock(self) -> SessionClock:
        return self._clock

    @property
    def current_user(self) -> dict[str, Any] | None:
        return self._store.load_user()

    @property
    def token(self) -> str | None:
        return self._store.load_token()

    @property
    def session(self) -> Session | None:
        token = self._store.load_token()
        if not token:
            return None
        return Session(
            token=token,
            user=self._store.load_user() or {},
            expires_at=self._clock.expires_at,
            warning_minutes_left=self._clock.warning_minutes_left,
        )

    def bind_negotiator(self, negotiator: LoginNegotiator) -> None:
        self._negotiator = negotiator

    def is_authenticated(self) -> bool:
        return bool(self._store.load_token()) and not self._clock.is_expired

    def restore(self) -> Session | None:
        """Restaura la sesión persistida al arrancar el proceso."""

        token = self._store.load_token()
        if not token:
            return None
        self._clock.start(token)
        logger.info("Restored persisted session")
        return self.session

    async def login(self, identifier: str, secret: str) -> Session:
        if self._negotiator is None:
            raise RuntimeError("SessionManager has no LoginNegotiator bound")
        result: LoginResult = await self._negotiator.login(identifier, secret)
        self._store.save(result.token, result.user or None)
        self._clock.start(result.token)
        session = self.session
        if session is None:
            self._clock.stop()
            raise PortalError("The session store did not keep the login token")
        return session

    def logout(self) -> None:
        self._clock.stop()
        self._store.clear()
        logger.info("Session cleared")

    def handle_unauthorized(self, request: Any = None) -> str:
        """Logout forzado por un 401 fuera del login; navega al login adecuado."""

        path = login_path_for(self._store.load_user())
        if request is not None:
            logger.warning("Forced logout after HTTP 401 on %s", getattr(request, "url", request))
        self.logout()
        if self._navigator is not None:
            self._navigator.navigate(path, {"session": "expired"})
        return path
