"""Reloj de sesión: expiración del token y avisos previos.

Responsabilidad:
- Leer el claim `exp` del token (JWT) sin verificar firma. La verificación es
  cosa del servidor y de TLS; aquí solo se usa para la UI.
- Mantener `expires_at` y `warning_minutes_left`, notificando a los
  suscriptores cuando cambian.
- Recalcular periódicamente con una tarea asyncio cancelable.

Estados: sin autenticar -> autenticado (sin exp | con tick) -> expirado ->
sin autenticar (al `stop()`).
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from urllib.parse import unquote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClockState:
    expires_at: datetime | None = None
    warning_minutes_left: int | None = None


ClockListener = Callable[[ClockState], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def decode_token_payload(token: str) -> dict[str, Any] | None:
    """Decodifica el segmento central (base64url JSON) de un token.

    Tolera padding ausente y payloads percent-encoded. Devuelve `None` si el
    token no tiene esa forma.
    """

    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None
    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return None
    text = raw.decode("utf-8", errors="replace")
    for candidate in (text, unquote(text)):
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(payload, dict):
            return payload
    return None


def token_expiry(token: str) -> datetime | None:
    """Instante `exp` del token en UTC, o `None` si no expira / no se puede leer."""

    payload = decode_token_payload(token)
    if payload is None:
        return None
    exp = payload.get("exp")
    if isinstance(exp, bool) or exp is None:
        return None
    try:
        seconds = float(exp)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class SessionClock:
    """Calcula y emite el estado de expiración de la sesión.

    `now` es inyectable para tests; `tick()` puede invocarse a mano.
    """

    def __init__(
        self,
        *,
        tick_seconds: float = 15.0,
        warning_minutes: int = 5,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._tick_seconds = tick_seconds
        self._warning_window = timedelta(minutes=warning_minutes)
        self._now = now
        self._state = ClockState()
        self._listeners: list[ClockListener] = []
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def expires_at(self) -> datetime | None:
        return self._state.expires_at

    @property
    def warning_minutes_left(self) -> int | None:
        return self._state.warning_minutes_left

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_expired(self) -> bool:
        return self._state.warning_minutes_left == 0

    def subscribe(self, listener: ClockListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self, token: str) -> None:
        """Arranca el seguimiento de `token` (reinicia si ya había uno)."""

        self._cancel_task()
        self._running = True
        expires_at = token_expiry(token)
        if expires_at is None:
            logger.info("Session token has no readable exp claim; treating it as non-expiring")
            self._set_state(ClockState())
            return

        self._set_state(ClockState(expires_at=expires_at, warning_minutes_left=self._warning_for(expires_at)))
        if self.is_expired:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; session clock will only update on tick()")
            return
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        """Cancela el tick y limpia los valores. Idempotente."""

        self._running = False
        self._cancel_task()
        self._set_state(ClockState())

    def tick(self) -> ClockState:
        expires_at = self._state.expires_at
        if not self._running or expires_at is None:
            return self._state
        self._set_state(ClockState(expires_at=expires_at, warning_minutes_left=self._warning_for(expires_at)))
        return self._state

    def _warning_for(self, expires_at: datetime) -> int | None:
        remaining = expires_at - self._now()
        if remaining <= timedelta(0):
            return 0
        if remaining <= self._warning_window:
            return math.ceil(remaining.total_seconds() / 60)
        return None

    async def _run(self) -> None:
        while self._running:
            await asyncio.sleep(self._tick_seconds)
            self.tick()
            if self.is_expired:
                logger.info("Session expired at %s", self._state.expires_at)
                return

    def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def _set_state(self, state: ClockState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
