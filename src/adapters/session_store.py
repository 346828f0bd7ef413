"""Persistencia de la sesión.

`FileSessionStore` guarda dos entradas de texto en un JSON del directorio de
usuario: `token` (bearer crudo) y `currentUser` (usuario serializado).
`MemorySessionStore` es la variante sin disco para tests y scripts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from core.interfaces.session_store import SessionStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "currentUser"


def _parse_user(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    try:
        user = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable persisted user entry")
        return None
    return user if isinstance(user, dict) else None


class FileSessionStore(SessionStore):
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Session file %s is corrupt; ignoring it", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def load_token(self) -> str | None:
        return self._read().get(TOKEN_KEY) or None

    def load_user(self) -> dict[str, Any] | None:
        return _parse_user(self._read().get(USER_KEY))

    def save(self, token: str, user: dict[str, Any] | None) -> None:
        entries = {TOKEN_KEY: token}
        if user:
            entries[USER_KEY] = json.dumps(user, ensure_ascii=False, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(entries, indent=2) + "\n", encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class MemorySessionStore(SessionStore):
    def __init__(self, token: str | None = None, user: dict[str, Any] | None = None) -> None:
        self._entries: dict[str, str] = {}
        if token:
            self.save(token, user)

    def load_token(self) -> str | None:
        return self._entries.get(TOKEN_KEY)

    def load_user(self) -> dict[str, Any] | None:
        return _parse_user(self._entries.get(USER_KEY))

    def save(self, token: str, user: dict[str, Any] | None) -> None:
        self._entries = {TOKEN_KEY: token}
        if user:
            self._entries[USER_KEY] = json.dumps(user, ensure_ascii=False, sort_keys=True)

    def clear(self) -> None:
        self._entries.clear()
