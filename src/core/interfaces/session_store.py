"""Contrato del almacenamiento persistente de sesión.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el fichero JSON por memoria en tests o por el keyring del
  sistema sin tocar `SessionManager`.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Dos entradas de texto: el token crudo y el usuario serializado."""

    def load_token(self) -> str | None:
        ...

    def load_user(self) -> dict[str, Any] | None:
        ...

    def save(self, token: str, user: dict[str, Any] | None) -> None:
        ...

    def clear(self) -> None:
        ...
