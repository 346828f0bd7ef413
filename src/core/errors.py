"""Errores del cliente y clasificación de fallos del backend.

Por qué un único módulo:
- El backend no tiene un contrato de errores estable; las heurísticas sobre el
  texto del cuerpo de error viven solo aquí (`classify_failure`).
- Si cambia la redacción de los mensajes del servidor, se toca un solo sitio.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Sequence


class PortalError(Exception):
    """Base de todos los errores propios del cliente."""


class ApiError(PortalError):
    """Respuesta HTTP no exitosa (status >= 400).

    `body` es el JSON decodificado cuando el servidor lo envía, o el texto crudo.
    """

    def __init__(self, *, method: str, path: str, status_code: int, body: Any = None) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {path} failed with HTTP {status_code}")


class LoginFailedError(PortalError):
    """Se agotaron todas las combinaciones (payload x endpoint) de login."""

    def __init__(self, attempts: Sequence[tuple[str, str]], last_error: ApiError | None = None) -> None:
        self.attempts = list(attempts)
        self.last_error = last_error
        status = last_error.status_code if last_error is not None else None
        super().__init__(f"Login failed after {len(self.attempts)} attempts (last status: {status})")


class NoEndpointAvailableError(PortalError):
    """Ninguna variante de endpoint respondió (todas 404/405)."""

    def __init__(self, endpoints: Sequence[str]) -> None:
        self.endpoints = list(endpoints)
        super().__init__(f"No endpoint responded successfully: {', '.join(self.endpoints)}")


class FailureKind(str, Enum):
    SHAPE_MISMATCH = "shape_mismatch"
    STATUS_ENCODING_MISMATCH = "status_encoding_mismatch"
    ENDPOINT_MISMATCH = "endpoint_mismatch"
    AUTH_EXPIRED = "auth_expired"
    UNRECOVERABLE = "unrecoverable"


_STATUS_CONVERSION_PHRASE = "could not be converted to"
_LOGIN_ENDPOINT_STATUSES = frozenset({401, 404, 405})
_LOGIN_SHAPE_STATUSES = frozenset({400, 415, 422})


def error_body_text(body: Any) -> str:
    """Serializa el cuerpo de error a texto en minúsculas.

    Incluye los mapas de validación anidados (`errors: {...}`) porque ahí es
    donde ASP.NET suele nombrar el DTO esperado.
    """

    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        return body.lower()
    try:
        return json.dumps(body, ensure_ascii=False, default=str).lower()
    except (TypeError, ValueError):
        return str(body).lower()


def classify_failure(
    status_code: int | None,
    body: Any,
    *,
    shape_keyword: str | None = None,
    during_login: bool = False,
) -> FailureKind:
    """Decide qué tipo de fallo representa una respuesta de error.

    Reglas:
    - Durante el login, 401/404/405 (y 400/415/422) significan "prueba la
      siguiente combinación".
    - Fuera del login, 401 es sesión expirada.
    - Un 400 cuyo cuerpo menciona `shape_keyword` es un problema de envoltura;
      uno que menciona `status` y "could not be converted to" es de
      codificación del estado.
    """

    if during_login:
        if status_code in _LOGIN_ENDPOINT_STATUSES or status_code in _LOGIN_SHAPE_STATUSES:
            return FailureKind.ENDPOINT_MISMATCH
        return FailureKind.UNRECOVERABLE

    if status_code == 401:
        return FailureKind.AUTH_EXPIRED
    if status_code != 400:
        return FailureKind.UNRECOVERABLE

    text = error_body_text(body)
    if shape_keyword and shape_keyword.lower() in text:
        return FailureKind.SHAPE_MISMATCH
    if "status" in text and _STATUS_CONVERSION_PHRASE in text:
        return FailureKind.STATUS_ENCODING_MISMATCH
    return FailureKind.UNRECOVERABLE
