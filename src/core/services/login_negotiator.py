"""Negociación del contrato de login.

El contrato de login no está versionado entre despliegues: cambia el nombre del
campo de identidad y cambia la ruta. Se prueba el producto cartesiano
(forma de payload x endpoint) de forma perezosa, primero todas las rutas para
una forma y luego la siguiente forma: el nombre del campo es el culpable más
probable, antes que la ruta.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Protocol, Sequence

from core.errors import ApiError, FailureKind, LoginFailedError, classify_failure

logger = logging.getLogger(__name__)


class LoginTransport(Protocol):
    async def post(self, path: str, json: Any = None) -> Any:
        ...


@dataclass(frozen=True)
class PayloadShape:
    name: str
    build: Callable[[str, str], dict[str, str]]


DEFAULT_PAYLOAD_SHAPES: tuple[PayloadShape, ...] = (
    PayloadShape("email", lambda ident, secret: {"email": ident, "password": secret}),
    PayloadShape("username", lambda ident, secret: {"username": ident, "password": secret}),
    PayloadShape("userName", lambda ident, secret: {"userName": ident, "password": secret}),
    PayloadShape(
        "union",
        lambda ident, secret: {"email": ident, "username": ident, "userName": ident, "password": secret},
    ),
)

_TOKEN_KEYS = ("token", "accessToken", "access_token", "jwt", "Token", "AccessToken")


@dataclass(frozen=True)
class LoginAttempt:
    shape: PayloadShape
    endpoint: str

    @property
    def label(self) -> str:
        return f"{self.shape.name}@{self.endpoint}"


@dataclass
class LoginResult:
    token: str
    user: dict[str, Any]
    attempt: LoginAttempt
    raw: Any = field(default=None, repr=False)


def iter_attempts(shapes: Sequence[PayloadShape], endpoints: Sequence[str]) -> Iterator[LoginAttempt]:
    """Orden forma-mayor: A@E1, A@E2, B@E1, B@E2..."""

    for shape in shapes:
        for endpoint in endpoints:
            yield LoginAttempt(shape=shape, endpoint=endpoint)


def extract_token(response: Any) -> str | None:
    if not isinstance(response, Mapping):
        return None
    for container in (response, response.get("data"), response.get("Data")):
        if not isinstance(container, Mapping):
            continue
        for key in _TOKEN_KEYS:
            value = container.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def extract_user(response: Any) -> dict[str, Any]:
    """Usuario/rol del login: `user` si viene, si no se sintetiza."""

    if not isinstance(response, Mapping):
        return {}
    for key in ("user", "User"):
        user = response.get(key)
        if isinstance(user, Mapping):
            return dict(user)
    synthesized = {
        "id": response.get("userId", response.get("UserId")),
        "email": response.get("email", response.get("Email")),
        "role": response.get("role", response.get("Role")),
    }
    return {k: v for k, v in synthesized.items() if v is not None}


class LoginNegotiator:
    def __init__(
        self,
        transport: LoginTransport,
        endpoints: Sequence[str],
        shapes: Sequence[PayloadShape] = DEFAULT_PAYLOAD_SHAPES,
    ) -> None:
        if not endpoints:
            raise ValueError("At least one login endpoint is required")
        if not shapes:
            raise ValueError("At least one payload shape is required")
        self._transport = transport
        self._endpoints = tuple(endpoints)
        self._shapes = tuple(shapes)

    async def login(self, identifier: str, secret: str) -> LoginResult:
        tried: list[tuple[str, str]] = []
        last_error: ApiError | None = None
        for attempt in iter_attempts(self._shapes, self._endpoints):
            tried.append((attempt.shape.name, attempt.endpoint))
            try:
                response = await self._transport.post(attempt.endpoint, json=attempt.shape.build(identifier, secret))
            except ApiError as exc:
                kind = classify_failure(exc.status_code, exc.body, during_login=True)
                if kind is not FailureKind.ENDPOINT_MISMATCH:
                    raise
                logger.debug("Login attempt %s rejected with HTTP %s", attempt.label, exc.status_code)
                last_error = exc
                continue

            token = extract_token(response)
            if token is None:
                logger.warning("Login attempt %s succeeded without a token; trying next", attempt.label)
                continue
            logger.info("Login negotiated via %s", attempt.label)
            return LoginResult(token=token, user=extract_user(response), attempt=attempt, raw=response)

        raise LoginFailedError(tried, last_error)
