"""Wrapper de httpx para el backend REST.

Por qué un wrapper:
- Estandariza base URL, timeouts, headers y el token Bearer.
- Convierte cualquier respuesta no exitosa en `ApiError` con el cuerpo ya
  decodificado, que es lo que necesitan las heurísticas de reintento.
- Expone un único punto (event hook de respuesta) donde se detecta el 401.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable, Iterable, Mapping

import httpx

from core.config import AppSettings
from core.errors import ApiError

logger = logging.getLogger(__name__)

RequestHook = Callable[[httpx.Request], Awaitable[None]]
ResponseHook = Callable[[httpx.Response], Awaitable[None]]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_hooks: Iterable[RequestHook] = (),
    response_hooks: Iterable[ResponseHook] = (),
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al backend.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los clientes de recurso se
      comporten igual.
    - Los hooks de request/response son el único lugar donde se toca la
      autenticación.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.api_base_url.rstrip("/") + "/",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
        event_hooks={
            "request": list(request_hooks),
            "response": list(response_hooks),
        },
    )


def bearer_token_hook(token_provider: Callable[[], str | None]) -> RequestHook:
    """Adjunta `Authorization: Bearer` si hay token persistido."""

    async def _attach(request: httpx.Request) -> None:
        token = token_provider()
        if token and "Authorization" not in request.headers:
            request.headers["Authorization"] = f"Bearer {token}"

    return _attach


def is_login_request(url: httpx.URL | str, login_endpoints: Iterable[str]) -> bool:
    path = httpx.URL(str(url)).path.lower().rstrip("/")
    if re.search(r"auth/login", path):
        return True
    return any(path.endswith("/" + endpoint.strip("/").lower()) for endpoint in login_endpoints)


def unauthorized_hook(
    on_unauthorized: Callable[[httpx.Request], None],
    login_endpoints: Iterable[str],
) -> ResponseHook:
    """Inspecciona cada respuesta: un 401 fuera del login fuerza el logout.

    Los intentos de login quedan excluidos para que el negociador pueda
    avanzar a la siguiente combinación y la UI mostrar su propio mensaje.
    """

    endpoints = tuple(login_endpoints)

    async def _inspect(response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        if is_login_request(response.request.url, endpoints):
            return
        logger.warning("HTTP 401 on %s; session expired", response.request.url.path)
        on_unauthorized(response.request)

    return _inspect


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None}


class ApiClient:
    """Cliente JSON fino sobre `httpx.AsyncClient`.

    Cada llamada es una sola petición: la política de reintentos vive en los
    clientes de recurso, no aquí.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        token_provider: Callable[[], str | None] | None = None,
        on_unauthorized: Callable[[httpx.Request], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        request_hooks: list[RequestHook] = []
        response_hooks: list[ResponseHook] = []
        if token_provider is not None:
            request_hooks.append(bearer_token_hook(token_provider))
        if on_unauthorized is not None:
            response_hooks.append(unauthorized_hook(on_unauthorized, self._settings.auth_login_endpoints))
        self._client = build_async_client(
            self._settings,
            transport=transport,
            request_hooks=request_hooks,
            response_hooks=response_hooks,
        )

    @property
    def settings(self) -> AppSettings:
        return self._settings

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = path.lstrip("/")
        logger.debug("%s %s", method, url)
        response = await self._client.request(
            method,
            url,
            params=_clean_params(params),
            json=json,
        )
        if response.is_error:
            raise ApiError(
                method=method,
                path=url,
                status_code=response.status_code,
                body=_decode_body(response),
            )
        return _decode_body(response)

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
