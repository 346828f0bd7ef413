"""Base común de los clientes de recurso.

Por qué una base:
- Todos comparten el `ApiClient`, la conversión de respuestas a modelos y el
  envío con `ShapeRetryPolicy`.
- Cada subclase solo declara su ruta, sus palabras clave de error y sus
  envolturas.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from adapters.http_client import ApiClient
from core.config import AppSettings
from core.domain.envelopes import ROOT, EnvelopeVariant
from core.domain.models import Page
from core.domain.status import DEFAULT_STATUS_CODEC, StatusCodec
from core.services.paging import normalize_page
from core.services.retry_policy import ShapeRetryPolicy

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")


def model_or_none(model: type[ModelT], raw: Any) -> ModelT | None:
    """Valida `raw` contra `model`.

    Cuerpos vacíos (204), no-objeto o que no encajan en el modelo dan None: la
    escritura ya se aplicó en el servidor y no debe parecer fallida.
    """

    if not isinstance(raw, Mapping):
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Ignoring unreadable %s body (%d validation errors)", model.__name__, exc.error_count())
        return None


def require_id(dto: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = dto.get(key)
        if value is not None and value != "":
            return value
    raise ValueError(f"An identifier ({' / '.join(keys)}) is required for this operation")


class BaseResourceClient:
    _path: str = ""

    def __init__(self, api: ApiClient, *, codec: StatusCodec = DEFAULT_STATUS_CODEC) -> None:
        self._api = api
        self._codec = codec

    @property
    def settings(self) -> AppSettings:
        return self._api.settings

    def _item_path(self, entity_id: int | str) -> str:
        return f"{self._path}/{entity_id}"

    def _policy(self, keyword: str, envelope_key: str) -> ShapeRetryPolicy:
        return ShapeRetryPolicy.for_operation(
            keyword,
            (ROOT, EnvelopeVariant.keyed(envelope_key)),
            max_attempts=self.settings.max_shape_attempts,
            codec=self._codec,
        )

    async def _send_with_policy(
        self,
        method: str,
        path: str,
        dto: Mapping[str, Any],
        policy: ShapeRetryPolicy,
    ) -> Any:
        async def send(body: dict[str, Any]) -> Any:
            return await self._api.request(method, path, json=body)

        return await policy.execute(dto, send)

    async def _get_page(
        self,
        path: str,
        params: Mapping[str, Any] | None,
        item: Callable[[Any], T],
    ) -> Page[T]:
        raw = await self._api.get(path, params=params)
        return normalize_page(raw, item)

    async def delete(self, entity_id: int | str) -> None:
        await self._api.delete(self._item_path(entity_id))
