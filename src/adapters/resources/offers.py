"""Cliente de cartas de oferta.

Por qué sondea endpoints:
- Según el despliegue la colección se llama `Offers`, `OfferLetters`,
  `hiring/offers`... Solo el listado prueba variantes; 404/405 avanzan a la
  siguiente y cualquier otro error se propaga.
- Las escrituras van siempre al endpoint primario (el primero configurado).
  No se recuerda qué variante respondió: cada listado vuelve a empezar.
"""

from __future__ import annotations

import logging
from typing import Any

from adapters.resources.base import BaseResourceClient, require_id
from core.domain.filters import OfferFilter
from core.domain.models import OfferLetter, Page
from core.errors import ApiError, NoEndpointAvailableError
from core.interfaces.resource import ResourceClient
from core.services.dto_builder import CREATE_OPTIONS, OFFER_DTO, UPDATE_OPTIONS
from core.services.offer_normalizer import normalize_offer
from core.services.paging import normalize_page

logger = logging.getLogger(__name__)

_ENDPOINT_MISS_STATUSES = frozenset({404, 405})


class OffersClient(BaseResourceClient, ResourceClient[OfferLetter]):
    @property
    def _endpoints(self) -> tuple[str, ...]:
        return tuple(self.settings.offer_endpoints)

    @property
    def _path(self) -> str:  # type: ignore[override]
        return self._endpoints[0]

    async def list(self, filter: OfferFilter | None = None) -> Page[OfferLetter]:
        params = (filter or OfferFilter()).to_params()
        raw = await self._try_endpoints(params)
        return normalize_page(raw, normalize_offer)

    async def _try_endpoints(self, params: dict[str, Any]) -> Any:
        for endpoint in self._endpoints:
            try:
                return await self._api.get(endpoint, params=params)
            except ApiError as exc:
                if exc.status_code not in _ENDPOINT_MISS_STATUSES:
                    raise
                logger.info("Offer endpoint %s answered HTTP %s; trying next", endpoint, exc.status_code)
        raise NoEndpointAvailableError(self._endpoints)

    async def get(self, entity_id: int | str) -> OfferLetter | None:
        raw = await self._api.get(self._item_path(entity_id))
        return normalize_offer(raw) if raw else None

    async def create(self, data: Any) -> OfferLetter | None:
        dto = OFFER_DTO.build(data, CREATE_OPTIONS)
        raw = await self._send_with_policy("POST", self._path, dto, self._policy("createofferdto", "createOfferDto"))
        return normalize_offer(raw) if raw else None

    async def update(self, data: Any) -> OfferLetter | None:
        dto = OFFER_DTO.build(data, UPDATE_OPTIONS)
        entity_id = require_id(dto, "Id")
        raw = await self._send_with_policy(
            "PUT",
            self._item_path(entity_id),
            dto,
            self._policy("updateofferdto", "updateOfferDto"),
        )
        return normalize_offer(raw) if raw else None
