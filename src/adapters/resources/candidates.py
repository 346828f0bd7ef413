"""Cliente de candidatos (`candidates`)."""

from __future__ import annotations

from typing import Any

from adapters.resources.base import BaseResourceClient, model_or_none, require_id
from core.domain.models import Candidate, Page
from core.interfaces.resource import ResourceClient
from core.services.dto_builder import CANDIDATE_DTO, UPDATE_OPTIONS, BuildOptions

# La contraseña solo viaja al dar de alta.
_CANDIDATE_CREATE_OPTIONS = BuildOptions(include_secrets=True)


class CandidatesClient(BaseResourceClient, ResourceClient[Candidate]):
    _path = "candidates"

    async def list(self, page_number: int = 1, page_size: int = 10) -> Page[Candidate]:
        return await self._get_page(
            self._path,
            {"pageNumber": page_number, "pageSize": page_size},
            Candidate.model_validate,
        )

    async def get(self, entity_id: int | str) -> Candidate | None:
        return model_or_none(Candidate, await self._api.get(self._item_path(entity_id)))

    async def search(self, query: str) -> list[Candidate]:
        raw = await self._api.get(f"{self._path}/search", params={"query": query})
        if isinstance(raw, dict):
            raw = raw.get("items") or raw.get("Items") or []
        if not isinstance(raw, list):
            return []
        found = (model_or_none(Candidate, item) for item in raw)
        return [candidate for candidate in found if candidate is not None]

    async def create(self, data: Any) -> Candidate | None:
        dto = CANDIDATE_DTO.build(data, _CANDIDATE_CREATE_OPTIONS)
        raw = await self._send_with_policy(
            "POST",
            self._path,
            dto,
            self._policy("createcandidatedto", "createCandidateDto"),
        )
        return model_or_none(Candidate, raw)

    async def update(self, data: Any) -> Candidate | None:
        dto = CANDIDATE_DTO.build(data, UPDATE_OPTIONS)
        entity_id = require_id(dto, "Id")
        raw = await self._send_with_policy(
            "PUT",
            self._item_path(entity_id),
            dto,
            self._policy("updatecandidatedto", "updateCandidateDto"),
        )
        return model_or_none(Candidate, raw)
