"""Cliente de ofertas de empleo (`Jobs`)."""

from __future__ import annotations

from typing import Any

from adapters.resources.base import BaseResourceClient, model_or_none, require_id
from core.domain.models import Job, Page
from core.interfaces.resource import ResourceClient
from core.services.dto_builder import CREATE_OPTIONS, JOB_DTO, UPDATE_OPTIONS


class JobsClient(BaseResourceClient, ResourceClient[Job]):
    _path = "Jobs"

    async def list(self, page_number: int = 1, page_size: int = 10) -> Page[Job]:
        return await self._get_page(
            self._path,
            {"pageNumber": page_number, "pageSize": page_size},
            Job.model_validate,
        )

    async def list_public(self, page_number: int = 1, page_size: int = 10) -> Page[Job]:
        """Listado público (sin autenticación) para candidatos."""

        return await self._get_page(
            self.settings.public_jobs_endpoint,
            {"pageNumber": page_number, "pageSize": page_size},
            Job.model_validate,
        )

    async def get(self, entity_id: int | str) -> Job | None:
        return model_or_none(Job, await self._api.get(self._item_path(entity_id)))

    async def create(self, data: Any) -> Job | None:
        dto = JOB_DTO.build(data, CREATE_OPTIONS)
        raw = await self._send_with_policy("POST", self._path, dto, self._policy("createjobdto", "createJobDto"))
        return model_or_none(Job, raw)

    async def update(self, data: Any) -> Job | None:
        dto = JOB_DTO.build(data, UPDATE_OPTIONS)
        entity_id = require_id(dto, "Id")
        raw = await self._send_with_policy(
            "PUT",
            self._item_path(entity_id),
            dto,
            self._policy("updatejobdto", "updateJobDto"),
        )
        return model_or_none(Job, raw)
