"""Cliente de candidaturas (`Applications`).

Por qué dos builders:
- El alta viaja en PascalCase con el estado como etiqueta ("New").
- El cambio de estado viaja en camelCase y PascalCase a la vez, con el estado
  como entero canónico; si el servidor pide otro formato, `ShapeRetryPolicy`
  reintenta.
"""

from __future__ import annotations

import logging
from typing import Any

from adapters.resources.base import BaseResourceClient, model_or_none, require_id
from core.domain.filters import ApplicationFilter
from core.domain.models import ApplicationStatusHistory, JobApplication, Page
from core.domain.status import StatusEncoding
from core.interfaces.resource import ResourceClient
from core.services.dto_builder import (
    APPLICATION_CREATE_DTO,
    APPLICATION_STATUS_DTO,
    BuildOptions,
)

logger = logging.getLogger(__name__)

_CREATE_OPTIONS = BuildOptions(status_encoding=StatusEncoding.LABEL)


class ApplicationsClient(BaseResourceClient, ResourceClient[JobApplication]):
    _path = "Applications"

    async def list(self, filter: ApplicationFilter | None = None) -> Page[JobApplication]:
        params = (filter or ApplicationFilter()).to_params()
        return await self._get_page(self._path, params, JobApplication.model_validate)

    async def get(self, entity_id: int | str) -> JobApplication | None:
        return model_or_none(JobApplication, await self._api.get(self._item_path(entity_id)))

    async def history(self, entity_id: int | str) -> list[ApplicationStatusHistory]:
        application = await self.get(entity_id)
        if application is None:
            return []
        return sorted(
            application.status_history,
            key=lambda entry: entry.changed_date.timestamp() if entry.changed_date else 0.0,
        )

    async def create(self, data: Any) -> JobApplication | None:
        dto = APPLICATION_CREATE_DTO.build(data, _CREATE_OPTIONS)
        raw = await self._send_with_policy(
            "POST",
            self._path,
            dto,
            self._policy("createapplicationdto", "createApplicationDto"),
        )
        return model_or_none(JobApplication, raw)

    async def update_status(self, data: Any) -> JobApplication | None:
        """`PUT Applications/{id}/status` con `{applicationId, status, notes}`."""

        dto = APPLICATION_STATUS_DTO.build(data)
        entity_id = require_id(dto, "applicationId", "ApplicationId")
        logger.info("Updating application %s status to %s", entity_id, dto.get("status"))
        raw = await self._send_with_policy(
            "PUT",
            f"{self._item_path(entity_id)}/status",
            dto,
            self._policy("updatedto", "updateDto"),
        )
        return model_or_none(JobApplication, raw)

    async def update(self, data: Any) -> JobApplication | None:
        return await self.update_status(data)
