"""Cliente de onboarding (solo lectura)."""

from __future__ import annotations

from typing import Any, Mapping

from adapters.resources.base import BaseResourceClient, model_or_none
from core.domain.models import Onboarding, Page


class OnboardingClient(BaseResourceClient):
    _path = "Onboarding"

    async def list(self, params: Mapping[str, Any] | None = None) -> Page[Onboarding]:
        return await self._get_page(self._path, params, Onboarding.model_validate)

    async def get(self, entity_id: int | str) -> Onboarding | None:
        return model_or_none(Onboarding, await self._api.get(self._item_path(entity_id)))
