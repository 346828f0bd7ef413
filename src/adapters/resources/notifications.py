"""Cliente de notificaciones de candidatos (`notifications`)."""

from __future__ import annotations

from typing import Any

from adapters.resources.base import BaseResourceClient, model_or_none
from core.domain.models import Notification
from core.services.coercion import first_list, first_of, to_int


class NotificationsClient(BaseResourceClient):
    _path = "notifications"

    def _candidate_path(self, candidate_id: int | str) -> str:
        return f"{self._path}/candidate/{candidate_id}"

    async def for_candidate(self, candidate_id: int | str) -> list[Notification]:
        raw = await self._api.get(self._candidate_path(candidate_id))
        rows = raw if isinstance(raw, list) else first_list(raw, ("items", "notifications", "data"))
        found = (model_or_none(Notification, row) for row in rows)
        return [notification for notification in found if notification is not None]

    async def unread_count(self, candidate_id: int | str) -> int:
        raw = await self._api.get(f"{self._candidate_path(candidate_id)}/unread-count")
        if isinstance(raw, dict):
            raw = first_of(raw.get("count"), raw.get("unreadCount"), raw.get("UnreadCount"))
        return to_int(raw, 0)

    async def mark_read(self, notification_id: int | str) -> None:
        await self._api.put(f"{self._item_path(notification_id)}/read", json={})

    async def mark_all_read(self, candidate_id: int | str) -> None:
        await self._api.put(f"{self._candidate_path(candidate_id)}/mark-all-read", json={})

    async def create(self, notification: Notification) -> Notification | None:
        body: dict[str, Any] = notification.model_dump(mode="json", by_alias=True, exclude_none=True)
        return model_or_none(Notification, await self._api.post(self._path, json=body))
