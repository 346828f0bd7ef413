"""Contrato de los clientes de recurso (jobs, candidates, applications, offers)."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from core.domain.models import Page

EntityT = TypeVar("EntityT", covariant=True)


@runtime_checkable
class ResourceClient(Protocol[EntityT]):
    """Operaciones CRUD mínimas.

    Reglas de diseño:
    - Todo es asíncrono porque cada operación hace I/O (HTTP).
    - `create`/`update` aceptan entrada laxa (dict, modelo, dataclass); el
      cliente construye el DTO canónico una sola vez por operación.
    - Los errores se propagan como `core.errors.ApiError`.
    """

    async def create(self, data: Any) -> EntityT:
        ...

    async def update(self, data: Any) -> EntityT:
        ...

    async def get(self, entity_id: int | str) -> EntityT | None:
        ...

    async def delete(self, entity_id: int | str) -> None:
        ...

    async def list(self, *args: Any, **kwargs: Any) -> Page[Any]:
        ...
