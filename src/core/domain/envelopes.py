"""Estrategias de envoltura del cuerpo de una petición."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class EnvelopeVariant:
    """`key=None` envía el DTO en la raíz; si no, como `{key: dto}`."""

    name: str
    key: str | None = None

    @classmethod
    def keyed(cls, key: str) -> "EnvelopeVariant":
        return cls(name=f"keyed:{key}", key=key)

    @classmethod
    def pascal(cls, key: str) -> "EnvelopeVariant":
        pascal_key = key[:1].upper() + key[1:]
        return cls(name=f"pascal:{pascal_key}", key=pascal_key)

    def wrap(self, dto: Mapping[str, Any]) -> dict[str, Any]:
        body = dict(dto)
        if self.key is None:
            return body
        return {self.key: body}


ROOT = EnvelopeVariant(name="root")
