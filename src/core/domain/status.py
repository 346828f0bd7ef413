"""Estados de candidatura y su codec bidireccional.

El backend emite el estado como entero 1-indexado, 0-indexado o desplazado en
uno según el endpoint, o como texto. `StatusCodec` absorbe esas variantes sin
exigir un arreglo en el servidor.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping, Sequence


class ApplicationStatus(str, Enum):
    """Conjunto cerrado de estados de candidatura, en orden canónico.

    Por qué `str`:
    - El valor es la etiqueta que entiende el backend, así que el enum se
      serializa tal cual en JSON.
    """

    NEW = "New"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    HIRED = "Hired"


class StatusEncoding(str, Enum):
    CANONICAL = "canonical"
    ZERO_INDEXED = "zero_indexed"
    LABEL = "label"


APPLICATION_STATUS_ORDER: tuple[ApplicationStatus, ...] = (
    ApplicationStatus.NEW,
    ApplicationStatus.SHORTLISTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.HIRED,
)

APPLICATION_STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.NEW: "New",
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.HIRED: "Hired",
}

# Labels shown on the candidate portal.
APPLICATION_STATUS_HUMAN_LABELS: dict[str, ApplicationStatus] = {
    "under review": ApplicationStatus.NEW,
    "interview scheduled": ApplicationStatus.SHORTLISTED,
    "offer": ApplicationStatus.HIRED,
}


class StatusCodec:
    """Traduce estados entre sus codificaciones externas.

    - Entero canónico: posición 1-indexada en `order`.
    - Entero 0-indexado.
    - Etiqueta (nombre o etiqueta humana), sin distinguir mayúsculas.

    `to_canonical` nunca lanza: lo que no se puede traducir devuelve `None`.
    """

    def __init__(
        self,
        order: Sequence[ApplicationStatus] = APPLICATION_STATUS_ORDER,
        labels: Mapping[ApplicationStatus, str] = APPLICATION_STATUS_LABELS,
        human_labels: Mapping[str, ApplicationStatus] = APPLICATION_STATUS_HUMAN_LABELS,
    ) -> None:
        self._order = tuple(order)
        self._labels = dict(labels)
        self._by_code = {index + 1: status for index, status in enumerate(self._order)}
        self._by_text: dict[str, ApplicationStatus] = {}
        for status in self._order:
            self._by_text[status.value.lower()] = status
            self._by_text[status.name.lower()] = status
            self._by_text[self._labels.get(status, status.value).lower()] = status
        for label, status in human_labels.items():
            self._by_text.setdefault(label.lower(), status)

    @property
    def order(self) -> tuple[ApplicationStatus, ...]:
        return self._order

    def canonical_integer(self, status: ApplicationStatus) -> int:
        return self._order.index(status) + 1

    def to_label(self, status: ApplicationStatus) -> str:
        return self._labels.get(status, status.value)

    def encode(self, status: ApplicationStatus, encoding: StatusEncoding = StatusEncoding.CANONICAL) -> int | str:
        if encoding is StatusEncoding.CANONICAL:
            return self.canonical_integer(status)
        if encoding is StatusEncoding.ZERO_INDEXED:
            return self._order.index(status)
        return self.to_label(status)

    def to_canonical(self, raw: Any) -> ApplicationStatus | None:
        if raw is None or isinstance(raw, bool):
            return None
        if isinstance(raw, ApplicationStatus):
            return raw if raw in self._order else None
        if isinstance(raw, (int, float)):
            return self._from_number(raw)
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return None
            try:
                numeric = float(text)
            except ValueError:
                return self._by_text.get(text.lower())
            return self._from_number(numeric)
        return None

    def _from_number(self, value: int | float) -> ApplicationStatus | None:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        code = math.trunc(value)
        if code in self._by_code:
            return self._by_code[code]
        if 0 <= code < len(self._order):
            return self._order[code]
        # Off-by-one emitted by some endpoints.
        return self._by_code.get(code + 1)


DEFAULT_STATUS_CODEC = StatusCodec()
