"""Conversión tolerante de valores leídos del backend.

Todas las funciones devuelven un valor por defecto en vez de lanzar: los
normalizadores de lectura nunca deben romper la UI por un campo raro.
"""

from __future__ import annotations

import math
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from core.services.dto_builder import extract_leading_number, parse_datetime, resolve_alias

_SPLIT_RE = re.compile(r"[,\n;]+")


def mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def pick(raw: Any, *aliases: str) -> Any | None:
    """Primer alias presente en `raw` (si no es un mapping, nada)."""

    return resolve_alias(mapping(raw), aliases)


def first_of(*values: Any) -> Any | None:
    for value in values:
        if value is not None:
            return value
    return None


def to_text(value: Any, default: str | None = None) -> str | None:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return default


def to_number(value: Any, default: float | None = None) -> int | float | None:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    try:
        parsed = float(str(value).strip())
    except ValueError:
        return default
    if not math.isfinite(parsed):
        return default
    return int(parsed) if parsed.is_integer() else parsed


def to_int(value: Any, default: int | None = None) -> int | None:
    number = to_number(value)
    if number is None:
        return default
    return int(number)


def to_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    return parse_datetime(value)


def to_datetime_or_now(value: Any) -> datetime:
    return to_datetime(value) or datetime.now(timezone.utc)


def string_list(source: Any) -> list[str]:
    """Lista de textos desde lista de strings/objetos o texto delimitado."""

    if not source:
        return []
    if isinstance(source, str):
        return [part.strip() for part in _SPLIT_RE.split(source) if part.strip()]
    if not isinstance(source, (list, tuple)):
        return []
    out: list[str] = []
    for item in source:
        if isinstance(item, Mapping):
            value = first_of(*(item.get(k) for k in ("label", "name", "title", "value", "id")))
            text = "" if value is None else str(value).strip()
        else:
            text = "" if item is None else str(item).strip()
        if text:
            out.append(text)
    return out


def first_list(raw: Any, keys: Sequence[str]) -> list[Any]:
    """Primer contenedor que sea lista (`items ?? events ?? data ?? []`)."""

    source = mapping(raw)
    for key in keys:
        value = source.get(key)
        if isinstance(value, list):
            return value
    return []


def coerce_id(raw: Any, keys: Sequence[str], prefix: str) -> str:
    value = pick(raw, *keys)
    if value is not None:
        return str(value)
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def to_amount(value: Any) -> int | float | None:
    """Importe numérico; de textos como "90k" o "80,000 EUR" toma la cifra inicial."""

    number = to_number(value)
    if number is None and isinstance(value, str):
        return extract_leading_number(value)
    return number
