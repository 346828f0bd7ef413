"""Normalización de resultados paginados.

El servidor devuelve listas paginadas de varias formas (`items`/`results`/
`data`, `totalCount`/`total`, lista desnuda...). `normalize_page` las reduce
todas a `Page[T]`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from core.domain.models import Page
from core.services.coercion import first_of, mapping, to_int

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _readable_items(container: list[Any], item_normalizer: Callable[[Any], T]) -> list[T]:
    """Normaliza cada fila; una fila ilegible se descarta sin tumbar la página."""

    items: list[T] = []
    for index, raw_item in enumerate(container):
        try:
            items.append(item_normalizer(raw_item))
        except ValidationError as exc:
            logger.warning("Skipping unreadable row %d (%d validation errors)", index, exc.error_count())
    return items


def normalize_page(raw: Any, item_normalizer: Callable[[Any], T]) -> Page[T]:
    if not raw:
        return Page[Any](items=[], page_number=1)

    if isinstance(raw, list):
        items = _readable_items(raw, item_normalizer)
        return Page[Any](
            items=items,
            total_count=len(items),
            total_pages=1,
            page_number=1,
            page_size=len(items),
        )

    source = mapping(raw)
    container = first_of(source.get("items"), source.get("results"), source.get("data"), [])
    items = _readable_items(container, item_normalizer) if isinstance(container, list) else []

    total_count = to_int(first_of(source.get("totalCount"), source.get("total")), len(items))
    total_pages = to_int(first_of(source.get("totalPages"), source.get("pages")), 1)
    page_number = to_int(first_of(source.get("pageNumber"), source.get("currentPage")), 1)
    page_size = to_int(first_of(source.get("pageSize"), source.get("pageLength")), len(items))
    has_previous = first_of(source.get("hasPreviousPage"), source.get("hasPrev"))
    has_next = first_of(source.get("hasNextPage"), source.get("hasMore"))

    return Page[Any](
        items=items,
        total_count=max(total_count or 0, 0),
        total_pages=max(total_pages or 0, 0),
        page_number=max(page_number or 1, 0),
        page_size=max(page_size or 0, 0),
        has_previous_page=bool(has_previous) if has_previous is not None else page_number > 1,
        has_next_page=bool(has_next) if has_next is not None else page_number < total_pages,
    )
