"""Search, sort and pagination over in-memory record lists"""

import math
from dataclasses import dataclass
from typing import Any, Generic, List, Sequence, TypeVar

from parish_hub.domain.exceptions import InvalidRequestError

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a filtered list"""

    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def search(items: Sequence[T], term: str | None, fields: Sequence[str]) -> List[T]:
    """Keep items where any of the named fields contains the term (case-insensitive)"""
    if not term or not term.strip():
        return list(items)

    needle = term.strip().lower()
    return [
        item
        for item in items
        if any(
            isinstance(_field(item, name), str) and needle in _field(item, name).lower()
            for name in fields
        )
    ]


def sort_items(items: Sequence[T], field: str, descending: bool = False) -> List[T]:
    """
    Stable sort by a field.

    Items whose field is None always go last, for either direction.
    """
    present = [item for item in items if _field(item, field) is not None]
    missing = [item for item in items if _field(item, field) is None]
    present.sort(key=lambda item: _field(item, field), reverse=descending)
    return present + missing


def paginate(items: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    """
    Slice a list into a page.

    Pages are 1-based; a page past the end yields no items but still reports
    the total so callers can render their pager.
    """
    if page < 1:
        raise InvalidRequestError("page must be >= 1")
    if page_size < 1:
        raise InvalidRequestError("page_size must be >= 1")

    total = len(items)
    offset = (page - 1) * page_size
    return Page(
        items=list(items[offset : offset + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )
