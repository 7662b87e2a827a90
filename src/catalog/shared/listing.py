"""Collection scanning, sorting and page slicing for list endpoints."""

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from protean.exceptions import ValidationError

SCAN_BATCH_SIZE = 200
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class Page:
    """One page of a listing plus the metadata needed to fetch the rest."""

    items: list = field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def scan(query, batch_size: int = SCAN_BATCH_SIZE) -> Iterator[Any]:
    """Yield every record matched by a DAO query, fetching in batches."""
    offset = 0
    while True:
        result = query.offset(offset).limit(batch_size).all()
        yield from result.items
        offset += batch_size
        if offset >= result.total or not result.items:
            break


def check_sort_field(sort: str, allowed: Iterable[str]) -> None:
    allowed = tuple(allowed)
    if sort not in allowed:
        raise ValidationError({"sort": [f"Cannot sort by '{sort}'. Allowed fields: {', '.join(allowed)}"]})


def sort_records(records: Iterable[Any], sort: str, descending: bool = False) -> list:
    """Sort records on one attribute; records missing a value go last."""
    records = list(records)
    present = [r for r in records if getattr(r, sort, None) is not None]
    missing = [r for r in records if getattr(r, sort, None) is None]
    present.sort(key=lambda r: getattr(r, sort), reverse=descending)
    return present + missing


def paginate(records: list, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Page:
    if page < 1:
        raise ValidationError({"page": ["Page must be at least 1"]})
    if limit < 1:
        raise ValidationError({"limit": ["Limit must be at least 1"]})

    start = (page - 1) * limit
    return Page(items=records[start : start + limit], total=len(records), page=page, limit=limit)
