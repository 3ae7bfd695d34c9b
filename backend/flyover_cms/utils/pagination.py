# flyover_cms/utils/pagination.py
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple, TypedDict

from pymongo.collection import Collection


class PageResult(TypedDict):
    """
    Offset pagination result.

    Explicit keys prevent contract drift across list endpoints.
    """
    items: List[Dict[str, Any]]
    page: int
    limit: int
    total: int
    totalPages: int


def clamp_page(page: Any, limit: Any, *, default_limit: int, max_limit: int) -> Tuple[int, int]:
    """
    Coerce raw query values into a usable (page, limit) pair.

    - page is 1-indexed and never below 1
    - limit falls back to ``default_limit`` and is capped at ``max_limit``
    """
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1

    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = default_limit

    page = max(page, 1)
    limit = min(max(limit, 1), max_limit)
    return page, limit


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def paginate(
    collection: Collection,
    query: Dict[str, Any],
    *,
    sort: Sequence[Tuple[str, int]],
    page: int,
    limit: int,
    projection: Optional[Dict[str, Any]] = None,
) -> PageResult:
    """
    Execute an offset-paginated query.

    Ordering contract: the caller's sort keys followed by ``_id`` so that
    documents sharing a sort value keep a stable position across pages.
    """
    ordering = list(sort)
    if not any(key == "_id" for key, _ in ordering):
        direction = ordering[-1][1] if ordering else -1
        ordering.append(("_id", direction))

    total = collection.count_documents(query)

    cursor = (
        collection.find(query, projection)
        .sort(ordering)
        .skip((page - 1) * limit)
        .limit(limit)
    )

    return {
        "items": list(cursor),
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages(total, limit),
    }
