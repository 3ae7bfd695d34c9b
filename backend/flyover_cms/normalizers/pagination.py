# flyover_cms/normalizers/pagination.py
from typing import Any, Callable, Dict

from flyover_cms.utils.pagination import PageResult


def normalize_pagination(
    result: PageResult,
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    key: str = "items",
) -> Dict[str, Any]:
    """
    Normalize paginated API responses.

    Items go under the resource's plural key; the offset metadata always
    sits under ``pagination``.
    """
    return {
        "success": True,
        key: [normalize_fn(item) for item in result["items"]],
        "pagination": {
            "page": result["page"],
            "limit": result["limit"],
            "total": result["total"],
            "totalPages": result["totalPages"],
        },
    }
