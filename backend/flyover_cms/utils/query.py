# flyover_cms/utils/query.py
import re
from typing import Any, Dict, Iterable, Mapping, Optional

# Query-string values that mean "no filter"
WILDCARD_VALUES = {"", "all"}


def search_filter(search: Optional[str], fields: Iterable[str]) -> Dict[str, Any]:
    """
    Case-insensitive substring match across ``fields`` (OR'd together).
    The search text is escaped: it is never interpreted as a pattern.
    """
    fields = list(fields)
    if not search or not search.strip() or not fields:
        return {}

    pattern = re.compile(re.escape(search.strip()), re.IGNORECASE)
    return {"$or": [{field: pattern} for field in fields]}


def categorical_filter(
    values: Mapping[str, Any],
    allowed: Iterable[str],
) -> Dict[str, Any]:
    """Exact-match filters on the allowed fields, AND'd together."""
    query: Dict[str, Any] = {}
    for field in allowed:
        value = values.get(field)
        if value is None:
            continue
        if isinstance(value, str) and value.strip().lower() in WILDCARD_VALUES:
            continue
        query[field] = _coerce(value)
    return query


def _coerce(value):
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return value.strip()
    return value


def combine(*clauses: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    parts = [clause for clause in clauses if clause]
    if not parts:
        return {}
    if len(parts) == 1:
        return parts[0]
    return {"$and": parts}
