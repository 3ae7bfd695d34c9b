# flyover_cms/normalizers/document.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from bson import ObjectId

from flyover_cms.utils.dates import normalize_ts


def normalize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return normalize_ts(value).isoformat()
    if isinstance(value, dict):
        return {key: normalize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_value(item) for item in value]
    return value


def normalize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalizes a stored document into API-safe JSON.

    Notes:
    - ``_id`` is always serialized as a plain string; the store's native
      identifier type never leaves this layer
    - datetimes become timezone-aware ISO 8601 strings
    """
    if doc is None:
        raise ValueError("Document cannot be None")

    return {key: normalize_value(value) for key, value in doc.items()}
