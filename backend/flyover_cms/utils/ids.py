from typing import Any, Optional

from bson import ObjectId


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for ``value`` or None when it cannot be one."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
