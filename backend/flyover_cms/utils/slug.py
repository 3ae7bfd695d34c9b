import re
from typing import Any, Optional

from pymongo.collection import Collection

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

FALLBACK_SLUG = "untitled"


def generate_slug(title: str) -> str:
    """
    Lowercase, collapse every run of non [a-z0-9] characters into a single
    hyphen and trim hyphens from both ends.
    """
    slug = _NON_ALNUM.sub("-", (title or "").lower()).strip("-")
    return slug or FALLBACK_SLUG


def unique_slug(
    collection: Collection,
    base: str,
    *,
    field: str = "slug",
    exclude_id: Optional[Any] = None,
) -> str:
    """
    Probe the collection for ``base``, then ``base-1``, ``base-2``, ... and
    return the first candidate no other document holds.

    ``exclude_id`` keeps a record from colliding with its own slug on edit.
    """
    candidate = base
    counter = 1

    while True:
        query = {field: candidate}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}

        if collection.find_one(query, {"_id": 1}) is None:
            return candidate

        candidate = f"{base}-{counter}"
        counter += 1
