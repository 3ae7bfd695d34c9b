# flyover_cms/domain/derived.py
"""
Derived-field rules.

A rule computes fields the caller never supplies directly (slug, read time,
publishedAt, legacy numeric ids, ...). The resource service runs every rule of
a definition on create, and on update hands each rule the existing document
plus the validated changes so it can recompute only what the change affects.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from flyover_cms.utils.dates import parse_datetime
from flyover_cms.utils.slug import generate_slug, unique_slug

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200


def calculate_read_time(content: str) -> str:
    word_count = len((content or "").split())
    minutes = math.ceil(word_count / WORDS_PER_MINUTE)
    return f"{minutes} min read"


def next_sequence(collection: Collection, field: str) -> int:
    last = collection.find_one(
        {field: {"$exists": True}},
        {field: 1},
        sort=[(field, DESCENDING)],
    )
    if not last or not isinstance(last.get(field), (int, float)):
        return 1
    return int(last[field]) + 1


@dataclass
class RuleContext:
    collection: Collection
    now: datetime
    actor_id: Optional[str] = None


class DerivedRule:
    def on_create(self, doc: Dict[str, Any], ctx: RuleContext) -> None:
        pass

    def on_update(
        self,
        existing: Dict[str, Any],
        changes: Dict[str, Any],
        ctx: RuleContext,
    ) -> None:
        pass


def _changed(existing: Dict[str, Any], changes: Dict[str, Any], field: str) -> bool:
    return field in changes and changes[field] != existing.get(field)


class SlugRule(DerivedRule):
    def __init__(self, source: str = "title", target: str = "slug"):
        self.source = source
        self.target = target

    def resolve(self, ctx: RuleContext, value: str, exclude_id=None) -> str:
        return unique_slug(
            ctx.collection,
            generate_slug(value),
            field=self.target,
            exclude_id=exclude_id,
        )

    def on_create(self, doc, ctx):
        doc[self.target] = self.resolve(ctx, doc.get(self.source, ""))

    def on_update(self, existing, changes, ctx):
        if _changed(existing, changes, self.source):
            changes[self.target] = self.resolve(
                ctx, changes[self.source], exclude_id=existing["_id"]
            )


class DefaultFromRule(DerivedRule):
    """Fill an empty ``target`` from ``source`` when the record is created."""

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target

    def on_create(self, doc, ctx):
        if not doc.get(self.target):
            doc[self.target] = doc.get(self.source)


class ReadTimeRule(DerivedRule):
    def __init__(self, source: str = "content", target: str = "readTime"):
        self.source = source
        self.target = target

    def on_create(self, doc, ctx):
        doc[self.target] = calculate_read_time(doc.get(self.source, ""))

    def on_update(self, existing, changes, ctx):
        if _changed(existing, changes, self.source):
            changes[self.target] = calculate_read_time(changes[self.source])


class PublishedAtRule(DerivedRule):
    """Stamp ``publishedAt`` once, on the first entry into published."""

    def __init__(
        self,
        status_field: str = "status",
        target: str = "publishedAt",
        published: str = "published",
    ):
        self.status_field = status_field
        self.target = target
        self.published = published

    def on_create(self, doc, ctx):
        if doc.get(self.status_field) == self.published:
            doc[self.target] = ctx.now.isoformat()
        else:
            doc[self.target] = ""

    def on_update(self, existing, changes, ctx):
        entering = (
            changes.get(self.status_field) == self.published
            and existing.get(self.status_field) != self.published
        )
        if entering and not existing.get(self.target):
            changes[self.target] = ctx.now.isoformat()


class SequenceRule(DerivedRule):
    """Legacy numeric ``id`` kept apart from the store identifier."""

    def __init__(self, target: str = "id"):
        self.target = target

    def on_create(self, doc, ctx):
        doc[self.target] = next_sequence(ctx.collection, self.target)


class OrderDefaultRule(DerivedRule):
    def __init__(self, target: str = "order"):
        self.target = target

    def on_create(self, doc, ctx):
        if doc.get(self.target) is None:
            doc[self.target] = next_sequence(ctx.collection, self.target)


class EventScheduleRule(DerivedRule):
    """
    Derives ``startAt`` from the free-text date and time fields and seeds
    ``seatsRemaining`` from ``capacity``. Later capacity changes are recounted
    by the event hooks, which can see the registrations.
    """

    def _start_at(self, date_text: Optional[str], time_text: Optional[str]):
        if not date_text:
            return None
        try:
            return parse_datetime(f"{date_text} {time_text or ''}".strip())
        except ValueError:
            logger.debug("Could not derive startAt from %r %r", date_text, time_text)
            return None

    def on_create(self, doc, ctx):
        doc["startAt"] = self._start_at(doc.get("date"), doc.get("time"))
        doc["seatsRemaining"] = doc.get("capacity") or 0

    def on_update(self, existing, changes, ctx):
        if _changed(existing, changes, "date") or _changed(existing, changes, "time"):
            changes["startAt"] = self._start_at(
                changes.get("date", existing.get("date")),
                changes.get("time", existing.get("time")),
            )
