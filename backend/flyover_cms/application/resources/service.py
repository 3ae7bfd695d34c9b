# flyover_cms/application/resources/service.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from flyover_cms.domain.derived import RuleContext, SlugRule
from flyover_cms.domain.exceptions import (
    Conflict,
    DuplicateSlug,
    NotFound,
    ValidationError,
)
from flyover_cms.normalizers.document import normalize_document
from flyover_cms.persistence.gateway import MongoGateway
from flyover_cms.schemas.base import validate_payload
from flyover_cms.utils.audit import log_action
from flyover_cms.utils.dates import utc_now
from flyover_cms.utils.ids import to_object_id
from flyover_cms.utils.order import compact_order
from flyover_cms.utils.pagination import PageResult, clamp_page, paginate
from flyover_cms.utils.query import categorical_filter, combine, search_filter
from flyover_cms.utils.store import store_operation

from .definition import ResourceDefinition

logger = logging.getLogger(__name__)

SLUG_RETRIES = 3


class ResourceService:
    """
    Generic CRUD service, instantiated once per resource definition.

    Flow for every write: validate -> resource hooks -> derived fields ->
    persist -> read back. Callers always receive normalised documents whose
    ``_id`` is a plain string.
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        gateway: MongoGateway,
        *,
        default_limit: int = 20,
        max_limit: int = 100,
    ):
        self.definition = definition
        self.gateway = gateway
        self.default_limit = default_limit
        self.max_limit = max_limit

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    @property
    def collection(self) -> Collection:
        return self.gateway.collection(self.definition.collection)

    @property
    def _noun(self) -> str:
        return self.definition.label.lower()

    def _context(self, actor_id: Optional[str] = None) -> RuleContext:
        return RuleContext(collection=self.collection, now=utc_now(), actor_id=actor_id)

    def _not_found(self) -> NotFound:
        return NotFound(f"{self.definition.label} not found")

    def _fetch(self, object_id) -> Dict[str, Any]:
        if object_id is None:
            raise self._not_found()
        with store_operation("fetch", self._noun):
            doc = self.collection.find_one({"_id": object_id})
        if doc is None:
            raise self._not_found()
        return doc

    def present(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return self.present_many([doc])[0]

    def present_many(self, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        docs = self.definition.hooks.present_many(self, docs)
        return [normalize_document(doc) for doc in docs]

    def ensure_indexes(self) -> None:
        definition = self.definition
        collection = self.collection
        for fields in definition.unique_indexes:
            collection.create_index([(f, ASCENDING) for f in fields], unique=True)
        for key, direction in definition.sort:
            collection.create_index([(key, direction)])

    # -------------------------------------------------
    # Slug collision handling
    # -------------------------------------------------
    def _slug_rules(self) -> List[SlugRule]:
        return [rule for rule in self.definition.rules if isinstance(rule, SlugRule)]

    def _raise_duplicate(self, fields: Mapping[str, Any], exclude_id=None, exc=None):
        """Classify a duplicate-key failure as a slug race or a real conflict."""
        for rule in self._slug_rules():
            slug = fields.get(rule.target)
            if slug is None:
                continue
            query: Dict[str, Any] = {rule.target: slug}
            if exclude_id is not None:
                query["_id"] = {"$ne": exclude_id}
            with store_operation("fetch", self._noun):
                taken = self.collection.find_one(query, {"_id": 1}) is not None
            if taken:
                raise DuplicateSlug(slug) from exc

        raise Conflict(f"{self.definition.label} already exists") from exc

    def _write_resolving_slugs(
        self,
        action: str,
        write: Callable[[], Any],
        fields: Dict[str, Any],
        ctx: RuleContext,
        *,
        exclude_id=None,
    ):
        for attempt in range(SLUG_RETRIES):
            try:
                with store_operation(action, self._noun):
                    return write()
            except DuplicateKeyError as exc:
                try:
                    self._raise_duplicate(fields, exclude_id=exclude_id, exc=exc)
                except DuplicateSlug as duplicate:
                    logger.info(
                        "Slug %s taken concurrently, re-probing (attempt %d)",
                        duplicate.slug,
                        attempt + 1,
                    )
                    fields.pop("_id", None)
                    with store_operation(action, self._noun):
                        for rule in self._slug_rules():
                            if rule.target in fields:
                                source = fields.get(rule.source, fields[rule.target])
                                fields[rule.target] = rule.resolve(ctx, source, exclude_id=exclude_id)

        raise Conflict(f"Could not allocate a unique slug for this {self._noun}")

    # -------------------------------------------------
    # Create
    # -------------------------------------------------
    def create(self, payload: Any, *, actor_id: Optional[str] = None) -> Dict[str, Any]:
        data = validate_payload(self.definition.schema, payload)
        return self.create_validated(data, actor_id=actor_id)

    def create_validated(self, data: Dict[str, Any], *, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Persist an already validated record.

        Responsibilities:
        - Initial status and lifecycle entry check
        - Resource hooks and derived fields
        - Timestamps
        - Audit logging
        """
        definition = self.definition
        ctx = self._context(actor_id)

        lifecycle = definition.lifecycle
        if lifecycle is not None:
            status = data.get(lifecycle.field) or lifecycle.initial
            lifecycle.assert_creatable(status)
            data[lifecycle.field] = status

        definition.hooks.before_create(self, data, ctx)

        # Slug and sequence rules query the collection
        with store_operation("create", self._noun):
            for rule in definition.rules:
                rule.on_create(data, ctx)

        data["createdAt"] = ctx.now
        data["updatedAt"] = ctx.now

        result = self._write_resolving_slugs(
            "create",
            lambda: self.collection.insert_one(data),
            data,
            ctx,
        )
        doc = self._fetch(result.inserted_id)

        definition.hooks.after_create(self, doc, ctx)

        log_action(
            action=f"{definition.name}.create",
            entity_type=definition.singular,
            entity_id=str(doc["_id"]),
            actor_id=actor_id,
        )

        return self.present(doc)

    # -------------------------------------------------
    # Read
    # -------------------------------------------------
    def get(self, item_id: Any) -> Dict[str, Any]:
        return self.present(self._fetch(to_object_id(item_id)))

    def find_one(self, criteria: Dict[str, Any]) -> Dict[str, Any]:
        with store_operation("fetch", self._noun):
            doc = self.collection.find_one(criteria)
        if doc is None:
            raise self._not_found()
        return self.present(doc)

    def list(
        self,
        *,
        page: Any = 1,
        limit: Any = None,
        search: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
        base_filter: Optional[Dict[str, Any]] = None,
    ) -> PageResult:
        """
        Paginated listing. An empty match is an empty page, never an error.
        """
        definition = self.definition
        page, limit = clamp_page(
            page,
            limit,
            default_limit=self.default_limit,
            max_limit=self.max_limit,
        )

        query = combine(
            base_filter,
            categorical_filter(filters or {}, definition.filter_fields),
            search_filter(search, definition.search_fields),
        )

        with store_operation("fetch", definition.plural):
            result = paginate(
                self.collection,
                query,
                sort=definition.sort,
                page=page,
                limit=limit,
            )

        result["items"] = self.present_many(result["items"])
        return result

    # -------------------------------------------------
    # Update
    # -------------------------------------------------
    def update(
        self,
        item_id: Any,
        payload: Any,
        *,
        actor_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply a partial update.

        Design rules:
        - Only fields present in the payload are validated and written
        - Derived fields are recomputed only when their inputs changed
        - A payload that changes nothing leaves the document untouched
        """
        definition = self.definition
        changes = validate_payload(
            definition.update_schema or definition.schema,
            payload,
            partial=True,
        )
        if not changes:
            raise ValidationError.for_field("body", "No valid fields provided for update")

        object_id = to_object_id(item_id)
        existing = self._fetch(object_id)
        ctx = self._context(actor_id)

        lifecycle = definition.lifecycle
        if lifecycle is not None and lifecycle.field in changes:
            lifecycle.assert_transition(
                from_status=existing.get(lifecycle.field),
                to_status=changes[lifecycle.field],
            )

        definition.hooks.before_update(self, existing, changes, ctx)

        changed_fields = [
            key for key, value in changes.items() if existing.get(key) != value
        ]
        if not changed_fields:
            return self.present(existing)

        with store_operation("update", self._noun):
            for rule in definition.rules:
                rule.on_update(existing, changes, ctx)

        changes["updatedAt"] = ctx.now

        result = self._write_resolving_slugs(
            "update",
            lambda: self.collection.update_one({"_id": object_id}, {"$set": changes}),
            changes,
            ctx,
            exclude_id=object_id,
        )
        if result.matched_count == 0:
            raise self._not_found()

        definition.hooks.after_update(self, existing, changes, ctx)

        log_action(
            action=f"{definition.name}.update",
            entity_type=definition.singular,
            entity_id=str(object_id),
            actor_id=actor_id,
            payload={"fields": changed_fields},
        )

        return self.present(self._fetch(object_id))

    # -------------------------------------------------
    # Delete
    # -------------------------------------------------
    def delete(self, item_id: Any, *, actor_id: Optional[str] = None) -> None:
        """Hard delete. Nothing referencing the record is touched."""
        definition = self.definition
        object_id = to_object_id(item_id)
        if object_id is None:
            raise self._not_found()

        ctx = self._context(actor_id)

        with store_operation("fetch", self._noun):
            existing = self.collection.find_one({"_id": object_id})
        if existing is None:
            raise self._not_found()

        definition.hooks.before_delete(self, existing, ctx)

        with store_operation("delete", self._noun):
            result = self.collection.delete_one({"_id": object_id})

        if result.deleted_count == 0:
            raise self._not_found()

        definition.hooks.after_delete(self, existing, ctx)

        log_action(
            action=f"{definition.name}.delete",
            entity_type=definition.singular,
            entity_id=str(object_id),
            actor_id=actor_id,
        )

    # -------------------------------------------------
    # Reorder
    # -------------------------------------------------
    def reorder(self, items: Any, *, actor_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Apply ``[{id, order}, ...]`` then re-compact every order to 1..N.

        Each document is written on its own; a failure part-way leaves the
        earlier writes in place.
        """
        definition = self.definition
        if not definition.ordered:
            raise ValidationError.for_field("order", f"{definition.label} does not support ordering")

        if not isinstance(items, list):
            raise ValidationError.for_field("body", "Expected a list of {id, order} objects")

        moves = []
        details = []
        for index, item in enumerate(items):
            object_id = to_object_id(item.get("id")) if isinstance(item, dict) else None
            order = item.get("order") if isinstance(item, dict) else None
            if object_id is None:
                details.append({"field": f"{index}.id", "message": "must be a valid identifier"})
            if not isinstance(order, int) or isinstance(order, bool) or order < 0:
                details.append({"field": f"{index}.order", "message": "must be a non-negative integer"})
            moves.append((object_id, order))

        if details:
            raise ValidationError("Validation failed", details=details)

        now = utc_now()
        with store_operation("reorder", definition.plural):
            for object_id, order in moves:
                self.collection.update_one(
                    {"_id": object_id},
                    {"$set": {"order": order, "updatedAt": now}},
                )
            compact_order(self.collection, now=now)
            docs = list(self.collection.find({}).sort([("order", ASCENDING), ("_id", ASCENDING)]))

        log_action(
            action=f"{definition.name}.reorder",
            entity_type=definition.singular,
            entity_id="*",
            actor_id=actor_id,
            payload={"count": len(moves)},
        )

        return self.present_many(docs)


__all__ = ["ResourceService", "ASCENDING", "DESCENDING"]
