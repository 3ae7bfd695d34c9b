from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple, Type

from pymongo import ASCENDING, DESCENDING

from flyover_cms.domain.derived import DerivedRule
from flyover_cms.domain.lifecycle import StatusLifecycle
from flyover_cms.schemas.base import Schema

from .hooks import ResourceHooks

ALL_OPERATIONS = frozenset({"list", "get", "create", "update", "delete"})
STAFF_ROLES = ("ADMIN", "SUPPORT")

NEWEST_FIRST = (("createdAt", DESCENDING),)
BY_ORDER = (("order", ASCENDING),)


@dataclass(frozen=True)
class ResourceDefinition:
    """
    Everything that distinguishes one admin resource from another.

    The generic ResourceService and the admin/public blueprints read these
    fields instead of carrying per-resource handlers.
    """

    name: str
    singular: str
    plural: str
    label: str
    collection: str
    schema: Type[Schema]
    update_schema: Optional[Type[Schema]] = None
    rules: Tuple[DerivedRule, ...] = ()
    search_fields: Tuple[str, ...] = ()
    filter_fields: Tuple[str, ...] = ()
    sort: Tuple[Tuple[str, int], ...] = NEWEST_FIRST
    lifecycle: Optional[StatusLifecycle] = None
    hooks: ResourceHooks = field(default_factory=ResourceHooks)
    operations: FrozenSet[str] = ALL_OPERATIONS
    read_roles: Tuple[str, ...] = STAFF_ROLES
    write_roles: Tuple[str, ...] = STAFF_ROLES
    # None keeps the resource off the public API
    public_filter: Optional[Dict[str, Any]] = None
    public_lookup: Optional[str] = None
    unique_indexes: Tuple[Tuple[str, ...], ...] = ()

    @property
    def ordered(self) -> bool:
        return any(key == "order" for key, _ in self.sort)

    @property
    def is_public(self) -> bool:
        return self.public_filter is not None

    def allows(self, operation: str) -> bool:
        return operation in self.operations
