from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from flyover_cms.domain.derived import RuleContext

if TYPE_CHECKING:
    from .service import ResourceService


class ResourceHooks:
    """
    Per-resource extension points around the generic CRUD flow.

    Every method is a no-op by default; a resource overrides only the
    moments it cares about. ``before_*`` hooks may raise any CMSError to
    abort the operation before anything is written.
    """

    def before_create(self, service: "ResourceService", doc: Dict[str, Any], ctx: RuleContext) -> None:
        pass

    def after_create(self, service: "ResourceService", doc: Dict[str, Any], ctx: RuleContext) -> None:
        pass

    def before_update(
        self,
        service: "ResourceService",
        existing: Dict[str, Any],
        changes: Dict[str, Any],
        ctx: RuleContext,
    ) -> None:
        pass

    def after_update(
        self,
        service: "ResourceService",
        existing: Dict[str, Any],
        changes: Dict[str, Any],
        ctx: RuleContext,
    ) -> None:
        pass

    def before_delete(self, service: "ResourceService", existing: Dict[str, Any], ctx: RuleContext) -> None:
        pass

    def after_delete(self, service: "ResourceService", existing: Dict[str, Any], ctx: RuleContext) -> None:
        pass

    def present_many(self, service: "ResourceService", docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Attach read-time fields (aggregates, joins) to stored documents."""
        return docs
