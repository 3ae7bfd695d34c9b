from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from flyover_cms.domain.exceptions import InvalidTransition


@dataclass(frozen=True)
class StatusLifecycle:
    """
    Explicit allowed state transitions for one status field.
    Single source of truth for status changes on a resource.
    """

    field: str
    transitions: Dict[str, FrozenSet[str]]
    initial: Optional[str] = None
    creatable: FrozenSet[str] = field(default_factory=frozenset)

    def can_transition(self, from_status: Optional[str], to_status: str) -> bool:
        if from_status == to_status:
            return True
        if from_status is None:
            # Legacy documents without a status accept any known target
            return to_status in self.transitions
        return to_status in self.transitions.get(from_status, frozenset())

    def assert_transition(self, *, from_status: Optional[str], to_status: str) -> None:
        if not self.can_transition(from_status, to_status):
            raise InvalidTransition(
                field=self.field,
                from_status=from_status or "none",
                to_status=to_status,
            )

    def assert_creatable(self, status: str) -> None:
        if self.creatable and status not in self.creatable:
            raise InvalidTransition(
                field=self.field,
                from_status="none",
                to_status=status,
            )
