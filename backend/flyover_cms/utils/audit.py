import logging
from typing import Optional

logger = logging.getLogger("flyover_cms.audit")


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    actor_id: Optional[str] = None,
    payload: dict | None = None
):
    logger.info(
        "%s %s=%s actor=%s payload=%s",
        action,
        entity_type,
        entity_id,
        actor_id or "anonymous",
        payload or {},
        extra={
            "action": action,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "actor_id": actor_id,
        },
    )
