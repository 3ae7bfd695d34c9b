# flyover_cms/application/settings/service.py
from typing import Any, Dict, Optional

from flyover_cms.domain.exceptions import ValidationError
from flyover_cms.normalizers.document import normalize_document
from flyover_cms.persistence.gateway import MongoGateway
from flyover_cms.schemas.base import validate_payload
from flyover_cms.schemas.settings import SettingsSchema
from flyover_cms.utils.audit import log_action
from flyover_cms.utils.dates import utc_now
from flyover_cms.utils.store import store_operation

SETTINGS_COLLECTION = "system_settings"
SETTINGS_KEY = "system"


def defaults_from_config(config) -> Dict[str, Any]:
    return {
        "siteName": config.get("SITE_NAME", ""),
        "siteDescription": config.get("SITE_DESCRIPTION", ""),
        "adminEmail": config.get("ADMIN_EMAIL", ""),
        "maxFileSize": config.get("MAX_FILE_SIZE_MB", 10),
        "allowedFileTypes": list(config.get("ALLOWED_FILE_TYPES", [])),
        "enableRegistration": False,
        "enableEmailVerification": True,
        "maintenanceMode": False,
        "smtpHost": config.get("SMTP_HOST", ""),
        "smtpPort": config.get("SMTP_PORT", 587),
        "smtpUser": config.get("SMTP_USER", ""),
    }


class SettingsService:
    """
    Singleton system settings document.

    Reads fall back to configuration defaults until an admin saves the
    settings for the first time; saves upsert the one document.
    """

    def __init__(self, gateway: MongoGateway, defaults: Dict[str, Any]):
        self.gateway = gateway
        self.defaults = defaults

    @property
    def collection(self):
        return self.gateway.collection(SETTINGS_COLLECTION)

    def _stored(self) -> Optional[Dict[str, Any]]:
        with store_operation("fetch", "settings"):
            return self.collection.find_one({"key": SETTINGS_KEY})

    def get(self) -> Dict[str, Any]:
        settings = dict(self.defaults)
        stored = self._stored()
        if stored:
            settings.update(normalize_document(stored))
        settings.pop("key", None)
        return settings

    def update(self, payload: Any, *, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate the merged settings and upsert them.

        Accepts either ``{"settings": {...}}`` or the fields at the top level.
        """
        if isinstance(payload, dict) and isinstance(payload.get("settings"), dict):
            payload = payload["settings"]

        if not isinstance(payload, dict):
            raise ValidationError.for_field("body", "Request body must be a JSON object")

        current = self.get()
        for field in ("_id", "createdAt", "updatedAt"):
            current.pop(field, None)

        merged = {**current, **payload}
        data = validate_payload(SettingsSchema, merged)

        now = utc_now()
        with store_operation("update", "settings"):
            self.collection.update_one(
                {"key": SETTINGS_KEY},
                {
                    "$set": {**data, "updatedAt": now},
                    "$setOnInsert": {"key": SETTINGS_KEY, "createdAt": now},
                },
                upsert=True,
            )

        log_action(
            action="settings.update",
            entity_type="settings",
            entity_id=SETTINGS_KEY,
            actor_id=actor_id,
            payload={"fields": sorted(payload.keys())},
        )

        return self.get()
