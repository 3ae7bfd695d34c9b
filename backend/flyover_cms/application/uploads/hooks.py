from flask import current_app

from flyover_cms.application.resources.hooks import ResourceHooks
from flyover_cms.utils.ids import to_object_id
from flyover_cms.utils.media import delete_file
from flyover_cms.utils.store import store_operation

USERS_COLLECTION = "users"


class UploadHooks(ResourceHooks):
    def after_delete(self, service, existing, ctx):
        delete_file(existing.get("storageKey"), current_app.config["UPLOAD_FOLDER"])

    def present_many(self, service, docs):
        """Join the uploader's name and email onto each upload."""
        ids = {to_object_id(doc.get("uploadedBy")) for doc in docs}
        ids.discard(None)

        users = {}
        if ids:
            with store_operation("fetch", "users"):
                cursor = service.gateway.collection(USERS_COLLECTION).find(
                    {"_id": {"$in": list(ids)}},
                    {"name": 1, "email": 1},
                )
                users = {str(user["_id"]): user for user in cursor}

        for doc in docs:
            user = users.get(doc.get("uploadedBy") or "")
            doc["uploader"] = (
                {"name": user.get("name"), "email": user.get("email")} if user else None
            )
        return docs
