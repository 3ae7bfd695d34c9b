from flyover_cms.application.resources.hooks import ResourceHooks
from flyover_cms.domain.exceptions import Conflict, Forbidden
from flyover_cms.utils.store import store_operation

UPLOADS_COLLECTION = "uploads"


class UserHooks(ResourceHooks):
    """Account guards and the read-time upload count."""

    def _email_taken(self, service, email, exclude_id=None) -> bool:
        query = {"email": email}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        with store_operation("fetch", "user"):
            return service.collection.find_one(query, {"_id": 1}) is not None

    def before_create(self, service, doc, ctx):
        if self._email_taken(service, doc["email"]):
            raise Conflict("User with this email already exists")

    def before_update(self, service, existing, changes, ctx):
        is_self = ctx.actor_id is not None and ctx.actor_id == str(existing["_id"])

        if is_self and "role" in changes and changes["role"] != existing.get("role"):
            raise Forbidden("You cannot change your own role")

        email = changes.get("email")
        if email and email != existing.get("email"):
            if self._email_taken(service, email, exclude_id=existing["_id"]):
                raise Conflict("User with this email already exists")

    def before_delete(self, service, existing, ctx):
        if ctx.actor_id is not None and ctx.actor_id == str(existing["_id"]):
            raise Forbidden("You cannot delete your own account")

    def present_many(self, service, docs):
        uploads = service.gateway.collection(UPLOADS_COLLECTION)
        with store_operation("fetch", "uploads"):
            for doc in docs:
                doc["uploadCount"] = uploads.count_documents({"uploadedBy": str(doc["_id"])})
        return docs
