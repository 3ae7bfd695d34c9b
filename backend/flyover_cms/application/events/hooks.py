from flyover_cms.application.registrations.hooks import SEAT_HOLDING
from flyover_cms.application.resources.hooks import ResourceHooks
from flyover_cms.utils.store import store_operation

REGISTRATIONS_COLLECTION = "event_registrations"


class EventHooks(ResourceHooks):
    def _registrations(self, service):
        return service.gateway.collection(REGISTRATIONS_COLLECTION)

    def before_update(self, service, existing, changes, ctx):
        if "capacity" not in changes or changes["capacity"] == existing.get("capacity"):
            return

        # Seats are not tracked while capacity is 0, so recount instead of shifting
        capacity = changes["capacity"] or 0
        with store_operation("fetch", "registrations"):
            held = self._registrations(service).count_documents({
                "eventId": str(existing["_id"]),
                "status": {"$in": sorted(SEAT_HOLDING)},
            })
        changes["seatsRemaining"] = max(0, capacity - held)

    def present_many(self, service, docs):
        # Active registrations only; cancelled ones no longer count
        registrations = self._registrations(service)
        with store_operation("fetch", "registrations"):
            for doc in docs:
                doc["registrationCount"] = registrations.count_documents({
                    "eventId": str(doc["_id"]),
                    "status": {"$ne": "cancelled"},
                })
        return docs
