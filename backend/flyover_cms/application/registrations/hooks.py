import logging

from flyover_cms.application.resources.hooks import ResourceHooks
from flyover_cms.domain.exceptions import Conflict, NotFound, ValidationError
from flyover_cms.utils.dates import normalize_ts
from flyover_cms.utils.ids import to_object_id
from flyover_cms.utils.store import store_operation

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"

# Statuses that hold one of the event's seats
SEAT_HOLDING = frozenset({"pending", "confirmed"})


class RegistrationHooks(ResourceHooks):
    """
    Event registration rules.

    Responsibilities:
    - Event must exist, be published, open and not full
    - One registration per (event, email)
    - Denormalise the event title and initial payment state
    - Keep the event's seatsRemaining counter in step
    """

    def _events(self, service):
        return service.gateway.collection(EVENTS_COLLECTION)

    def _find_event(self, service, event_id):
        object_id = to_object_id(event_id)
        if object_id is None:
            return None
        with store_operation("fetch", "event"):
            return self._events(service).find_one({"_id": object_id})

    @staticmethod
    def _is_full(event) -> bool:
        # capacity 0 means unlimited seating
        return bool(event.get("capacity")) and (event.get("seatsRemaining") or 0) <= 0

    def _shift_seats(self, service, event_id, delta: int) -> None:
        object_id = to_object_id(event_id)
        if object_id is None:
            return
        with store_operation("update", "event"):
            self._events(service).update_one(
                {"_id": object_id, "capacity": {"$gt": 0}},
                {"$inc": {"seatsRemaining": delta}},
            )

    # -------------------------------------------------
    # Create
    # -------------------------------------------------
    def before_create(self, service, doc, ctx):
        event = self._find_event(service, doc.get("eventId"))
        if event is None:
            raise NotFound("Event not found")

        if event.get("status") != "published":
            raise ValidationError.for_field("eventId", "Event is not available for registration")

        deadline = event.get("registrationDeadline")
        if deadline and normalize_ts(deadline) < ctx.now:
            raise ValidationError.for_field("eventId", "Registration deadline has passed")

        if self._is_full(event):
            raise Conflict("Event is fully booked")

        with store_operation("fetch", "registration"):
            duplicate = service.collection.find_one(
                {"eventId": doc["eventId"], "email": doc["email"]},
                {"_id": 1},
            )
        if duplicate is not None:
            raise Conflict("You have already registered for this event")

        is_free = event.get("isFree", True)
        doc["eventId"] = str(event["_id"])
        doc["eventTitle"] = event.get("title", "")
        doc["registrationDate"] = ctx.now
        doc["status"] = "pending"
        doc["paymentStatus"] = "paid" if is_free else "pending"
        doc["paymentAmount"] = 0 if is_free else event.get("price", 0)

    def after_create(self, service, doc, ctx):
        self._shift_seats(service, doc["eventId"], -1)
        logger.info(
            "Registration %s created for event %s",
            doc["_id"],
            doc["eventId"],
        )

    # -------------------------------------------------
    # Status changes
    # -------------------------------------------------
    @staticmethod
    def _seat_change(existing, changes) -> int:
        """-1 when the update takes a seat, +1 when it frees one, else 0."""
        if "status" not in changes:
            return 0

        # Only cancelling gives the seat up; attendance outcomes keep it
        was_cancelled = existing.get("status") == "cancelled"
        now_cancelled = changes["status"] == "cancelled"
        if now_cancelled and not was_cancelled:
            return 1
        if was_cancelled and not now_cancelled:
            return -1
        return 0

    def before_update(self, service, existing, changes, ctx):
        if self._seat_change(existing, changes) >= 0:
            return

        event = self._find_event(service, existing.get("eventId"))
        if event is not None and self._is_full(event):
            raise Conflict("Event is fully booked")

    def after_update(self, service, existing, changes, ctx):
        delta = self._seat_change(existing, changes)
        if delta:
            self._shift_seats(service, existing.get("eventId"), delta)

    # -------------------------------------------------
    # Delete
    # -------------------------------------------------
    def after_delete(self, service, existing, ctx):
        if existing.get("status") in SEAT_HOLDING:
            self._shift_seats(service, existing.get("eventId"), 1)
