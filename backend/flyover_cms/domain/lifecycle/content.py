from .status import StatusLifecycle

# archived is terminal: nothing leads back out of it
CONTENT_LIFECYCLE = StatusLifecycle(
    field="status",
    transitions={
        "draft": frozenset({"published"}),
        "published": frozenset({"draft", "archived"}),
        "archived": frozenset(),
    },
    initial="draft",
    creatable=frozenset({"draft", "published"}),
)

EVENT_LIFECYCLE = StatusLifecycle(
    field="status",
    transitions={
        "draft": frozenset({"published", "cancelled"}),
        "published": frozenset({"draft", "cancelled", "completed"}),
        "cancelled": frozenset(),
        "completed": frozenset(),
    },
    initial="draft",
    creatable=frozenset({"draft", "published"}),
)

REGISTRATION_LIFECYCLE = StatusLifecycle(
    field="status",
    transitions={
        "pending": frozenset({"confirmed", "cancelled"}),
        "confirmed": frozenset({"cancelled", "attended", "no-show"}),
        "cancelled": frozenset({"confirmed"}),
        "attended": frozenset(),
        "no-show": frozenset(),
    },
    initial="pending",
)
